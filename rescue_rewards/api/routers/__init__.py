from . import deals, insights

__all__ = ['deals', 'insights']
