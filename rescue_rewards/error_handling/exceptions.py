"""Exceptions raised inside the rescue deal domain."""


class RescueRewardsError(Exception):
    """Base class for rescue rewards errors."""


class InvalidTransitionError(RescueRewardsError, ValueError):
    """A status change was requested on a deal that is no longer pending."""

    def __init__(self, deal_id: str, current_status: str, requested_status: str):
        self.deal_id = deal_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Cannot move deal {deal_id} from {current_status} to {requested_status}"
        )
