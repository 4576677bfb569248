"""
Fail-safe error handler for rescue deal aggregations.

Runs derived-view computations and substitutes a renderable default when they
fail, logging the failure with diagnostic context.
"""

import logging
from typing import Any, Callable, Optional
from datetime import datetime


# Configure logging
logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Error handler that turns aggregation failures into default results.
    
    Aggregators must always hand the presentation layer a value it can
    render, so failures are logged and replaced instead of propagated.
    
    Attributes:
        failure_count: Number of operations that fell back to their default
        last_error: The most recent exception caught, if any
    """
    
    def __init__(self):
        """Initialize error handler with empty failure statistics."""
        self.failure_count = 0
        self.last_error: Optional[Exception] = None
    
    def run_with_fallback(
        self,
        operation: Callable,
        fallback: Callable[[], Any],
        *args,
        **kwargs
    ) -> Any:
        """
        Execute operation, returning fallback() if it raises.
        
        Args:
            operation: Callable to execute
            fallback: Zero-argument factory for the default result
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation
            
        Returns:
            Result of the operation, or the fallback value on failure
        """
        try:
            return operation(*args, **kwargs)
        except Exception as e:
            self.failure_count += 1
            self.last_error = e
            self._log_error(
                operation_name=getattr(operation, '__name__', repr(operation)),
                error=e,
                args=args,
                kwargs=kwargs
            )
            return fallback()
    
    def _log_error(
        self,
        operation_name: str,
        error: Exception,
        args: tuple,
        kwargs: dict
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.
        
        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            args: Positional arguments passed to the operation
            kwargs: Keyword arguments passed to the operation
        """
        # Deal collections can be long; log their size instead of contents
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': [
                f"<{type(a).__name__} of {len(a)}>" if isinstance(a, (list, tuple)) else str(a)
                for a in args
            ],
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }
        
        logger.error(
            f"Operation failed: {operation_name} | "
            f"Falling back to default result | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
