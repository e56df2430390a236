"""
Standardized exception hierarchy for the Aurae insights engine
Provides rich context, consistent logging, and user-friendly error messages

The report builder itself never raises for missing data; these errors cover
configuration problems and the async runner that wraps the builder.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class AuraeError(Exception):
    """
    Base exception for all Aurae errors

    Provides:
    - Automatic timestamping
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise AuraeError(
            message="Insights computation was abandoned",
            operation="build_report",
            context={"episode_count": 42}
        )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(AuraeError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Insights Errors
# ==========================================

class InsightsError(AuraeError):
    """Insights computation could not deliver a report"""
    pass


class InsightsTimeoutError(InsightsError):
    """Caller stopped waiting for an in-flight insights computation"""

    def __init__(
        self,
        message: str = "Insights computation did not finish in time",
        timeout: Optional[float] = None,
        **kwargs
    ):
        self.timeout = timeout
        super().__init__(
            message=message,
            operation="build_report",
            user_message="Your insights are still being prepared. Please try again shortly.",
            context={"timeout_seconds": timeout},
            **kwargs
        )
