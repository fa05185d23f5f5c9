"""WalletScreen exception hierarchy.

This module defines the base exception class and specialized exceptions
for the error categories of the screening pipeline.
"""


class WalletScreenError(Exception):
    """Base exception for all WalletScreen errors.

    All custom exceptions in WalletScreen should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class ConfigurationError(WalletScreenError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Missing required env var: TELEGRAM_BOT_TOKEN")
    """

    pass


class StorageError(WalletScreenError):
    """Raised when the criteria file cannot be read or written.

    This is the only error that is surfaced to the caller as a hard failure.
    The message includes the path of the backing file.

    Example:
        raise StorageError("conditions.json: Permission denied")
    """

    pass


class WizardFinishedError(WalletScreenError):
    """Raised when input is sent to a configuration wizard that already completed."""

    pass


class ExternalServiceError(WalletScreenError):
    """Raised when an external service call fails.

    Use this for errors from the batch analysis API or the Telegram Bot API.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.
        detail: The ``detail`` field of the error payload, if the service sent one.

    Example:
        raise ExternalServiceError(
            service="analysis", message="Rate limited", status_code=429
        )
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{service}: {message}")
