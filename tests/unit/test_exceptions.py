"""Tests for WalletScreen exception hierarchy."""

import pytest


class TestWalletScreenError:
    """Tests for base WalletScreenError exception."""

    def test_walletscreen_error_is_exception(self) -> None:
        """
        Given: WalletScreenError class
        When: Checking inheritance
        Then: It inherits from Exception
        """
        from walletscreen.core.exceptions import WalletScreenError

        assert issubclass(WalletScreenError, Exception)

    def test_walletscreen_error_can_be_raised(self) -> None:
        """
        Given: WalletScreenError
        When: Raised with a message
        Then: Message is accessible via str()
        """
        from walletscreen.core.exceptions import WalletScreenError

        with pytest.raises(WalletScreenError, match="Test error message"):
            raise WalletScreenError("Test error message")

    @pytest.mark.parametrize(
        "name",
        ["ConfigurationError", "StorageError", "WizardFinishedError"],
    )
    def test_subclasses_inherit_from_base(self, name: str) -> None:
        """
        Given: A specialised exception class
        When: Checking inheritance
        Then: It inherits from WalletScreenError
        """
        from walletscreen.core import exceptions

        assert issubclass(getattr(exceptions, name), exceptions.WalletScreenError)


class TestExternalServiceError:
    """Tests for ExternalServiceError exception."""

    def test_message_includes_service(self) -> None:
        """
        Given: ExternalServiceError with service and message
        When: Converting to string
        Then: Service name prefixes the message
        """
        from walletscreen.core.exceptions import ExternalServiceError

        error = ExternalServiceError(service="analysis", message="Timeout")
        assert str(error) == "analysis: Timeout"

    def test_status_code_and_detail_default_to_none(self) -> None:
        """
        Given: ExternalServiceError without status or detail
        When: Created
        Then: Both attributes are None
        """
        from walletscreen.core.exceptions import ExternalServiceError

        error = ExternalServiceError(service="analysis", message="Timeout")
        assert error.status_code is None
        assert error.detail is None

    def test_stores_status_code_and_detail(self) -> None:
        """
        Given: ExternalServiceError with status code and payload detail
        When: Created
        Then: Both are available as attributes
        """
        from walletscreen.core.exceptions import ExternalServiceError

        error = ExternalServiceError(
            service="analysis",
            message="Too many requests",
            status_code=429,
            detail="Daily rate limit exceeded",
        )
        assert error.status_code == 429
        assert error.detail == "Daily rate limit exceeded"
