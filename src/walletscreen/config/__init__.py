"""Configuration module for WalletScreen.

Usage:
    from walletscreen.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.batch_size)

Note:
    There is no module-level `settings` instance because that would fail
    on import when TELEGRAM_BOT_TOKEN isn't set. Use `get_settings()`.
"""

from walletscreen.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
