"""WalletScreen - Telegram bot that screens Solana wallets against user criteria."""

__version__ = "1.0.0"
