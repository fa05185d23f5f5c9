"""Wallet screening pipeline constants."""

from typing import Final

# Batching
BATCH_SIZE: Final[int] = 5  # Addresses per analysis job
PROGRESS_EVERY_BATCHES: Final[int] = 2

# Job polling
POLL_INTERVAL_SECONDS: Final[float] = 15.0

# Analysis API endpoints
SUBMIT_BATCH_PATH: Final[str] = "/process_wallet_batch"
BATCH_STATUS_PATH: Final[str] = "/batch_status/{task_id}"

# Job states
STATUS_PROCESSING: Final[str] = "processing"
STATUS_COMPLETED: Final[str] = "completed"
STATUS_ERROR: Final[str] = "error"

SECONDS_PER_DAY: Final[int] = 86_400
SECONDS_PER_MINUTE: Final[int] = 60

# Telegram rejects messages above 4096 characters
TELEGRAM_MAX_MESSAGE_LENGTH: Final[int] = 4000

# Error classification keywords (lower-case substring match)
RATE_LIMIT_MARKERS: Final[tuple[str, ...]] = (
    "rate limit",
    "rate-limit",
    "ratelimit",
    "daily limit",
    "quota",
    "too many requests",
)
ADDRESS_ERROR_MARKERS: Final[tuple[str, ...]] = (
    "invalid wallet",
    "invalid address",
    "invalid solana address",
    "malformed address",
    "address validation",
    "wallet address validation",
)
