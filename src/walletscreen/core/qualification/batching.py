"""Parse wallet submissions and split them into analysis batches."""

from walletscreen.constants.screening import BATCH_SIZE


def parse_submission(text: str) -> list[str]:
    """Split a message into wallet addresses, one per line.

    Lines are trimmed and blank lines dropped; order is preserved.

    Example:
        >>> parse_submission("  abc \\n\\n def\\n")
        ['abc', 'def']
    """
    return [line.strip() for line in text.splitlines() if line.strip()]


def partition_batches(addresses: list[str], batch_size: int = BATCH_SIZE) -> list[list[str]]:
    """Split addresses into consecutive batches of ``batch_size``.

    Batch i holds ``addresses[i * batch_size:(i + 1) * batch_size]``; only the
    last batch may be smaller.

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size < 1:
        msg = f"batch_size must be positive, got {batch_size}"
        raise ValueError(msg)
    return [addresses[i : i + batch_size] for i in range(0, len(addresses), batch_size)]
