"""Test data factories using factory_boy.

These factories generate realistic analysis API payloads for WalletScreen tests.
"""

from tests.factories.wallet import (
    WalletRecordFactory,
    days_ago_iso,
    generate_valid_solana_address,
)

__all__ = [
    "WalletRecordFactory",
    "days_ago_iso",
    "generate_valid_solana_address",
]
