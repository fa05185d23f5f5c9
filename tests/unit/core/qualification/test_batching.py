"""Tests for submission parsing and batch partitioning."""

import pytest

from walletscreen.core.qualification.batching import parse_submission, partition_batches


class TestParseSubmission:
    """Tests for parse_submission."""

    def test_one_address_per_line(self) -> None:
        assert parse_submission("a\nb\nc") == ["a", "b", "c"]

    def test_trims_and_drops_blank_lines(self) -> None:
        """
        Given: A message with padding, blank lines and CRLF endings
        When: Parsed
        Then: Only trimmed, non-empty addresses remain, in order
        """
        text = "  wallet1  \r\n\r\n\twallet2\n   \nwallet3\n"

        assert parse_submission(text) == ["wallet1", "wallet2", "wallet3"]

    def test_blank_message_gives_nothing(self) -> None:
        assert parse_submission(" \n\n ") == []

    def test_duplicates_kept(self) -> None:
        assert parse_submission("a\na") == ["a", "a"]


class TestPartitionBatches:
    """Tests for partition_batches."""

    def test_twelve_addresses_make_three_batches(self) -> None:
        addresses = [f"w{i}" for i in range(12)]

        batches = partition_batches(addresses, 5)

        assert [len(b) for b in batches] == [5, 5, 2]
        assert [a for b in batches for a in b] == addresses

    def test_exact_multiple(self) -> None:
        batches = partition_batches([f"w{i}" for i in range(10)], 5)

        assert [len(b) for b in batches] == [5, 5]

    def test_single_address(self) -> None:
        assert partition_batches(["only"]) == [["only"]]

    def test_empty_input(self) -> None:
        assert partition_batches([]) == []

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_size_rejected(self, size: int) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            partition_batches(["a"], size)
