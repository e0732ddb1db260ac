"""Tests for dataset merging and dataset descriptors."""

from dataclasses import replace

from flow_app.data.merger import (
    available_expiries,
    dataset_display_name,
    deduplicate,
    describe_datasets,
    merge_datasets,
)
from flow_app.data.models import Dataset


def _dataset(dataset_id, records, file_name="flow.csv"):
    return Dataset(id=dataset_id, name=dataset_id, file_name=file_name, records=tuple(records))


class TestDeduplication:
    """Test composite-key deduplication."""

    def test_first_occurrence_wins(self, trade_factory):
        """Test duplicates are dropped and order is preserved."""
        a = trade_factory(premium=10_000.0)
        b = trade_factory(premium=20_000.0)
        duplicate_a = replace(a, side="bid")  # side is not part of the key

        assert deduplicate([a, b, duplicate_a]) == [a, b]

    def test_key_fields_distinguish(self, trade_factory):
        """Test trades differing in a key field are kept."""
        a = trade_factory()
        assert len(deduplicate([a, replace(a, size=a.size + 1)])) == 2
        assert len(deduplicate([a, replace(a, expiry="12/19/2025")])) == 2

    def test_idempotent(self, trade_factory):
        """Test deduplicating twice equals deduplicating once."""
        records = [trade_factory() for _ in range(3)]
        records = records + records
        once = deduplicate(records)
        assert deduplicate(once) == once


class TestMergeDatasets:
    """Test merge_datasets selection modes."""

    def test_merge_all_deduplicates(self, trade_factory):
        """Test the union drops trades present in several datasets."""
        shared = trade_factory()
        first = _dataset("a", [shared, trade_factory()])
        second = _dataset("b", [shared, trade_factory()])

        merged = merge_datasets([first, second], "all")

        assert len(merged) == 3
        assert merged[0] == shared
        assert merged[1] == first.records[1]
        assert merged[2] == second.records[1]

    def test_merging_same_dataset_twice(self, sample_dataset):
        """Test merging a dataset with itself keeps the same count."""
        once = merge_datasets([sample_dataset])
        twice = merge_datasets([sample_dataset, sample_dataset])

        assert len(twice) == len(once) == 6

    def test_single_selection_passes_through(self, trade_factory):
        """Test a single dataset is returned unchanged, duplicates included."""
        a = trade_factory()
        dataset = _dataset("a", [a, a])

        assert merge_datasets([dataset, _dataset("b", [])], "a") == [a, a]

    def test_unknown_selection(self, trade_factory):
        assert merge_datasets([_dataset("a", [trade_factory()])], "missing") == []

    def test_no_datasets(self):
        assert merge_datasets([]) == []


class TestExpiries:
    """Test expiry choices."""

    def test_sorted_by_calendar_date(self, sample_dataset):
        """Test expiries sort by date rather than text."""
        assert available_expiries(sample_dataset.records) == [
            "All", "11/18/2025", "11/19/2025", "11/20/2025", "12/05/2025", "12/19/2025",
        ]

    def test_year_boundary(self, trade_factory):
        """Test a January expiry sorts after December."""
        records = [trade_factory(expiry="01/16/2026"), trade_factory(expiry="12/19/2025")]
        assert available_expiries(records) == ["All", "12/19/2025", "01/16/2026"]

    def test_unparseable_last(self, trade_factory):
        records = [trade_factory(expiry="weekly"), trade_factory(expiry="12/19/2025")]
        assert available_expiries(records) == ["All", "12/19/2025", "weekly"]

    def test_empty(self):
        assert available_expiries([]) == []


class TestDisplayNames:
    """Test dataset naming helpers."""

    def test_name_from_first_trade(self, trade_factory):
        records = [trade_factory(time="04:14:57 PM")]
        assert dataset_display_name(records, "f.csv") == "SPY - 11/18/2025 04:14:57 PM"

    def test_name_without_time(self, trade_factory):
        assert dataset_display_name([trade_factory(time="", symbol="")], "f.csv") == "Data - 11/18/2025"

    def test_name_falls_back_to_file(self, trade_factory):
        assert dataset_display_name([trade_factory(date="")], "f.csv") == "f.csv"
        assert dataset_display_name([], "f.csv") == "f.csv"

    def test_describe_single_date(self, sample_dataset):
        assert describe_datasets([sample_dataset]) == "18 November 2025 (1 Dataset Loaded)"

    def test_describe_multiple_dates(self, trade_factory):
        datasets = [
            _dataset("a", [trade_factory()]),
            _dataset("b", [trade_factory(date="11/19/2025")]),
        ]
        assert describe_datasets(datasets) == "Multiple Dates (2 Datasets Loaded)"

    def test_describe_empty(self):
        assert describe_datasets([]) == "0 Datasets Loaded"
        assert describe_datasets([_dataset("a", [])]) == "1 Dataset Loaded"
