"""Tests for the project file codec and CSV import."""

import orjson
import pytest

from flow_app.data.models import Dataset, OptionType
from flow_app.data.normalizer import TradeNormalizer
from flow_app.errors import DataQualityError, MissingDataError, ProjectFormatError
from flow_app.persistence.project_store import (
    dump_project,
    import_csv,
    load_project,
    parse_json_payload,
)


class TestImportCsv:
    """Test importing tabular text as a dataset."""

    def test_import_sample(self, sample_dataset):
        assert sample_dataset.id == "sample-1"
        assert sample_dataset.name == "SPY - 11/18/2025 04:14:57 PM"
        assert sample_dataset.file_name == "Sample_Data.csv"
        assert len(sample_dataset) == 6
        assert sample_dataset.upload_time

    def test_generated_id(self, sample_csv):
        dataset = import_csv(sample_csv, "flow.csv")
        assert dataset.id.isdigit()

    def test_empty_csv_rejected(self):
        with pytest.raises(MissingDataError) as exc_info:
            import_csv("date,time,symbol\n", "empty.csv")
        assert str(exc_info.value) == "No data found in CSV."


class TestLoadProject:
    """Test reading project files."""

    def test_full_form(self):
        """Test datasets stored with keyed 'data' rows."""
        text = orjson.dumps([{
            "id": "d1",
            "name": "Morning",
            "fileName": "am.csv",
            "uploadTime": "09:31:00 AM",
            "data": [{
                "date": "11/18/2025", "time": "09:30:05 AM", "symbol": "QQQ",
                "expiry": "11/21/2025", "strike": 600, "put_call": "put",
                "size": 20, "price": 2.5, "premium": 5000, "spot": 601.2,
            }],
        }]).decode()

        datasets = load_project(text)

        assert len(datasets) == 1
        dataset = datasets[0]
        assert (dataset.id, dataset.name, dataset.file_name, dataset.upload_time) == (
            "d1", "Morning", "am.csv", "09:31:00 AM")
        record = dataset.records[0]
        assert record.put_call is OptionType.PUT
        assert record.premium == 5000.0
        assert record.timestamp > 0

    def test_compact_form(self):
        """Test compact datasets are rehydrated against their headers."""
        text = orjson.dumps([{
            "id": 7,
            "fileName": "c.csv",
            "isCompact": True,
            "headers": ["date", "time", "symbol", "strike", "put_call", "premium"],
            "rows": [
                ["11/18/2025", "10:00:00 AM", "SPY", "650", "call", "$50K"],
                ["11/18/2025", "10:00:01 AM", "SPY", "655", "put", "$1.2M"],
            ],
            "data": None,
        }]).decode()

        dataset = load_project(text)[0]

        assert dataset.id == "7"
        assert dataset.name == "SPY - 11/18/2025 10:00:00 AM"
        assert [record.premium for record in dataset.records] == [50_000.0, 1_200_000.0]

    def test_missing_id_uses_index(self):
        text = orjson.dumps([{"data": []}, {"data": []}]).decode()
        assert [dataset.id for dataset in load_project(text)] == ["0", "1"]

    def test_timezone_from_normalizer(self):
        text = orjson.dumps([{"data": [{"date": "11/18/2025", "time": "10:00:00 AM"}]}]).decode()

        utc = load_project(text)[0].records[0]
        eastern = load_project(text, TradeNormalizer("America/New_York"))[0].records[0]

        assert eastern.timestamp - utc.timestamp == 5 * 3600 * 1000

    def test_top_level_must_be_array(self):
        with pytest.raises(ProjectFormatError) as exc_info:
            load_project('{"id": "d1"}')
        assert str(exc_info.value) == "Invalid project file format. Expected an array."

    def test_entries_must_be_objects(self):
        with pytest.raises(ProjectFormatError):
            load_project("[1, 2]")

    def test_invalid_json(self):
        with pytest.raises(ProjectFormatError):
            load_project("not json")

    def test_format_errors_are_data_quality_errors(self):
        with pytest.raises(DataQualityError):
            parse_json_payload("{")

    @pytest.mark.parametrize("row", [None, 5, "11/18/2025", {"date": "11/18/2025"}])
    def test_compact_row_must_be_array(self, row):
        """Test a non-array compact row names its dataset and row."""
        text = orjson.dumps([
            {"data": []},
            {"isCompact": True, "headers": ["date", "time"], "rows": [["11/18/2025", "10:00:00 AM"], row]},
        ]).decode()

        with pytest.raises(ProjectFormatError) as exc_info:
            load_project(text)

        assert exc_info.value.context == {"index": 1, "row": 1}
        assert isinstance(exc_info.value, DataQualityError)

    @pytest.mark.parametrize("entry", [
        {"isCompact": True, "headers": "date,time", "rows": []},
        {"isCompact": True, "headers": ["date", 7], "rows": []},
        {"isCompact": True, "headers": ["date"], "rows": {"0": ["11/18/2025"]}},
        {"data": 5},
        {"data": "rows"},
    ])
    def test_malformed_dataset_shape(self, entry):
        with pytest.raises(ProjectFormatError) as exc_info:
            load_project(orjson.dumps([entry]).decode())
        assert exc_info.value.context == {"index": 0}

    def test_non_object_data_rows_skipped(self):
        text = orjson.dumps([{"data": [None, 5, {"date": "11/18/2025", "time": "10:00:00 AM"}]}]).decode()
        assert len(load_project(text)[0]) == 1


class TestDumpProject:
    """Test writing project files."""

    def test_round_trip(self, sample_dataset):
        """Test a saved project loads back to the same trades."""
        restored = load_project(dump_project([sample_dataset]))[0]

        assert restored.id == sample_dataset.id
        assert restored.name == sample_dataset.name
        assert restored.upload_time == sample_dataset.upload_time
        assert restored.records == sample_dataset.records

    def test_compact_layout(self, sample_dataset):
        stored = orjson.loads(dump_project([sample_dataset]))[0]

        assert stored["isCompact"] is True
        assert stored["data"] is None
        assert len(stored["rows"]) == 6
        assert len(stored["headers"]) == len(stored["rows"][0])
        assert "timestamp" in stored["headers"]

    def test_empty_dataset(self):
        stored = orjson.loads(dump_project([Dataset(id="e", name="e", file_name="e.csv")]))
        assert stored[0]["data"] == []
        assert "isCompact" not in stored[0]
