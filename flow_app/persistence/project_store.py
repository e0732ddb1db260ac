"""Project file codec: datasets to and from the JSON project format."""

import time
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

import orjson

from ..data.merger import dataset_display_name
from ..data.models import Dataset
from ..data.normalizer import TradeNormalizer, rehydrate_compact
from ..errors import MissingDataError, ProjectFormatError
from ..logging.config import get_logger

logger = get_logger(__name__)


def _new_dataset_id() -> str:
    return str(int(time.time() * 1000))


def _upload_time() -> str:
    return datetime.now().strftime("%I:%M:%S %p")


def parse_json_payload(raw_data: str) -> Any:
    """
    Parse raw JSON text.

    Raises:
        ProjectFormatError: If the text is not valid JSON
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise ProjectFormatError(f"Invalid JSON: {e}", raw_data=str(raw_data)[:100])


def _dataset_rows(entry: Mapping[str, Any], index: int) -> list[Mapping[str, Any]]:
    """
    Return the keyed rows of a stored dataset, rehydrating compact form.

    Raises:
        ProjectFormatError: If headers, rows or data have the wrong shape
    """
    if entry.get("isCompact") and entry.get("headers") and entry.get("rows") is not None:
        headers, rows = entry["headers"], entry["rows"]
        if not isinstance(headers, list) or not all(isinstance(key, str) for key in headers):
            raise ProjectFormatError(
                f"Dataset at index {index} has invalid headers",
                context={"index": index}
            )
        if not isinstance(rows, list):
            raise ProjectFormatError(
                f"Dataset at index {index} has invalid rows",
                context={"index": index}
            )
        for row_index, row in enumerate(rows):
            if not isinstance(row, list):
                raise ProjectFormatError(
                    f"Row {row_index} of dataset at index {index} is not an array",
                    context={"index": index, "row": row_index}
                )
        return rehydrate_compact(headers, rows)

    data = entry.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProjectFormatError(
            f"Dataset at index {index} has invalid data",
            context={"index": index}
        )
    return [row for row in data if isinstance(row, Mapping)]


def load_project(raw_text: str, normalizer: Optional[TradeNormalizer] = None) -> list[Dataset]:
    """
    Load datasets from project file text.

    Each stored dataset carries its trades either as 'data' (a list of
    row objects) or in compact form ('isCompact', 'headers', 'rows'), which
    is rehydrated by zipping each row against the headers.

    Args:
        raw_text: Project file contents
        normalizer: Normalizer for the stored rows, UTC when omitted

    Returns:
        Datasets in stored order

    Raises:
        ProjectFormatError: If the text is not JSON, the top level is not an
            array, an entry is not a dataset object or its rows are malformed
    """
    loaded = parse_json_payload(raw_text)
    if not isinstance(loaded, list):
        raise ProjectFormatError(
            "Invalid project file format. Expected an array.",
            raw_data=str(raw_text)[:100]
        )

    normalizer = normalizer or TradeNormalizer()
    datasets = []

    for index, entry in enumerate(loaded):
        if not isinstance(entry, Mapping):
            raise ProjectFormatError(
                f"Dataset at index {index} is not an object",
                context={"index": index}
            )

        result = normalizer.normalize_rows(_dataset_rows(entry, index), source="project")
        file_name = str(entry.get("fileName") or "")
        datasets.append(Dataset(
            id=str(entry.get("id") or index),
            name=str(entry.get("name") or dataset_display_name(result.records, file_name)),
            file_name=file_name,
            records=result.records,
            upload_time=str(entry.get("uploadTime") or ""),
        ))

    logger.info(
        "Loaded project",
        datasets=len(datasets),
        records=sum(len(dataset) for dataset in datasets)
    )
    return datasets


def dump_project(datasets: Sequence[Dataset]) -> str:
    """
    Serialize datasets to project file text in compact form.

    Each non-empty dataset stores one header list and one value row per
    trade. Empty datasets keep an empty 'data' list.
    """
    stored = []
    for dataset in datasets:
        entry: dict[str, Any] = {
            "id": dataset.id,
            "name": dataset.name,
            "fileName": dataset.file_name,
            "uploadTime": dataset.upload_time,
        }
        if not dataset.records:
            entry["data"] = []
        else:
            rows = [record.to_row() for record in dataset.records]
            headers = list(rows[0].keys())
            entry.update({
                "isCompact": True,
                "headers": headers,
                "rows": [[row[key] for key in headers] for row in rows],
                "data": None,
            })
        stored.append(entry)

    return orjson.dumps(stored).decode("utf-8")


def import_csv(raw_text: str, file_name: str, dataset_id: Optional[str] = None,
               normalizer: Optional[TradeNormalizer] = None) -> Dataset:
    """
    Import tabular flow text as a new dataset.

    Raises:
        MissingDataError: If the text holds no data rows
    """
    normalizer = normalizer or TradeNormalizer()
    result = normalizer.normalize(raw_text)
    if not result.records:
        raise MissingDataError("No data found in CSV.", data_type="csv")

    dataset = Dataset(
        id=dataset_id or _new_dataset_id(),
        name=dataset_display_name(result.records, file_name),
        file_name=file_name,
        records=result.records,
        upload_time=_upload_time(),
    )

    logger.info("Imported CSV dataset", dataset_id=dataset.id, records=len(dataset))
    return dataset
