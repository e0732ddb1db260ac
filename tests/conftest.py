"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone
from typing import Any, Callable

from flow_app.data.models import Dataset, OptionType, TradeRecord


SAMPLE_CSV = """date,time,symbol,expiry,strike,put_call,side,spot,size,price,premium,sweep_block_split,volume,open_int,conds
11/18/2025,04:14:57 PM,SPY,12/05/2025,640,put,ask,659.74,150,$5.71,$85.7K,sweep,1646,4733,
11/18/2025,04:14:50 PM,SPY,11/19/2025,659,call,ask,659.83,201,$4.13,$83K,sweep,22249,360,unusual
11/18/2025,04:14:43 PM,SPY,12/19/2025,700,call,mid,659.80,225,$1.41,$31.8K,sweep,23540,97248,
11/18/2025,04:14:43 PM,SPY,11/19/2025,662,call,bid,659.78,150,$2.56,$38.4K,sweep,54933,583,unusual
11/18/2025,04:14:21 PM,SPY,11/20/2025,645,put,ask,659.68,250,$1.54,$38.5K,sweep,3452,1226,
11/18/2025,04:13:12 PM,SPY,11/18/2025,665,put,bid,659.65,1000,$5.30,$3M,block,54201,9214,
"""


def epoch_ms(year: int, month: int, day: int, hour: int = 0, minute: int = 0,
             second: int = 0) -> int:
    """UTC wall-clock time as epoch milliseconds."""
    moment = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


@pytest.fixture
def sample_csv() -> str:
    """Six SPY trades within two minutes, one of them a $3M put block."""
    return SAMPLE_CSV


@pytest.fixture
def trade_factory() -> Callable[..., TradeRecord]:
    """Build TradeRecords from a call-at-650 template with overrides."""
    counter = {"n": 0}

    def make_trade(**overrides: Any) -> TradeRecord:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "date": "11/18/2025",
            "time": "10:00:00 AM",
            "timestamp": epoch_ms(2025, 11, 18, 10, 0, 0) + counter["n"] * 1000,
            "symbol": "SPY",
            "expiry": "11/21/2025",
            "strike": 650.0,
            "put_call": OptionType.CALL,
            "side": "ask",
            "spot": 655.0,
            "size": 100.0,
            "price": 5.0,
            "premium": 50_000.0,
        }
        fields.update(overrides)
        return TradeRecord(**fields)

    return make_trade


@pytest.fixture
def sample_dataset(sample_csv: str) -> Dataset:
    """Sample CSV imported as a dataset."""
    from flow_app.persistence.project_store import import_csv

    return import_csv(sample_csv, "Sample_Data.csv", dataset_id="sample-1")
