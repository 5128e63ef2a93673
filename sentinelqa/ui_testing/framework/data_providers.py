"""
================================================================================
Data Providers
================================================================================

Lazy, restartable record streams for data-driven UI tests.

Each provider reads one fixture file and yields one typed record per row.
Parsing is delegated to a reader chosen by the file suffix:

    .json         list of objects, or {"data": [...]}
    .csv          header row + rows
    .xlsx         first worksheet, header row + rows (openpyxl)
    .yaml / .yml  list of mappings, or {"data": [...]}

Usage:
    @pytest.mark.parametrize("user", LoginDataProvider.json().params())
    def test_login(user: User): ...

================================================================================
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, fields, is_dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, List, Type, TypeVar, Union

import pytest
import yaml
from loguru import logger
from openpyxl import load_workbook

from sentinel_tools.common import resolve_path

from .errors import DataProviderError


T = TypeVar("T")

Row = Dict[str, Any]


# ================================================================================
# Records
# ================================================================================

@dataclass(frozen=True)
class User:
    """Login credentials record."""
    username: str
    password: str

    def __str__(self) -> str:
        return f"User(username={self.username!r}, password='***')"


# ================================================================================
# Format Readers
# ================================================================================

def _unwrap(payload: Any, source: Path) -> List[Row]:
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise DataProviderError(f"Expected a list of records in {source}")
    return payload


def read_json(source: Path) -> Iterator[Row]:
    with open(source, "r", encoding="utf-8") as f:
        payload = json.load(f)
    yield from _unwrap(payload, source)


def read_yaml(source: Path) -> Iterator[Row]:
    with open(source, "r", encoding="utf-8") as f:
        payload = yaml.safe_load(f)
    yield from _unwrap(payload or [], source)


def read_csv(source: Path) -> Iterator[Row]:
    # utf-8-sig drops the BOM spreadsheet exports like to add
    with open(source, "r", encoding="utf-8-sig", newline="") as f:
        for row in csv.DictReader(f):
            yield {key.strip(): (value or "").strip() for key, value in row.items() if key}


def read_excel(source: Path) -> Iterator[Row]:
    workbook = load_workbook(source, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = sheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return
        keys = [str(cell).strip() if cell is not None else "" for cell in header]
        for values in rows:
            if values is None or all(cell is None for cell in values):
                continue
            # Trailing empty cells may be cut off
            values = tuple(values) + (None,) * (len(keys) - len(values))
            yield {
                key: "" if cell is None else str(cell)
                for key, cell in zip(keys, values)
                if key
            }
    finally:
        workbook.close()


READERS: Dict[str, Callable[[Path], Iterator[Row]]] = {
    ".json": read_json,
    ".csv": read_csv,
    ".xlsx": read_excel,
    ".yaml": read_yaml,
    ".yml": read_yaml,
}


# ================================================================================
# Providers
# ================================================================================

class DataProvider(Generic[T]):
    """
    Iterable of typed records backed by a fixture file.

    Every call to iter() re-opens the file, so the sequence can be consumed
    any number of times.

    Args:
        source: Fixture file path (relative paths resolve against the test data dir)
        record_type: Dataclass (or callable taking keyword fields) to build per row
    """

    def __init__(self, source: Union[str, Path], record_type: Type[T] = User):
        path = Path(source)
        if not path.is_absolute():
            path = resolve_path("paths.testdata", "testdata") / path
        self.source = path
        self.record_type = record_type

        reader = READERS.get(self.source.suffix.lower())
        if reader is None:
            raise DataProviderError(
                f"Unsupported data file '{self.source.name}'. "
                f"Supported: {', '.join(sorted(READERS))}"
            )
        self._reader = reader

    def __iter__(self) -> Iterator[T]:
        if not self.source.exists():
            raise DataProviderError(f"Data file not found: {self.source}")

        logger.debug(f"Reading records from {self.source}")
        rows = self._reader(self.source)
        index = 0
        while True:
            try:
                row = next(rows)
            except StopIteration:
                return
            except DataProviderError:
                raise
            except Exception as e:
                # Malformed JSON/YAML/CSV or a file that is not a workbook
                raise DataProviderError(f"Could not read {self.source.name}: {e}") from e
            index += 1
            yield self._to_record(row, index)

    def _to_record(self, row: Row, index: int) -> T:
        if not isinstance(row, dict):
            raise DataProviderError(f"Record {index} in {self.source.name} is not a mapping")

        if is_dataclass(self.record_type):
            known = {f.name for f in fields(self.record_type)}
            row = {key: value for key, value in row.items() if key in known}

        try:
            return self.record_type(**row)
        except TypeError as e:
            raise DataProviderError(
                f"Record {index} in {self.source.name} does not match "
                f"{self.record_type.__name__}: {e}"
            ) from e

    def records(self) -> List[T]:
        """Materialize all records."""
        return list(self)

    def params(self) -> List[Any]:
        """Records wrapped as pytest params, ids like 'loginData.json-1'."""
        return [
            pytest.param(record, id=f"{self.source.name}-{index}")
            for index, record in enumerate(self, start=1)
        ]

    def __repr__(self) -> str:
        return f"DataProvider({self.source.name!r}, {self.record_type.__name__})"


class LoginDataProvider:
    """Login credential providers, one per fixture format."""

    BASENAME = "loginData"

    @classmethod
    def json(cls) -> DataProvider[User]:
        return DataProvider(f"{cls.BASENAME}.json", User)

    @classmethod
    def csv(cls) -> DataProvider[User]:
        return DataProvider(f"{cls.BASENAME}.csv", User)

    @classmethod
    def excel(cls) -> DataProvider[User]:
        return DataProvider(f"{cls.BASENAME}.xlsx", User)


__all__ = [
    "DataProvider",
    "LoginDataProvider",
    "User",
    "READERS",
    "read_csv",
    "read_excel",
    "read_json",
    "read_yaml",
]
