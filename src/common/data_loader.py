"""
Common data loading utilities for the examples.

CSV files live next to the code that uses them, under
src/<module>/data/. Rows are turned into typed records by a
caller-supplied factory so that parsing stays close to the record types.
"""

import csv
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TypeVar

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

SOURCE_DIR = PROJECT_ROOT / "src"

T = TypeVar("T")


def get_data_path(module: str, filename: str) -> Path:
    """
    Get the full path to a data file within a module's data directory.

    Args:
        module: Module directory name under src/ (e.g., "households")
        filename: Data file name (e.g., "people.csv")

    Returns:
        Full path to the data file
    """
    return SOURCE_DIR / module / "data" / filename


def resolve_path(csv_path: str | Path) -> Path:
    """Resolve a path relative to the project root unless it is absolute."""
    path = Path(csv_path)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def iter_csv_rows(csv_path: str | Path, skip_header: bool = True) -> Iterator[list[str]]:
    """
    Yield the non-empty rows of a CSV file as lists of strings.

    Args:
        csv_path: Path to the CSV file (absolute or relative to project root)
        skip_header: Whether to skip the first row (default: True)
    """
    with resolve_path(csv_path).open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)

        if skip_header:
            next(reader, None)

        for row in reader:
            if row:
                yield row


def load_csv_as_tuples(
    csv_path: str | Path,
    record_factory: Callable[..., T],
    skip_header: bool = True,
) -> list[T]:
    """
    Load a CSV file and convert each row with record_factory.

    Args:
        csv_path: Path to the CSV file (absolute or relative to project root)
        record_factory: Callable that accepts the row values positionally
        skip_header: Whether to skip the first row (default: True)

    Returns:
        List of records created by record_factory

    Example:
        rows = load_csv_as_tuples(
            get_data_path("households", "people.csv"),
            lambda first, last, age, street, number, city: (
                Person(first, last, int(age)),
                Address(street, int(number), city),
            ),
        )
    """
    return [record_factory(*row) for row in iter_csv_rows(csv_path, skip_header)]
