"""
Pytest configuration and shared fixtures for the household tests.
"""

import os
import sys
from pathlib import Path

import pytest
from pyspark.sql import SparkSession

from src.households.records import Address, Person

PROJECT_ROOT = Path(__file__).parent.parent

# Python workers must import src.households to run the UDFs, and must use
# the same interpreter as the driver.
os.environ["PYTHONPATH"] = os.pathsep.join(
    filter(None, [str(PROJECT_ROOT), os.environ.get("PYTHONPATH")])
)
os.environ.setdefault("PYSPARK_PYTHON", sys.executable)


@pytest.fixture(scope="session")
def spark() -> SparkSession:
    """
    Create a SparkSession for testing.

    Uses session scope to reuse the same Spark context across all tests,
    which significantly speeds up test execution.
    """
    spark = (
        SparkSession.builder
        .appName("pytest-households")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.ui.enabled", "false")
        .config("spark.driver.memory", "1g")
        .getOrCreate()
    )

    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture(scope="session")
def sc(spark: SparkSession):
    """SparkContext from the session fixture, for RDD tests."""
    return spark.sparkContext


@pytest.fixture
def smith_address() -> Address:
    return Address("second", 28, "Denver")


@pytest.fixture
def household_rows(smith_address: Address) -> list[tuple[Person, Address]]:
    """Flat rows for three addresses, interleaved."""
    rivera = Address("third", 18, "Denver")
    patel = Address("juniper", 1986, "Boulder")
    return [
        (Person("Anne", "Smith", 33), smith_address),
        (Person("Jo", "Rivera", 71), rivera),
        (Person("Zak", "Smith", 33), smith_address),
        (Person("Ravi", "Patel", 45), patel),
        (Person("Kaylee", "Smith", 3), smith_address),
        (Person("Mina", "Patel", 16), patel),
        (Person("Sam", "Rivera", 64), rivera),
    ]
