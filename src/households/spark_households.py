"""
Household nesting and costing on Spark DataFrames and RDDs.

Spark supplies the two things the household functions cannot do alone:

  - Grouping: groupBy() on an address struct column buckets rows by all
    three address fields, and collect_list() gathers each bucket's people
    into an array<struct> column.
  - Structured records: struct columns arrive in Python UDFs as Row
    objects, which reconstruction.py decodes by position.

Nested layout produced by nest_households():

    root
     |-- members: array<struct<first_name, last_name, age>>
     |-- address: struct<street, house_number, city>

collect_list() keeps the order rows reach the aggregation, which after a
shuffle is not guaranteed to match the input order. Tests that care about
member order sort first or compare as multisets.
"""

from collections.abc import Callable, Iterable

from pyspark.rdd import RDD
from pyspark.sql import Column, DataFrame, Row, SparkSession
from pyspark.sql import functions as F
from pyspark.sql.types import ArrayType, DoubleType, StructType

from src.households.membership_cost import household_cost
from src.households.nesting import PersonPredicate, build_household, filter_members
from src.households.reconstruction import (
    address_to_row,
    household_from_row,
    person_to_row,
)
from src.households.records import Address, Household, Person
from src.households.schema import ADDRESS_SCHEMA, HOUSEHOLD_SCHEMA, PERSON_SCHEMA

# ---------------------------------------------------------------------------
# Flat layout
# ---------------------------------------------------------------------------

FLAT_SCHEMA = StructType(
    list(PERSON_SCHEMA.struct_type().fields) + list(ADDRESS_SCHEMA.struct_type().fields)
)

COST_COLUMN = "cost"


def create_people_dataframe(
    spark: SparkSession, rows: Iterable[tuple[Person, Address]]
) -> DataFrame:
    """Build a flat DataFrame (one row per person) from (Person, Address) pairs."""
    data = [person_to_row(person) + address_to_row(address) for person, address in rows]
    return spark.createDataFrame(data, FLAT_SCHEMA)


def read_people_csv(spark: SparkSession, path: str) -> DataFrame:
    """Read a people CSV with the explicit flat schema (no inference)."""
    return spark.read.format("csv").option("header", "true").schema(FLAT_SCHEMA).load(path)


# ---------------------------------------------------------------------------
# Nest / explode
# ---------------------------------------------------------------------------


def person_struct() -> Column:
    """struct(first_name, last_name, age) in PERSON_SCHEMA order."""
    return F.struct(*[F.col(name) for name in PERSON_SCHEMA.field_names])


def address_struct() -> Column:
    """struct(street, house_number, city) in ADDRESS_SCHEMA order."""
    return F.struct(*[F.col(name) for name in ADDRESS_SCHEMA.field_names])


def nest_households(flat_df: DataFrame) -> DataFrame:
    """Group a flat people DataFrame into one row per address.

    Grouping on the address struct gives the same buckets as grouping on
    street, house_number and city directly.
    """
    return (
        flat_df.groupBy(address_struct().alias("address"))
        .agg(F.collect_list(person_struct()).alias("members"))
        .select(*HOUSEHOLD_SCHEMA.field_names)
    )


def explode_households(nested_df: DataFrame) -> DataFrame:
    """Flatten nested households back to one row per member."""
    return nested_df.select(F.explode("members").alias("person"), "address").select(
        *[F.col(f"person.{name}") for name in PERSON_SCHEMA.field_names],
        *[F.col(f"address.{name}") for name in ADDRESS_SCHEMA.field_names],
    )


def collect_households(nested_df: DataFrame) -> list[Household]:
    """Collect a nested DataFrame to the driver as Household values."""
    rows = nested_df.select(*HOUSEHOLD_SCHEMA.field_names).collect()
    return [household_from_row(row) for row in rows]


def group_rdd_into_households(pairs_rdd: RDD) -> RDD:
    """RDD version of the nest step: key by Address, groupByKey, build Households.

    Address hashes structurally, so groupByKey buckets equal addresses
    together no matter which partition they started in.
    """
    return (
        pairs_rdd.map(lambda pair: (pair[1], pair[0]))
        .groupByKey()
        .map(lambda entry: build_household(entry[1], entry[0]))
    )


# ---------------------------------------------------------------------------
# UDFs over nested columns
# ---------------------------------------------------------------------------


def household_row_cost(record: Row) -> float:
    """Decode a struct(members, address) Row and price the household."""
    return household_cost(household_from_row(record))


def household_cost_udf() -> Callable[..., Column]:
    """DoubleType UDF applying household_row_cost to a struct(members, address) column."""
    return F.udf(household_row_cost, DoubleType())


def with_household_cost(nested_df: DataFrame) -> DataFrame:
    """Append a cost column computed by household_cost() for every household."""
    cost_udf = household_cost_udf()
    household = F.struct(*HOUSEHOLD_SCHEMA.field_names)
    return nested_df.withColumn(COST_COLUMN, cost_udf(household))


def filter_members_column(members: Column | str, predicate: PersonPredicate) -> Column:
    """Filter an array<struct> members column with a predicate on Person.

    The UDF decodes every member before the predicate runs and re-encodes
    the survivors, so the column keeps its array<struct> type.
    """
    member_array = ArrayType(PERSON_SCHEMA.struct_type(), containsNull=False)

    def _filter(records: list[Row]) -> list[tuple]:
        return filter_members(records, predicate)

    return F.udf(_filter, member_array)(members)


def with_filtered_members(nested_df: DataFrame, predicate: PersonPredicate) -> DataFrame:
    """Replace the members column with only the members matching predicate."""
    return nested_df.withColumn("members", filter_members_column("members", predicate))
