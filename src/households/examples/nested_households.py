"""
Households: Nesting Flat Rows into Hierarchical Records

Spark DataFrames are flat and columnar, but a column can hold a struct or
an array of structs. This example turns one-row-per-person data into
one-row-per-household data and back again.

Nest:
    groupBy(struct(street, house_number, city) AS address)
      .agg(collect_list(struct(first_name, last_name, age)) AS members)

Explode:
    select(explode(members) AS person, address)
      .select(person.*, address.*)

Three ways to nest are shown side by side:
  1. DataFrame groupBy + collect_list
  2. RDD groupByKey keyed by the Address NamedTuple
  3. Plain Python group_into_households() on the driver

Grouping by the address struct gives exactly the same buckets as grouping
by its three columns, because struct equality compares every field.
"""

import sys

from pyspark.sql import functions as F

from src.common.spark_session import create_spark_session
from src.households.dataset import PEOPLE_CSV, load_household_rows
from src.households.nesting import group_into_households
from src.households.spark_households import (
    collect_households,
    explode_households,
    group_rdd_into_households,
    nest_households,
    read_people_csv,
)


def main() -> None:
    """Nest the sample people dataset into households and flatten it again."""
    spark = create_spark_session(__file__)
    sc = spark.sparkContext

    input_path = str(PEOPLE_CSV)
    if len(sys.argv) > 1:
        input_path = sys.argv[1]

    print("=" * 60)
    print("Households: Nesting Flat Rows into Hierarchical Records")
    print("=" * 60)

    # --- Flat input ---
    print("\n--- Flat input (one row per person) ---\n")
    flat_df = read_people_csv(spark, input_path)
    flat_df.show(truncate=False)

    # --- 1. DataFrame nesting ---
    print("--- 1. DataFrame: groupBy(address struct) + collect_list(person struct) ---\n")
    nested_df = nest_households(flat_df)
    nested_df.printSchema()
    nested_df.show(truncate=False)

    by_columns = flat_df.groupBy("street", "house_number", "city").count()
    print(f"Groups by address struct: {nested_df.count()}")
    print(f"Groups by three columns:  {by_columns.count()}\n")

    # --- Explode back ---
    print("--- Explode: one row per member again ---\n")
    exploded_df = explode_households(nested_df)
    exploded_df.orderBy("city", "street", F.col("age").desc()).show(truncate=False)
    print(f"Rows before nesting: {flat_df.count()}  after exploding: {exploded_df.count()}\n")

    # --- Decoding rows on the driver ---
    print("--- Decoded Household values (driver side) ---\n")
    for household in collect_households(nested_df):
        names = ", ".join(f"{p.first_name}/{p.age}" for p in household.members)
        address = household.address
        print(f"  {address.house_number} {address.street}, {address.city}: {names}")

    # --- 2. RDD nesting ---
    print("\n--- 2. RDD: groupByKey on the Address NamedTuple ---\n")
    rows = load_household_rows(input_path)
    households_rdd = group_rdd_into_households(sc.parallelize(rows, numSlices=3))
    for household in sorted(households_rdd.collect(), key=lambda h: h.address):
        print(f"  {tuple(household.address)}: {len(household.members)} member(s)")

    # --- 3. Plain Python nesting ---
    print("\n--- 3. Driver-side group_into_households() (first-occurrence order) ---\n")
    for household in group_into_households(rows):
        print(f"  {tuple(household.address)}: {[p.first_name for p in household.members]}")

    print()
    spark.stop()


if __name__ == "__main__":
    main()
