"""
Households: Row-Level UDFs over Nested Columns

Computes a membership cost for every household with a Python UDF that
takes the whole struct(members, address) row, decodes it into a typed
Household and applies the cost rule:

  - individual cost by age: <5 → 3.00, <18 → 5.00, <60 → 10.50, else 7.00
  - the two most expensive members pay full price, the rest pay half
  - addresses on first/second/third street in Denver below number 1000
    get 10% off

Also shows filtering inside a nested array. Members are decoded into Person
values first, the predicate runs on typed fields, and the survivors are
encoded back into the array<struct> column. Filtering on the raw Row fields
before decoding is brittle and is not done here.
"""

import sys

from pyspark.sql import functions as F

from src.common.spark_session import create_spark_session
from src.households.dataset import PEOPLE_CSV
from src.households.nesting import younger_than
from src.households.spark_households import (
    COST_COLUMN,
    nest_households,
    read_people_csv,
    with_filtered_members,
    with_household_cost,
)

UNDER_AGE_LIMIT = 30


def main() -> None:
    """Price every household in the sample dataset."""
    spark = create_spark_session(__file__)

    input_path = str(PEOPLE_CSV)
    if len(sys.argv) > 1:
        input_path = sys.argv[1]

    print("=" * 60)
    print("Households: Row-Level UDFs over Nested Columns")
    print("=" * 60)

    households_df = nest_households(read_people_csv(spark, input_path))

    # --- Household cost ---
    print("\n--- Household cost (UDF over struct(members, address)) ---\n")
    costed_df = with_household_cost(households_df)
    costed_df.orderBy(F.col(COST_COLUMN).desc()).show(truncate=False)

    # --- Filtering nested members ---
    print(f"--- Members under {UNDER_AGE_LIMIT} (decode, filter, re-encode) ---\n")
    young_df = with_filtered_members(households_df, younger_than(UNDER_AGE_LIMIT))
    young_df.printSchema()
    young_df.filter(F.size("members") > 0).show(truncate=False)

    # --- Cost of the under-30 members only ---
    print(f"--- Cost if only members under {UNDER_AGE_LIMIT} joined ---\n")
    with_household_cost(young_df).select("address", COST_COLUMN).orderBy("address").show(
        truncate=False
    )

    spark.stop()


if __name__ == "__main__":
    main()
