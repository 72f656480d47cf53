"""
Loading the sample people dataset as (Person, Address) rows.

people.csv is flat, one person per line, with the address repeated for
every member of a household:

    first_name,last_name,age,street,house_number,city
    Anne,Smith,33,second,28,Denver
"""

from pathlib import Path

from src.common.data_loader import get_data_path, load_csv_as_tuples
from src.households.records import Address, Person

PEOPLE_CSV = get_data_path("households", "people.csv")


def parse_household_row(
    first_name: str,
    last_name: str,
    age: str,
    street: str,
    house_number: str,
    city: str,
) -> tuple[Person, Address]:
    """Turn one CSV line into a (Person, Address) pair."""
    return (
        Person(first_name, last_name, int(age)),
        Address(street, int(house_number), city),
    )


def load_household_rows(csv_path: str | Path = PEOPLE_CSV) -> list[tuple[Person, Address]]:
    """Load flat (Person, Address) rows from a people CSV file."""
    return load_csv_as_tuples(csv_path, parse_household_row)
