"""
Record types for people, addresses and households.

All three are NamedTuples: immutable, compared and hashed by every field.
Structural hashing of Address is what lets it serve as a grouping key
(groupByKey, dict keys) with the same result as grouping on its three
columns.

Attribute names match the field names declared in src/households/schema.py,
and attribute order matches the declared field order.
"""

from collections.abc import Iterable
from typing import NamedTuple


class Person(NamedTuple):
    first_name: str
    last_name: str
    age: int


class Address(NamedTuple):
    street: str
    house_number: int
    city: str


class _HouseholdFields(NamedTuple):
    members: tuple[Person, ...]
    address: Address


class Household(_HouseholdFields):
    """People sharing one address.

    members is always stored as a tuple, so a Household never shares a
    mutable sequence with whoever built it. Use nesting.build_household()
    to construct one from a grouped sequence of people.
    """

    __slots__ = ()

    def __new__(cls, members: Iterable[Person], address: Address) -> "Household":
        return super().__new__(cls, tuple(members), address)
