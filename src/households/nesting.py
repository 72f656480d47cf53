"""
Nesting flat (Person, Address) rows into households and flattening them back.

Nest:
  1. Partition the rows by Address (structural equality, all three fields)
  2. Keep each partition's people in input order
  3. Emit one Household per Address, ordered by first occurrence

Flatten (explode):
  One (Person, Address) row per member, every member paired with the
  household's shared address.

flatten_households(group_into_households(rows)) contains exactly the
input rows, though rows from different addresses may come out in a
different order.

Filtering members always happens on decoded Person values: structured
member records are decoded first, the predicate sees typed fields, and the
survivors are re-encoded for Spark.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from src.households.errors import InvalidGroupError
from src.households.reconstruction import person_from_row, person_to_row
from src.households.records import Address, Household, Person

PersonPredicate = Callable[[Person], bool]


def build_household(members: Iterable[Person], address: Address) -> Household:
    """Build a Household from one address group.

    Raises:
        InvalidGroupError: if the group has no members
    """
    owned = tuple(members)
    if not owned:
        raise InvalidGroupError(f"cannot build a household with no members at {address}")
    return Household(members=owned, address=address)


def group_into_households(rows: Iterable[tuple[Person, Address]]) -> list[Household]:
    """Group (Person, Address) rows into one Household per distinct Address.

    The whole input is read before any household is emitted, since a later
    row can belong to an earlier group. dict preserves insertion order, so
    households come out in order of each address's first appearance.
    """
    groups: dict[Address, list[Person]] = {}
    for person, address in rows:
        groups.setdefault(address, []).append(person)

    return [build_household(members, address) for address, members in groups.items()]


def explode_household(household: Household) -> list[tuple[Person, Address]]:
    """Pair every member with the household address, in member order."""
    return [(person, household.address) for person in household.members]


def flatten_households(households: Iterable[Household]) -> list[tuple[Person, Address]]:
    """Explode every household and concatenate the rows."""
    return [row for household in households for row in explode_household(household)]


def filter_household(household: Household, predicate: PersonPredicate) -> Household:
    """Keep the members matching predicate; the address is unchanged.

    The result may have no members. Filtering narrows an existing household
    rather than grouping, so it does not go through build_household().
    """
    kept = [person for person in household.members if predicate(person)]
    return Household(members=kept, address=household.address)


def filter_members(member_records: Sequence[Any], predicate: PersonPredicate) -> list[tuple]:
    """Filter an array<struct> of person records.

    Every record is decoded before the predicate runs, and the kept people
    are encoded back into positional records in PERSON_SCHEMA order.
    """
    people = [person_from_row(record) for record in member_records]
    return [person_to_row(person) for person in people if predicate(person)]


def younger_than(age_limit: int) -> PersonPredicate:
    """Return a predicate keeping people strictly younger than age_limit."""

    def _younger(person: Person) -> bool:
        return person.age < age_limit

    return _younger
