"""
Membership cost rule for households.

Individual cost is a step function of age:

    age < 5        3.00
    5 <= age < 18  5.00
    18 <= age < 60 10.50
    age >= 60      7.00

Household cost:
  1. Compute every member's individual cost and sort ascending
  2. The two most expensive members pay full price
  3. Everyone else pays half price
  4. Households inside the district get 10% off the total

Example: Anne (33), Zak (33) and Kaylee (3) at 28 second, Denver
    sorted costs [3.0, 10.5, 10.5]
    base  = 10.5 + 10.5 + 0.5 * 3.0 = 22.5
    in district -> 22.5 * 0.9 = 20.25

No rounding is applied to the result.
"""

from src.households.records import Address, Household, Person

# (exclusive upper age bound, cost), checked in ascending order
AGE_COST_BRACKETS: list[tuple[int, float]] = [
    (5, 3.00),
    (18, 5.00),
    (60, 10.50),
]
SENIOR_COST = 7.00

FULL_PRICE_MEMBERS = 2
DISCOUNTED_RATE = 0.5

DISTRICT_CITY = "Denver"
DISTRICT_STREETS = frozenset({"first", "second", "third"})
DISTRICT_MAX_HOUSE_NUMBER = 1000  # exclusive
DISTRICT_RATE = 0.9


def individual_cost(person: Person) -> float:
    """Cost of one member, from the first age bracket that matches."""
    for upper_bound, cost in AGE_COST_BRACKETS:
        if person.age < upper_bound:
            return cost
    return SENIOR_COST


def in_district(address: Address) -> bool:
    """True when the address is on a district street in Denver below number 1000."""
    city_matches = address.city == DISTRICT_CITY
    street_matches = address.street in DISTRICT_STREETS
    number_matches = address.house_number < DISTRICT_MAX_HOUSE_NUMBER
    return city_matches & street_matches & number_matches


def split_full_price(costs: list[float]) -> tuple[list[float], list[float]]:
    """Split ascending costs into (full_price, discounted).

    full_price holds the last FULL_PRICE_MEMBERS entries, or all of them
    when there are fewer.
    """
    cut = max(len(costs) - FULL_PRICE_MEMBERS, 0)
    return costs[cut:], costs[:cut]


def household_cost(household: Household) -> float:
    """Total membership cost for a household."""
    costs = sorted(individual_cost(person) for person in household.members)
    full_price, discounted = split_full_price(costs)

    base_price = sum(full_price) + DISCOUNTED_RATE * sum(discounted)

    if in_district(household.address):
        return base_price * DISTRICT_RATE
    return base_price
