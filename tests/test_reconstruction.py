"""
Tests for the schema descriptors and positional record decoding.
"""

from decimal import Decimal

import pytest
from pyspark.sql import Row
from pyspark.sql.types import ArrayType, IntegerType, StringType, StructType

from src.households.errors import DecodeError, HouseholdRecordError
from src.households.reconstruction import (
    address_from_row,
    address_to_row,
    household_from_row,
    household_to_row,
    person_from_row,
    person_to_row,
)
from src.households.records import Address, Household, Person
from src.households.schema import (
    ADDRESS_SCHEMA,
    HOUSEHOLD_SCHEMA,
    PERSON_SCHEMA,
    RECORD,
    Field,
    RecordSchema,
)


class TestSchemas:
    """The schema descriptors and the record types agree on field order."""

    @pytest.mark.parametrize(
        "schema, record_type",
        [(PERSON_SCHEMA, Person), (ADDRESS_SCHEMA, Address), (HOUSEHOLD_SCHEMA, Household)],
    )
    def test_field_order_matches_record_type(self, schema, record_type) -> None:
        assert schema.field_names == list(record_type._fields)

    def test_position(self) -> None:
        assert PERSON_SCHEMA.position("age") == 2
        assert ADDRESS_SCHEMA.position("house_number") == 1
        with pytest.raises(KeyError):
            PERSON_SCHEMA.position("middle_name")

    def test_struct_type(self) -> None:
        struct = HOUSEHOLD_SCHEMA.struct_type()

        assert struct.fieldNames() == ["members", "address"]
        members_type = struct["members"].dataType
        assert isinstance(members_type, ArrayType)
        assert members_type.elementType == PERSON_SCHEMA.struct_type()
        assert isinstance(struct["address"].dataType, StructType)
        assert PERSON_SCHEMA.struct_type()["age"].dataType == IntegerType()
        assert PERSON_SCHEMA.struct_type()["first_name"].dataType == StringType()

    def test_nested_field_without_schema_has_no_spark_type(self) -> None:
        broken = RecordSchema("Broken", 1, (Field("inner", RECORD),))
        with pytest.raises(ValueError):
            broken.struct_type()


class TestDecoding:
    """Tests for person_from_row / address_from_row / household_from_row."""

    def test_person_from_spark_row(self) -> None:
        row = Row(first_name="Anne", last_name="Smith", age=33)
        assert person_from_row(row) == Person("Anne", "Smith", 33)

    def test_person_from_plain_tuple(self) -> None:
        assert person_from_row(("Zak", "Smith", 33)) == Person("Zak", "Smith", 33)

    def test_integer_coercion(self) -> None:
        assert person_from_row(["Kaylee", "Smith", "3"]).age == 3
        assert address_from_row(("second", 28.0, "Denver")).house_number == 28

    def test_integral_decimal_is_accepted(self) -> None:
        address = address_from_row(("second", Decimal(28), "Denver"))

        assert address == Address("second", 28, "Denver")
        assert type(address.house_number) is int
        assert person_from_row(("Jo", "Rivera", Decimal("71.00"))).age == 71

    def test_negative_age_is_not_rejected(self) -> None:
        assert person_from_row(("Old", "Data", -1)).age == -1

    def test_extra_trailing_fields_are_ignored(self) -> None:
        assert address_from_row(("third", 18, "Denver", "CO")) == Address("third", 18, "Denver")

    def test_household_from_nested_rows(self) -> None:
        row = Row(
            members=[Row("Anne", "Smith", 33), Row("Kaylee", "Smith", 3)],
            address=Row("second", 28, "Denver"),
        )

        household = household_from_row(row)

        assert household.members == (Person("Anne", "Smith", 33), Person("Kaylee", "Smith", 3))
        assert household.address == Address("second", 28, "Denver")

    def test_empty_members_decode(self) -> None:
        household = household_from_row(([], ("second", 28, "Denver")))
        assert household.members == ()

    def test_decoding_is_repeatable(self) -> None:
        row = (["Anne", "Smith", "33"], ["Jo", "Rivera", 71]), ("third", 18, "Denver")
        assert household_from_row(row) == household_from_row(row)


class TestDecodeErrors:
    """Shape and type mismatches raise DecodeError."""

    def test_too_few_fields(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            person_from_row(("Anne", "Smith"))

        assert excinfo.value.field == "age"
        assert excinfo.value.position == 2

    def test_non_numeric_integer(self) -> None:
        with pytest.raises(DecodeError, match="non-numeric"):
            person_from_row(("Anne", "Smith", "thirty"))

    @pytest.mark.parametrize("value", [True, 2.5, [33]])
    def test_uncoercible_integer(self, value) -> None:
        with pytest.raises(DecodeError):
            person_from_row(("Anne", "Smith", value))

    def test_non_text_for_text_field(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            address_from_row((28, 28, "Denver"))

        assert excinfo.value.record_type == "Address"
        assert excinfo.value.field == "street"

    def test_null_required_field(self) -> None:
        with pytest.raises(DecodeError, match="null"):
            address_from_row(("second", None, "Denver"))

    def test_null_member_entry(self) -> None:
        row = ([("Anne", "Smith", 33), None], ("second", 28, "Denver"))
        with pytest.raises(DecodeError, match="null entry at index 1"):
            household_from_row(row)

    def test_nested_address_is_not_a_record(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            household_from_row(([], "28 second, Denver"))

        assert excinfo.value.field == "address"

    def test_nested_member_errors_propagate(self) -> None:
        row = ([("Anne", "Smith", "x")], ("second", 28, "Denver"))
        with pytest.raises(DecodeError) as excinfo:
            household_from_row(row)

        assert excinfo.value.record_type == "Person"

    def test_not_a_record(self) -> None:
        with pytest.raises(DecodeError):
            person_from_row("Anne,Smith,33")

    @pytest.mark.parametrize("value", [Decimal("28.5"), Decimal("NaN"), Decimal("Infinity")])
    def test_non_integral_decimal(self, value) -> None:
        with pytest.raises(DecodeError):
            address_from_row(("second", value, "Denver"))

    def test_error_names_schema_version(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            person_from_row(("Anne", "Smith", "thirty"))

        assert excinfo.value.version == PERSON_SCHEMA.version
        assert str(excinfo.value).startswith(
            f"Person.age (schema v{PERSON_SCHEMA.version}, position 2):"
        )

    def test_error_without_field_names_schema_version(self) -> None:
        with pytest.raises(DecodeError, match=r"^Address \(schema v1\): expected a structured"):
            address_from_row(42)

    def test_decode_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            person_from_row(())
        assert issubclass(DecodeError, HouseholdRecordError)


class TestEncoding:
    """Encoders emit fields in schema order and decode back to equal values."""

    def test_person_to_row(self) -> None:
        assert person_to_row(Person("Anne", "Smith", 33)) == ("Anne", "Smith", 33)

    def test_household_to_row_nests(self) -> None:
        household = Household(
            members=(Person("Anne", "Smith", 33),),
            address=Address("second", 28, "Denver"),
        )

        assert household_to_row(household) == (
            [("Anne", "Smith", 33)],
            ("second", 28, "Denver"),
        )

    def test_round_trip(self) -> None:
        person = Person("Jo", "Rivera", 71)
        address = Address("third", 18, "Denver")
        household = Household((person, Person("Sam", "Rivera", 64)), address)

        assert person_from_row(person_to_row(person)) == person
        assert address_from_row(address_to_row(address)) == address
        assert household_from_row(household_to_row(household)) == household
