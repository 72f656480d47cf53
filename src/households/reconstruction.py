"""
Rebuilding typed records from Spark's generic structured records.

A struct column reaches a Python UDF as a pyspark.sql.Row, and an
array<struct> column as a list of Rows. Both are plain positional
sequences, so the decoders here read every field by its index in the
matching schema descriptor (src/households/schema.py) and coerce it to the
declared type:

    Row("Anne", "Smith", 33)            -> Person("Anne", "Smith", 33)
    Row([Row(...), ...], Row(...))      -> Household((Person, ...), Address)

The positional accessors (text_at, int_at, record_at, records_at) mirror the
getString / getInt / getStruct / getSeq accessors of a Spark Row. Tuples
and lists work the same way, which keeps the decoders testable without a
SparkSession.

Decoding only coerces types. A negative age decodes fine; rejecting it is
the caller's business.
"""

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any, TypeVar

from src.households.errors import DecodeError
from src.households.records import Address, Household, Person
from src.households.schema import (
    ADDRESS_SCHEMA,
    HOUSEHOLD_SCHEMA,
    PERSON_SCHEMA,
    RECORD,
    RECORDS,
    RecordSchema,
)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Positional accessors
# ---------------------------------------------------------------------------


def _decode_error(
    schema: RecordSchema,
    reason: str,
    field: str | None = None,
    position: int | None = None,
) -> DecodeError:
    """DecodeError tagged with the schema name and version it was read against."""
    return DecodeError(
        schema.name, reason, field=field, position=position, version=schema.version
    )


def _is_record(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _require_width(record: Any, schema: RecordSchema) -> None:
    """Fail unless record is a sequence with at least schema.width fields.

    Trailing fields beyond the schema are ignored.
    """
    if not _is_record(record):
        raise _decode_error(
            schema, f"expected a structured record, got {type(record).__name__}"
        )
    if len(record) < schema.width:
        missing = schema.fields[len(record)]
        raise _decode_error(
            schema,
            f"record has {len(record)} fields, expected {schema.width}",
            field=missing.name,
            position=len(record),
        )


def _value_at(record: Sequence, schema: RecordSchema, name: str) -> tuple[Any, int]:
    position = schema.position(name)
    value = record[position]
    if value is None:
        raise _decode_error(schema, "required field is null", field=name, position=position)
    return value, position


def text_at(record: Sequence, schema: RecordSchema, name: str) -> str:
    """Read a text field. Only str values are accepted."""
    value, position = _value_at(record, schema, name)
    if not isinstance(value, str):
        raise _decode_error(
            schema,
            f"cannot coerce {type(value).__name__} to text",
            field=name,
            position=position,
        )
    return value


def int_at(record: Sequence, schema: RecordSchema, name: str) -> int:
    """Read an integer field.

    Accepts ints, integral floats and Decimals (Spark may widen numeric
    columns, and DecimalType arrives as Decimal) and numeric text such as
    the strings read from CSV without a schema.
    """
    value, position = _value_at(record, schema, name)

    if isinstance(value, bool):
        reason = "cannot coerce bool to integer"
    elif isinstance(value, int):
        return value
    elif isinstance(value, float):
        if value.is_integer():
            return int(value)
        reason = f"non-integral value {value!r}"
    elif isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        reason = f"non-integral value {value!r}"
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            reason = f"non-numeric value {value!r}"
    else:
        reason = f"cannot coerce {type(value).__name__} to integer"

    raise _decode_error(schema, reason, field=name, position=position)


def record_at(
    record: Sequence,
    schema: RecordSchema,
    name: str,
    decode: Callable[[Any], T],
) -> T:
    """Read a nested struct field and decode it with the nested type's decoder."""
    value, position = _value_at(record, schema, name)
    if not _is_record(value):
        raise _decode_error(
            schema,
            f"expected a nested record, got {type(value).__name__}",
            field=name,
            position=position,
        )
    return decode(value)


def records_at(
    record: Sequence,
    schema: RecordSchema,
    name: str,
    decode: Callable[[Any], T],
) -> list[T]:
    """Read an array<struct> field, decoding every entry in order."""
    value, position = _value_at(record, schema, name)
    if not _is_record(value):
        raise _decode_error(
            schema,
            f"expected a sequence of records, got {type(value).__name__}",
            field=name,
            position=position,
        )

    decoded: list[T] = []
    for index, entry in enumerate(value):
        if entry is None:
            raise _decode_error(
                schema, f"null entry at index {index}", field=name, position=position
            )
        decoded.append(decode(entry))
    return decoded


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def person_from_row(record: Any) -> Person:
    """Decode a (first_name, last_name, age) record."""
    _require_width(record, PERSON_SCHEMA)
    return Person(
        first_name=text_at(record, PERSON_SCHEMA, "first_name"),
        last_name=text_at(record, PERSON_SCHEMA, "last_name"),
        age=int_at(record, PERSON_SCHEMA, "age"),
    )


def address_from_row(record: Any) -> Address:
    """Decode a (street, house_number, city) record."""
    _require_width(record, ADDRESS_SCHEMA)
    return Address(
        street=text_at(record, ADDRESS_SCHEMA, "street"),
        house_number=int_at(record, ADDRESS_SCHEMA, "house_number"),
        city=text_at(record, ADDRESS_SCHEMA, "city"),
    )


def household_from_row(record: Any) -> Household:
    """Decode a (members, address) record.

    members is decoded entry by entry with person_from_row, keeping the
    order Spark collected them in. An empty members array decodes to an
    empty household; only build_household() enforces non-empty groups.
    """
    _require_width(record, HOUSEHOLD_SCHEMA)
    return Household(
        members=records_at(record, HOUSEHOLD_SCHEMA, "members", person_from_row),
        address=record_at(record, HOUSEHOLD_SCHEMA, "address", address_from_row),
    )


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------


def to_record(value: Any, schema: RecordSchema) -> tuple:
    """Encode a record type as a positional tuple in schema order.

    Nested records become nested tuples and record sequences become lists,
    which is what createDataFrame() and UDF return values expect for
    struct and array<struct> columns.
    """
    encoded: list[Any] = []
    for f in schema.fields:
        field_value = getattr(value, f.name)
        if f.kind == RECORD:
            field_value = to_record(field_value, f.schema)
        elif f.kind == RECORDS:
            field_value = [to_record(item, f.schema) for item in field_value]
        encoded.append(field_value)
    return tuple(encoded)


def person_to_row(person: Person) -> tuple:
    return to_record(person, PERSON_SCHEMA)


def address_to_row(address: Address) -> tuple:
    return to_record(address, ADDRESS_SCHEMA)


def household_to_row(household: Household) -> tuple:
    return to_record(household, HOUSEHOLD_SCHEMA)
