"""
Field-order contract for the household record types.

Spark hands structs to Python UDFs as Row objects, and the decoders in
reconstruction.py read those rows by position, not by name. The schemas
below are the single place where that order is written down: the decoders
take their positions from here, the encoders emit fields in this order, and
the Spark StructType for each record is built from the same descriptor.

Reordering fields in a schema requires bumping its version.
"""

from typing import NamedTuple

from pyspark.sql.types import (
    ArrayType,
    DataType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)

TEXT = "text"
INTEGER = "integer"
RECORD = "record"
RECORDS = "records"

FIELD_KINDS = frozenset({TEXT, INTEGER, RECORD, RECORDS})


class Field(NamedTuple):
    name: str
    kind: str
    # Nested layout, only for RECORD and RECORDS fields
    schema: "RecordSchema | None" = None

    def spark_type(self) -> DataType:
        """Spark type used to store this field in a DataFrame."""
        if self.kind == TEXT:
            return StringType()
        if self.kind == INTEGER:
            return IntegerType()
        if self.schema is None:
            raise ValueError(f"field {self.name!r} of kind {self.kind!r} needs a nested schema")
        if self.kind == RECORD:
            return self.schema.struct_type()
        return ArrayType(self.schema.struct_type(), containsNull=False)


class RecordSchema(NamedTuple):
    name: str
    version: int
    fields: tuple[Field, ...]

    @property
    def width(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def position(self, field_name: str) -> int:
        """Index of field_name in a structured record of this type."""
        for index, f in enumerate(self.fields):
            if f.name == field_name:
                return index
        raise KeyError(f"{self.name} has no field {field_name!r}")

    def struct_type(self) -> StructType:
        """Spark StructType with the fields in declaration order."""
        return StructType(
            [StructField(f.name, f.spark_type(), nullable=False) for f in self.fields]
        )


def _check(schema: RecordSchema) -> RecordSchema:
    for f in schema.fields:
        if f.kind not in FIELD_KINDS:
            raise ValueError(f"{schema.name}.{f.name}: unknown field kind {f.kind!r}")
        if (f.kind in (RECORD, RECORDS)) != (f.schema is not None):
            raise ValueError(f"{schema.name}.{f.name}: nested schema does not match kind")
    return schema


PERSON_SCHEMA = _check(
    RecordSchema(
        name="Person",
        version=1,
        fields=(
            Field("first_name", TEXT),
            Field("last_name", TEXT),
            Field("age", INTEGER),
        ),
    )
)

ADDRESS_SCHEMA = _check(
    RecordSchema(
        name="Address",
        version=1,
        fields=(
            Field("street", TEXT),
            Field("house_number", INTEGER),
            Field("city", TEXT),
        ),
    )
)

HOUSEHOLD_SCHEMA = _check(
    RecordSchema(
        name="Household",
        version=1,
        fields=(
            Field("members", RECORDS, PERSON_SCHEMA),
            Field("address", RECORD, ADDRESS_SCHEMA),
        ),
    )
)
