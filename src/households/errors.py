"""
Errors raised while rebuilding or grouping household records.

None of these are transient: each one means the data does not match the
record layout and has to be fixed at the source.
"""


class HouseholdRecordError(ValueError):
    """Base class for household record failures."""


class DecodeError(HouseholdRecordError):
    """Raised when a structured record cannot be decoded into a record type.

    Covers records with too few fields, values that cannot be coerced to the
    declared field type, and nulls in required slots. version is the
    field-order version of the schema the record was read against.
    """

    def __init__(
        self,
        record_type: str,
        reason: str,
        field: str | None = None,
        position: int | None = None,
        version: int | None = None,
    ) -> None:
        self.record_type = record_type
        self.reason = reason
        self.field = field
        self.position = position
        self.version = version

        where = [] if version is None else [f"schema v{version}"]
        if field is None:
            label = record_type
        else:
            label = f"{record_type}.{field}"
            where.append(f"position {position}")
        if where:
            label = f"{label} ({', '.join(where)})"
        super().__init__(f"{label}: {reason}")


class InvalidGroupError(HouseholdRecordError):
    """Raised when a household would be built from an empty member group."""
