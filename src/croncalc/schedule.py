"""Validated cron schedule value."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from croncalc.fields import FIELD_CONSTRAINTS, FieldType, FieldValue


@dataclass(frozen=True)
class Schedule:
    """Six normalized fields plus the expression they were parsed from.

    Instances are produced by the parser and are always valid: the day
    field is reachable in at least one allowed month. They are immutable
    and safe to share between threads.
    """

    expression: str
    second: FieldValue
    minute: FieldValue
    hour: FieldValue
    day: FieldValue
    month: FieldValue
    day_of_week: FieldValue

    def get(self, field_type: FieldType) -> FieldValue:
        """Get the value of a field by type."""
        return getattr(self, field_type.value)

    def is_any(self, field_type: FieldType) -> bool:
        """Check whether a field places no constraint (covers its whole domain)."""
        return self.get(field_type) == FIELD_CONSTRAINTS[field_type].full_span

    def without(self, field_type: FieldType) -> "Schedule":
        """Copy of this schedule with one field widened to the wildcard."""
        return dataclasses.replace(
            self, **{field_type.value: FIELD_CONSTRAINTS[field_type].full_span}
        )

    def fields(self) -> dict[FieldType, FieldValue]:
        return {field_type: self.get(field_type) for field_type in FieldType}

    def __str__(self) -> str:
        return self.expression
