"""
Structured errors raised by the ledger engine.

Business rule failures in the services raise plain ValueError
with a readable message. MalformedInputError is the one error
the statement builders let escape: a non-finite or non-numeric
amount would silently corrupt every total computed after it.
"""

from typing import Any


class MalformedInputError(ValueError):
    """
    A record carries an amount that is not a finite number.

    Identifies the offending record so the caller can fix the
    source data instead of guessing which row broke the report.
    """

    def __init__(
        self,
        record_type: str,
        record_id: Any,
        field: str,
        value: Any,
        reason: str = "is not a finite number",
    ):
        self.record_type = record_type
        self.record_id = record_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{record_type} {record_id}: {field} {reason} ({value!r})")

    def to_dict(self) -> dict:
        return {
            "error_code": "MALFORMED_INPUT",
            "message": str(self),
            "record_type": self.record_type,
            "record_id": None if self.record_id is None else str(self.record_id),
            "field": self.field,
        }
