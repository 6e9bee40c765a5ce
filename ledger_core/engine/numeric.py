"""Amount validation shared by the unifier and the statement builders."""

from decimal import Decimal, InvalidOperation

from ledger_core.errors import MalformedInputError


ZERO = Decimal("0")


def require_finite(
    value,
    record_type: str,
    record_id,
    field: str = "amount",
    allow_negative: bool = True,
) -> Decimal:
    """
    Return value as a Decimal, or raise MalformedInputError.

    None counts as zero. Booleans, strings that do not parse,
    NaN and infinities are rejected, and so are negative
    amounts when allow_negative is False.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise MalformedInputError(record_type, record_id, field, value)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise MalformedInputError(record_type, record_id, field, value) from None
    else:
        raise MalformedInputError(record_type, record_id, field, value)

    if not amount.is_finite():
        raise MalformedInputError(record_type, record_id, field, value)
    if not allow_negative and amount < 0:
        raise MalformedInputError(
            record_type, record_id, field, value, reason="cannot be negative"
        )
    return amount
