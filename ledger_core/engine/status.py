"""
Status normalisation.

Statuses arrive from the store as loosely typed strings. Every
raw value maps to exactly one TransactionStatus; anything
unrecognised becomes DRAFT. That fallback loses information,
so it is logged rather than raised.
"""

import enum
import logging

from ledger_core.models.enums import TransactionStatus


logger = logging.getLogger(__name__)


# Raw values (upper-cased) that map to something other than themselves.
# Voucher lifecycle states are folded onto the register's four states.
STATUS_ALIASES: dict[str, TransactionStatus] = {
    "DRAFT": TransactionStatus.DRAFT,
    "PENDING": TransactionStatus.PENDING,
    "APPROVED": TransactionStatus.PENDING,
    "POSTED": TransactionStatus.POSTED,
    "REVERSED": TransactionStatus.REVERSED,
    "CANCELLED": TransactionStatus.REVERSED,
}


def normalize_status(raw) -> TransactionStatus:
    """Case-insensitive, total mapping from a raw status to TransactionStatus."""
    if raw is None:
        return TransactionStatus.DRAFT
    if isinstance(raw, TransactionStatus):
        return raw
    value = raw.value if isinstance(raw, enum.Enum) else str(raw)
    status = STATUS_ALIASES.get(value.strip().upper())
    if status is None:
        logger.debug("Unknown status %r normalised to DRAFT", raw)
        return TransactionStatus.DRAFT
    return status


def first_status(*candidates) -> TransactionStatus:
    """Normalise the first candidate that is set (not None or empty)."""
    for raw in candidates:
        if raw:
            return normalize_status(raw)
    return TransactionStatus.DRAFT


def parse_status_filter(raw: str | None) -> TransactionStatus | None:
    """
    Strict counterpart of normalize_status for query filters: a
    filter nobody can match is a caller error, not a DRAFT.
    """
    if not raw:
        return None
    try:
        return TransactionStatus(raw.strip().upper())
    except ValueError:
        raise ValueError(f"Unknown status filter '{raw}'") from None
