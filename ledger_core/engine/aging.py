"""
Receivables and payables aging.

Every open item lands in exactly one bucket, chosen by how many
days past its due date it is on the report date. Buckets are
inclusive on their lower edge: 30 days overdue is 1-30, 31 days
overdue is 31-60.
"""

import enum
import logging
from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal

from ledger_core.engine.numeric import ZERO, require_finite
from ledger_core.models.enums import AgingKind
from ledger_core.schemas.diagnostics import DataQualityIssue, DataQualityKind
from ledger_core.schemas.reports import AgingBuckets, AgingItem, AgingReport, OpenItemRecord


logger = logging.getLogger(__name__)

UNASSIGNED_ENTITY = "UNASSIGNED"


class AgingBucket(str, enum.Enum):
    CURRENT = "current"
    DAYS_30 = "days30"
    DAYS_60 = "days60"
    DAYS_90 = "days90"
    OVER_90 = "over90"


BUCKET_FIELDS = tuple(bucket.value for bucket in AgingBucket)


def days_overdue(due_date: date, as_of: date) -> int:
    return (as_of - due_date).days


def bucket_for(days: int) -> AgingBucket:
    if days <= 0:
        return AgingBucket.CURRENT
    if days <= 30:
        return AgingBucket.DAYS_30
    if days <= 60:
        return AgingBucket.DAYS_60
    if days <= 90:
        return AgingBucket.DAYS_90
    return AgingBucket.OVER_90


def classify_open_item(item: OpenItemRecord, as_of: date) -> AgingBuckets:
    """
    The item's outstanding amount placed in its single bucket.

    An item without a due date cannot be aged and contributes
    nothing; the report builder records an issue for it.
    """
    outstanding = require_finite(item.outstanding, "OpenItem", item.id, "outstanding")
    if item.due_date is None:
        return AgingBuckets()
    bucket = bucket_for(days_overdue(item.due_date, as_of))
    return AgingBuckets(**{bucket.value: outstanding, "total": outstanding})


def _add(target: dict[str, Decimal], buckets: AgingBuckets) -> None:
    for field in BUCKET_FIELDS:
        target[field] += getattr(buckets, field)
    target["total"] += buckets.total


def _empty() -> dict[str, Decimal]:
    return {field: ZERO for field in (*BUCKET_FIELDS, "total")}


def build_aging_report(
    items: Iterable[OpenItemRecord],
    as_of: date,
    kind: AgingKind,
    format_currency: Callable[[Decimal], str] | None = None,
) -> AgingReport:
    """
    Aged balances per customer (receivables) or vendor (payables).

    Entities are ordered by name, then id. An entity is listed
    only when at least one of its buckets is non-zero.
    """
    issues = []
    per_entity: dict[str, dict[str, Decimal]] = {}
    names: dict[str, str] = {}

    for item in items:
        entity_id = item.entity_id
        if not entity_id:
            issues.append(DataQualityIssue(
                kind=DataQualityKind.MISSING_ENTITY,
                record_type="OpenItem",
                record_id=item.id,
                message=f"{item.document_number or item.id} has no customer or vendor",
            ))
            entity_id = UNASSIGNED_ENTITY
        if item.due_date is None:
            issues.append(DataQualityIssue(
                kind=DataQualityKind.MISSING_DUE_DATE,
                record_type="OpenItem",
                record_id=item.id,
                message=f"{item.document_number or item.id} has no due date and was not aged",
            ))

        buckets = classify_open_item(item, as_of)
        if entity_id not in per_entity:
            per_entity[entity_id] = _empty()
            names[entity_id] = item.entity_name or entity_id
        _add(per_entity[entity_id], buckets)

    aged = []
    totals = _empty()
    for entity_id, amounts in per_entity.items():
        if all(amounts[field] == 0 for field in BUCKET_FIELDS):
            continue
        aged.append(AgingItem(entity_id=entity_id, entity_name=names[entity_id], **amounts))
        for key, value in amounts.items():
            totals[key] += value
    aged.sort(key=lambda row: (row.entity_name, row.entity_id))

    for issue in issues:
        logger.warning("Aging data quality: %s %s: %s", issue.record_type, issue.record_id, issue.message)

    formatted = {}
    if format_currency is not None:
        formatted = {key: format_currency(value) for key, value in totals.items()}

    return AgingReport(
        as_of=as_of,
        kind=kind,
        items=aged,
        totals=AgingBuckets(**totals),
        issues=issues,
        formatted=formatted,
    )
