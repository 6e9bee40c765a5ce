"""
Diagnostic structures attached to registers and reports.

Bad data never aborts a statement. Missing references become
DataQualityIssue entries; failed cross-checks become
InvariantViolation entries carrying the discrepancy amount.
The caller decides whether to block or just warn.
"""

import enum
from decimal import Decimal

from pydantic import BaseModel


class DataQualityKind(str, enum.Enum):
    MISSING_ACCOUNT = "MISSING_ACCOUNT"
    MISSING_CASH_ACCOUNT = "MISSING_CASH_ACCOUNT"
    MISSING_COUNTER_ACCOUNT = "MISSING_COUNTER_ACCOUNT"
    MISSING_TRANSACTION_STATE = "MISSING_TRANSACTION_STATE"
    UNCLASSIFIED_ACCOUNT = "UNCLASSIFIED_ACCOUNT"
    MISSING_ENTITY = "MISSING_ENTITY"
    MISSING_DUE_DATE = "MISSING_DUE_DATE"
    NO_CASH_ACCOUNTS = "NO_CASH_ACCOUNTS"


class InvariantKind(str, enum.Enum):
    UNBALANCED_POSTED_GROUP = "UNBALANCED_POSTED_GROUP"
    TRIAL_BALANCE_MISMATCH = "TRIAL_BALANCE_MISMATCH"
    BALANCE_SHEET_MISMATCH = "BALANCE_SHEET_MISMATCH"
    CASH_FLOW_MISMATCH = "CASH_FLOW_MISMATCH"


class DataQualityIssue(BaseModel):
    kind: DataQualityKind
    record_type: str
    record_id: str | None = None
    message: str


class InvariantViolation(BaseModel):
    kind: InvariantKind
    record_id: str | None = None
    expected: Decimal
    actual: Decimal
    discrepancy: Decimal
