"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Round-trip through the persisted JSON collections

DESIGN DECISION: Amounts are Decimal, quantized to paise.
Totals computed from these are exact, so category totals always add up
to the monthly total.
"""

import datetime as dt
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Convert a number or numeric string to a Decimal rounded to 2 places."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a valid amount: {value!r}")
    else:
        raise ValueError(f"Not a valid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a valid amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount too large: {value!r}")


_last_issued_id = 0


def new_expense_id() -> str:
    """
    Timestamp-derived identity (milliseconds since epoch).

    Two ids issued within the same millisecond are bumped apart so ids
    stay unique within a session.
    """
    global _last_issued_id
    _last_issued_id = max(int(time.time() * 1000), _last_issued_id + 1)
    return str(_last_issued_id)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Values are the display labels, which are also what gets persisted.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    OTHER = "Other"


class PaidBy(str, Enum):
    """Who in the household paid."""
    ME = "Me"
    MOM = "Mom"
    DAD = "Dad"
    FAMILY = "Family"


class PaymentMethod(str, Enum):
    """Payment channel used."""
    PHONEPE = "PhonePe"
    GPAY = "GPay"
    PAYTM = "Paytm"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    CASH = "Cash"
    UPI = "UPI"
    NET_BANKING = "Net Banking"


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(BaseModel):
    """
    A single spending event.

    The id is assigned once at creation and never changes; edits produce
    a new Expense with the same id (see ``with_changes``).

    Persisted field names keep the camelCase layout of the stored
    collection (``paidBy``, ``paymentMethod``); absent optional fields
    are left out of the stored record.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Stable expense identity"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in INR"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.FOOD,
        description="Expense category"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the expense"
    )
    paid_by: Optional[PaidBy] = Field(
        default=None,
        alias="paidBy",
        description="Household member who paid"
    )
    payment_method: Optional[PaymentMethod] = Field(
        default=None,
        alias="paymentMethod",
        description="Payment channel"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator('paid_by', 'payment_method', mode='before')
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        """Empty strings from forms or old records mean 'not recorded'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    @property
    def month(self) -> str:
        """The YYYY-MM period this expense falls in."""
        return self.date.isoformat()[:7]

    def with_changes(self, **changes: Any) -> "Expense":
        """Return a re-validated copy with the given fields replaced (id is kept)."""
        changes.pop("id", None)
        data = self.model_dump()
        data.update(changes)
        return Expense.model_validate(data)

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-ready record stored in the collection."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# BUDGET
# =============================================================================

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class Budget(BaseModel):
    """
    A spending ceiling for one calendar month.

    DESIGN DECISION: The month is the only identity. Older stored
    records also carry ``id = "total-<month>"``; it is ignored on load
    and regenerated on save.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        extra="ignore",
    )

    month: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="Budget month as YYYY-MM"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Total budget for the month in INR"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    @property
    def legacy_id(self) -> str:
        return f"total-{self.month}"

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-ready record stored in the collection."""
        record = self.model_dump(mode="json")
        record["id"] = self.legacy_id
        return record


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'invalid_format')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating user input at the form boundary.

    Only a valid result carries the model that may be handed to a store.
    """

    validated_at: dt.datetime = Field(
        default_factory=dt.datetime.now
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    expense: Optional[Expense] = None
    budget: Optional[Budget] = None
