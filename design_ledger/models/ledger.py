"""
Core Data Models for Design Ledger

These models define the strict schemas for everything the ledger stores,
broadcasts and transfers. They are designed to:
1. Enforce type safety at runtime
2. Reject (not silently repair) data that does not match the expected shape
3. Serialize to the camelCase JSON document the ledger is persisted as

DESIGN DECISION: Charges and payments are frozen models. History is
append-only, so nothing downstream gets the chance to edit an entry in place.
"""

import threading
import time
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    """The two parties sharing a ledger."""
    DESIGNER = "DESIGNER"    # Records charges
    JOB_GIVER = "JOB_GIVER"  # Records payments


class SecurityStatus(str, Enum):
    """Why a login attempt was refused."""
    WRONG_PASSWORD = "WRONG_PASSWORD"
    UNAUTHORIZED_EMAIL = "UNAUTHORIZED_EMAIL"


# =============================================================================
# ID GENERATION
# =============================================================================

_id_lock = threading.Lock()
_last_id = 0


def generate_entry_id() -> str:
    """
    Create an opaque, time-derived entry id.

    Ids are epoch milliseconds. Within one process they are strictly
    increasing, so two entries created in the same millisecond still differ.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


# =============================================================================
# LEDGER ENTRIES
# =============================================================================

def _amount_to_json(value: Decimal) -> Union[int, float]:
    """Amounts are JSON numbers on disk and on the wire."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Exact in memory, a plain number once serialized
Amount = Annotated[
    Decimal,
    PlainSerializer(_amount_to_json, return_type=Union[int, float], when_used="json"),
]


class _LedgerModel(BaseModel):
    """Shared config: camelCase on the wire, unknown fields rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class Charge(_LedgerModel):
    """
    A design-service charge recorded by the designer.

    Immutable once created.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=generate_entry_id,
        min_length=1,
        description="Unique, time-derived charge id"
    )
    type: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Service performed, e.g. 'Photo Retouch'"
    )
    amount: Amount = Field(
        ...,
        ge=0,
        description="Amount charged"
    )
    entry_date: date = Field(
        ...,
        alias="date",
        description="Date the work was done"
    )
    added_by: str = Field(
        ...,
        min_length=1,
        description="Name of the person who recorded the charge"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    timestamp: Optional[int] = Field(
        default=None,
        ge=0,
        description="Creation time in epoch milliseconds"
    )


class Payment(_LedgerModel):
    """
    A payment recorded by the job giver.

    Immutable once created.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=generate_entry_id,
        min_length=1,
    )
    method: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="How the money was paid, e.g. 'Bank Transfer'"
    )
    amount: Amount = Field(
        ...,
        ge=0,
    )
    entry_date: date = Field(
        ...,
        alias="date",
    )
    added_by: str = Field(
        ...,
        min_length=1,
    )
    note: str = Field(
        default="",
        max_length=1000,
    )
    timestamp: Optional[int] = Field(
        default=None,
        ge=0,
    )


class PriceTemplate(_LedgerModel):
    """A preset service price used to pre-fill new charges."""

    id: str = Field(
        default_factory=generate_entry_id,
        min_length=1,
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    amount: Amount = Field(
        ...,
        ge=0,
    )


class SecurityLog(_LedgerModel):
    """A refused login attempt."""
    # Keep the attempted email exactly as typed
    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    id: str = Field(
        default_factory=generate_entry_id,
        min_length=1,
    )
    attempted_email: str = Field(
        ...,
        description="Email exactly as it was typed"
    )
    timestamp: int = Field(
        default_factory=now_millis,
        ge=0,
    )
    date: str = Field(
        default="",
        description="Human-readable time of the attempt"
    )
    status: SecurityStatus


def default_templates() -> list[PriceTemplate]:
    """The price list a brand new ledger starts with."""
    return [
        PriceTemplate(id="1", name="Background Change", amount=Decimal("500")),
        PriceTemplate(id="2", name="Photo Retouch", amount=Decimal("300")),
        PriceTemplate(id="3", name="Album Basic", amount=Decimal("6000")),
        PriceTemplate(id="4", name="Album Premium", amount=Decimal("9000")),
    ]


# =============================================================================
# AGGREGATE STATE
# =============================================================================

class LedgerState(_LedgerModel):
    """
    The whole ledger.

    This is the unit of persistence, notification and transfer: every
    mutation rewrites it in full.
    """

    charges: list[Charge] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    templates: list[PriceTemplate] = Field(default_factory=list)
    security_logs: list[SecurityLog] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'LedgerState':
        """Ids must be unique within each collection."""
        for name in ("charges", "payments", "templates", "security_logs"):
            ids = [entry.id for entry in getattr(self, name)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate ids in {name}")
        return self

    @classmethod
    def seeded(cls) -> 'LedgerState':
        """State used when nothing has been persisted yet."""
        return cls(templates=default_templates())

    def to_document(self) -> str:
        """Serialize to the persisted JSON document."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_document(cls, document: str) -> 'LedgerState':
        """Parse the persisted JSON document."""
        return cls.model_validate_json(document)


class LedgerTotals(BaseModel):
    """Money owed versus money paid."""

    costs: Decimal = Field(default=Decimal("0"))
    paid: Decimal = Field(default=Decimal("0"))

    @property
    def balance(self) -> Decimal:
        """Positive when the job giver has paid ahead, negative when owing."""
        return self.paid - self.costs
