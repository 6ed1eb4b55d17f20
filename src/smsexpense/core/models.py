"""Core data models for the SMS expense import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Final, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedMessageError

UNKNOWN_VENDOR: Final[str] = "Unknown"
DEFAULT_CATEGORY: Final[str] = "other"
SMS_IMPORT_TAG: Final[str] = "sms-import"
DESCRIPTION_LIMIT: Final[int] = 100
SAVED_DESCRIPTION_PREFIX: Final[str] = "SMS Import: "

# Latest epoch millis that still converts to a local date with a day to spare
MAX_EPOCH_MS: Final[int] = 253402128000000  # 9999-12-30T00:00:00Z


class MessageDirection(str, Enum):
    """Whether a message was received into or sent from the inbox."""

    RECEIVED = "received"
    SENT = "sent"


class TransactionType(str, Enum):
    """Direction of money for an extracted transaction."""

    INCOME = "income"
    EXPENSE = "expense"


# Android content provider box types
_ANDROID_BOX_TYPES: Final[dict[int, MessageDirection]] = {
    1: MessageDirection.RECEIVED,
    2: MessageDirection.SENT,
}


class RawMessage(BaseModel):
    """An inbound SMS record as read from the message source."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    address: str = ""
    body: str
    date: int = Field(ge=0, le=MAX_EPOCH_MS)
    direction: MessageDirection = MessageDirection.RECEIVED

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("address", mode="before")
    @classmethod
    def default_address(cls, v):
        return "" if v is None else v

    @field_validator("direction", mode="before")
    @classmethod
    def map_box_type(cls, v):
        """Accept the numeric box type used by the Android bridge."""
        if v is None:
            return MessageDirection.RECEIVED
        if isinstance(v, int) and not isinstance(v, bool):
            try:
                return _ANDROID_BOX_TYPES[v]
            except KeyError:
                raise ValueError(f"unknown message box type: {v}")
        return v

    @classmethod
    def from_record(cls, record: RawMessage | Mapping[str, Any]) -> RawMessage:
        """Validate a raw source record, raising MalformedMessageError on bad data."""
        if isinstance(record, RawMessage):
            return record
        if not isinstance(record, Mapping):
            raise MalformedMessageError(
                f"expected a mapping, got {type(record).__name__}"
            )

        data = dict(record)
        if "id" not in data and "_id" in data:
            data["id"] = data.pop("_id")
        if "direction" not in data and "type" in data:
            data["direction"] = data.pop("type")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) for err in e.errors()
            )
            raise MalformedMessageError(
                f"invalid message record ({fields})",
                record_id=str(data.get("id")) if data.get("id") is not None else None,
            ) from e

    @property
    def received_at(self) -> datetime:
        """Message timestamp as a local datetime."""
        return datetime.fromtimestamp(self.date / 1000)


@dataclass(frozen=True)
class ExtractedExpense:
    """A structured guess at one transaction described by an SMS."""

    amount: Decimal
    type: TransactionType
    description: str
    confidence: float
    raw_message: str
    vendor: str = UNKNOWN_VENDOR
    category: str = DEFAULT_CATEGORY
    sender: str = UNKNOWN_VENDOR
    timestamp: int = 0

    def __post_init__(self):
        """Validate and normalize extracted fields."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not isinstance(self.type, TransactionType):
            object.__setattr__(self, "type", TransactionType(self.type))

        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def confidence_percent(self) -> int:
        """Confidence rounded to a whole percentage."""
        return int(round(self.confidence * 100))

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "amount": float(self.amount),
            "vendor": self.vendor,
            "category": self.category,
            "type": self.type.value,
            "description": self.description,
            "confidence": self.confidence,
            "raw_message": self.raw_message,
            "sender": self.sender,
            "timestamp": self.timestamp,
        }


@dataclass
class TransactionRecord:
    """Payload handed to the transaction store for one accepted expense."""

    amount: Decimal
    type: TransactionType
    vendor: str
    category: str
    description: str
    tags: list[str] = field(default_factory=list)
    sms_data: dict[str, Any] | None = None

    @classmethod
    def from_expense(cls, expense: ExtractedExpense) -> TransactionRecord:
        """Build the store payload, tagging it as an SMS import."""
        return cls(
            amount=expense.amount,
            type=expense.type,
            vendor=expense.vendor or UNKNOWN_VENDOR,
            category=expense.category or DEFAULT_CATEGORY,
            description=f"{SAVED_DESCRIPTION_PREFIX}{expense.description}",
            tags=[SMS_IMPORT_TAG, f"confidence:{expense.confidence_percent}%"],
            sms_data={
                "raw_message": expense.raw_message,
                "sender": expense.sender or UNKNOWN_VENDOR,
                "timestamp": expense.timestamp,
            },
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "amount": float(self.amount),
            "type": self.type.value,
            "vendor": self.vendor,
            "category": self.category,
            "description": self.description,
            "tags": list(self.tags),
            "sms_data": dict(self.sms_data) if self.sms_data else None,
        }


@dataclass
class StoredTransaction:
    """A transaction as returned by the store after a successful save."""

    id: str
    created_at: datetime
    record: TransactionRecord

    @property
    def tags(self) -> list[str]:
        return self.record.tags

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["id"] = self.id
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> StoredTransaction:
        """Create StoredTransaction from a persisted dictionary."""
        record = TransactionRecord(
            amount=Decimal(str(data.get("amount", 0))),
            type=TransactionType(data.get("type", TransactionType.EXPENSE.value)),
            vendor=data.get("vendor") or UNKNOWN_VENDOR,
            category=data.get("category") or DEFAULT_CATEGORY,
            description=data.get("description", ""),
            tags=list(data.get("tags") or []),
            sms_data=data.get("sms_data"),
        )
        return cls(
            id=data["id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            record=record,
        )


@dataclass
class ImportOptions:
    """Caller configuration for one batch import run."""

    max_count: int = 200
    days_back: Optional[int] = None
    only_today: bool = False
    min_date: Optional[int] = None
    max_date: Optional[int] = None
    auto_save: bool = True
    filter: Optional[Callable[[ExtractedExpense], bool]] = None

    def __post_init__(self):
        if self.max_count <= 0:
            raise ValueError(f"max_count must be positive, got {self.max_count}")
        if self.days_back is not None and self.days_back < 0:
            raise ValueError(f"days_back cannot be negative, got {self.days_back}")
        if (
            self.min_date is not None
            and self.max_date is not None
            and self.min_date > self.max_date
        ):
            raise ValueError("min_date must not be later than max_date")


@dataclass
class ImportResult:
    """Aggregate outcome of a batch import."""

    success: bool
    expenses: list[ExtractedExpense] = field(default_factory=list)
    total_processed: int = 0
    errors: list[str] = field(default_factory=list)
    last_sync: Optional[int] = None
    saved_count: int = 0
    bank_sms_count: int = 0
    transaction_sms_count: int = 0

    @classmethod
    def failed(cls, message: str) -> ImportResult:
        """Result for a batch that could not even begin."""
        return cls(success=False, expenses=[], total_processed=0, errors=[message])

    @property
    def total_amount(self) -> Decimal:
        """Sum of all accepted expense amounts."""
        return sum((e.amount for e in self.expenses), Decimal("0"))

    def to_summary(self) -> str:
        """One-line human-readable summary."""
        if not self.success:
            reason = self.errors[0] if self.errors else "unknown error"
            return f"Import failed: {reason}"
        if not self.expenses:
            return "No expenses found"
        noun = "expense" if len(self.expenses) == 1 else "expenses"
        return f"Imported {len(self.expenses)} {noun}"
