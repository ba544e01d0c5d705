from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)


class AccountCategory(str, Enum):
    ASSET = "asset"
    DEBT = "debt"


class AccountType(str, Enum):
    INVESTMENT = "investment"
    PROPERTY = "property"
    VEHICLE = "vehicle"
    CASH = "cash"
    LOAN = "loan"
    CREDIT_CARD = "credit_card"


class EventType(str, Enum):
    ACCOUNT_OPENED = "account_opened"
    BALANCE_UPDATE = "balance_update"
    ACCOUNT_CLOSED = "account_closed"


class SignConvention(str, Enum):
    """How debt balances are reported in an output series.

    MAGNITUDE keeps every balance positive (debts are subtracted in netWorth).
    SIGNED negates debt values so a chart can stack them below zero.
    """

    MAGNITUDE = "magnitude"
    SIGNED = "signed"


# -----------------------------
# Accounts
# -----------------------------


class _AccountBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    category: AccountCategory
    balance: float = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        # ObjectIds and integers are valid identifiers; keys are always strings
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def reject_reserved_id(cls, value: str) -> str:
        # per-account rows use the id as a field name next to "month"
        if value == "month":
            raise ValueError('"month" cannot be used as an account id')
        return value

    @field_validator(
        "expectedGrowthRate",
        "interestRate",
        "monthlyContribution",
        "monthlyPayment",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def null_means_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @property
    def is_debt(self) -> bool:
        return self.category == AccountCategory.DEBT


class InvestmentAccount(_AccountBase):
    type: Literal["investment"] = "investment"
    category: AccountCategory = AccountCategory.ASSET
    expectedGrowthRate: float = 0.0
    monthlyContribution: float = 0.0


class PropertyAccount(_AccountBase):
    type: Literal["property"] = "property"
    category: AccountCategory = AccountCategory.ASSET
    expectedGrowthRate: float = 0.0


class VehicleAccount(_AccountBase):
    type: Literal["vehicle"] = "vehicle"
    category: AccountCategory = AccountCategory.ASSET
    # negative rates model depreciation
    expectedGrowthRate: float = 0.0


class CashAccount(_AccountBase):
    type: Literal["cash"] = "cash"
    category: AccountCategory = AccountCategory.ASSET
    interestRate: float = 0.0
    monthlyContribution: float = 0.0


class LoanAccount(_AccountBase):
    type: Literal["loan"] = "loan"
    category: AccountCategory = AccountCategory.DEBT
    interestRate: float = 0.0
    monthlyPayment: float = 0.0
    # months until the loan is fully amortized; None means no fixed horizon
    remainingTerm: Optional[int] = Field(default=None, ge=0)


class CreditCardAccount(_AccountBase):
    type: Literal["credit_card"] = "credit_card"
    category: AccountCategory = AccountCategory.DEBT
    interestRate: float = 0.0
    monthlyPayment: float = 0.0


class OtherAccount(_AccountBase):
    """Any account whose type the engine has no accrual rule for.

    Its balance is carried forward unchanged.
    """

    type: str


KnownAccount = Annotated[
    Union[
        InvestmentAccount,
        PropertyAccount,
        VehicleAccount,
        CashAccount,
        LoanAccount,
        CreditCardAccount,
    ],
    Field(discriminator="type"),
]

Account = Union[
    InvestmentAccount,
    PropertyAccount,
    VehicleAccount,
    CashAccount,
    LoanAccount,
    CreditCardAccount,
    OtherAccount,
]

_known_account_adapter: TypeAdapter = TypeAdapter(KnownAccount)
_KNOWN_TYPES = {t.value for t in AccountType}


def load_account(raw: Union[Dict[str, Any], BaseModel]) -> Account:
    """Parse a plain account record into its typed variant.

    Unknown types are kept as OtherAccount rather than rejected.
    """
    if isinstance(raw, _AccountBase):
        return raw  # type: ignore[return-value]
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if raw.get("type") in _KNOWN_TYPES:
        return _known_account_adapter.validate_python(raw)
    return OtherAccount.model_validate(raw)


# plain records are accepted wherever the engine takes accounts
AccountLike = Union[Account, Dict[str, Any]]


def load_accounts(raw: Iterable[Union[Dict[str, Any], BaseModel]]) -> List[Account]:
    return [load_account(item) for item in raw]


# -----------------------------
# Events
# -----------------------------


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def coerce_datetime(value: Any) -> Any:
    """Read ISO-8601 strings, dates and datetimes as naive UTC datetimes."""
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return _to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    return value


class AccountEvent(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    accountId: str
    type: EventType
    date: datetime
    balance: Optional[float] = Field(default=None, ge=0)

    @field_validator("accountId", mode="before")
    @classmethod
    def stringify_account_id(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Any:
        return coerce_datetime(value)

    @model_validator(mode="after")
    def ensure_balance(self) -> "AccountEvent":
        if self.type != EventType.ACCOUNT_CLOSED and self.balance is None:
            raise ValueError(f"balance is required for {self.type.value} events")
        return self

    @property
    def is_anchor(self) -> bool:
        """True for events that record a known balance."""
        return self.type in (EventType.ACCOUNT_OPENED, EventType.BALANCE_UPDATE)


# plain records (ISO-8601 date strings included) are accepted too
EventLike = Union[AccountEvent, Dict[str, Any]]


def load_events(raw: Iterable[Union[Dict[str, Any], AccountEvent]]) -> List[AccountEvent]:
    return [
        item if isinstance(item, AccountEvent) else AccountEvent.model_validate(item)
        for item in raw
    ]


# -----------------------------
# Output series
# -----------------------------


class ProjectionPoint(BaseModel):
    """Aggregate row: totals across all accounts for one month offset."""

    model_config = ConfigDict(frozen=True)

    month: int
    assets: float
    debts: float
    netWorth: float


class AccountPoint(BaseModel):
    """Per-account row: one extra field per account id holding its balance."""

    model_config = ConfigDict(extra="allow", frozen=True)

    month: int

    @property
    def balances(self) -> Dict[str, float]:
        return dict(self.model_extra or {})

