"""Request contracts for the projection, history and timeline endpoints."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from networth.config import get_settings
from networth.models import AccountEvent, KnownAccount, SignConvention, coerce_datetime


def _within_horizon(value: Optional[int]) -> Optional[int]:
    limit = get_settings().max_months
    if value is not None and value > limit:
        raise ValueError(f"horizon must not exceed {limit} months")
    return value


class SeriesOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    signConvention: SignConvention = SignConvention.MAGNITUDE
    real: bool = Field(default=False, description="Deflate currency values to today's money.")
    inflationRate: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Annual inflation in percent; defaults to the configured rate when real is set.",
    )
    thin: bool = Field(default=False, description="Thin long horizons for charting.")

    def effective_inflation(self) -> Optional[float]:
        if not self.real:
            return None
        if self.inflationRate is not None:
            return self.inflationRate
        return get_settings().default_inflation_rate


class ProjectionRequest(SeriesOptions):
    accounts: List[KnownAccount] = Field(default_factory=list)
    months: Optional[int] = Field(default=None, ge=0)

    @field_validator("months")
    @classmethod
    def check_months(cls, v: Optional[int]) -> Optional[int]:
        return _within_horizon(v)

    def horizon(self) -> int:
        if self.months is not None:
            return self.months
        return get_settings().default_forecast_months


class HistoryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    accounts: List[KnownAccount] = Field(default_factory=list)
    events: List[AccountEvent] = Field(default_factory=list)
    historyMonths: Optional[int] = Field(
        default=None,
        ge=0,
        description="Months of history; derived from the earliest opening when omitted.",
    )
    now: Optional[datetime] = None
    signConvention: SignConvention = SignConvention.MAGNITUDE

    @field_validator("historyMonths")
    @classmethod
    def check_history(cls, v: Optional[int]) -> Optional[int]:
        return _within_horizon(v)

    @field_validator("now", mode="before")
    @classmethod
    def parse_now(cls, v: Any) -> Any:
        return coerce_datetime(v)


class TimelineRequest(SeriesOptions):
    accounts: List[KnownAccount] = Field(default_factory=list)
    events: List[AccountEvent] = Field(default_factory=list)
    months: Optional[int] = Field(default=None, ge=0)
    now: Optional[datetime] = None
    byAccount: bool = False

    @field_validator("months")
    @classmethod
    def check_months(cls, v: Optional[int]) -> Optional[int]:
        return _within_horizon(v)

    @field_validator("now", mode="before")
    @classmethod
    def parse_now(cls, v: Any) -> Any:
        return coerce_datetime(v)

    def horizon(self) -> int:
        if self.months is not None:
            return self.months
        return get_settings().default_forecast_months
