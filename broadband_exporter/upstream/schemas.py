"""
Pydantic schemas for the CHAOS line-info response.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LineRecord(BaseModel):
    """One upstream line's current telemetry snapshot."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    line_id: str = Field(default="", alias="id")
    quota_monthly: str = Field(default="", description="Monthly allowance (bytes)")
    quota_remaining: str = Field(default="", description="Allowance remaining (bytes)")
    rx_rate: str = Field(default="", description="Upstream sync rate (bits/sec)")
    tx_rate: str = Field(default="", description="Downstream sync rate (bits/sec)")
    tx_rate_adjusted: str = Field(default="", description="Adjusted downstream rate (bits/sec)")

    @field_validator(
        "line_id",
        "quota_monthly",
        "quota_remaining",
        "rx_rate",
        "tx_rate",
        "tx_rate_adjusted",
        mode="before",
    )
    @classmethod
    def null_field_is_empty(cls, v: Optional[str]):
        return "" if v is None else v


class LineInfoResponse(BaseModel):
    """Response body of the line-info endpoint."""

    model_config = ConfigDict(extra="ignore")

    info: List[LineRecord] = Field(default_factory=list)

    @field_validator("info", mode="before")
    @classmethod
    def null_info_is_empty(cls, v: Optional[list]):
        return [] if v is None else v
