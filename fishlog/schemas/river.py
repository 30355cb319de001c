"""
Saved river and flow alert schemas.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field, model_validator

from fishlog.schemas.base import BaseSchema, IDSchema
from fishlog.services.rivers import classify_flow, flow_display


class SavedRiverCreate(BaseSchema):
    site_number: str = Field(..., pattern=r"^\d{8,15}$", description="USGS gauge site number")
    river_name: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)


class SavedRiver(IDSchema):
    site_number: str
    river_name: str
    location: Optional[str] = None
    current_flow_cfs: Optional[float] = None
    flow_status: str
    last_updated_at: Optional[datetime] = None

    @computed_field
    @property
    def current_flow(self) -> str:
        return flow_display(self)

    @computed_field
    @property
    def flow_band(self) -> str:
        """low, normal, high, flood or unknown"""
        if self.flow_status != "Active":
            return "unknown"
        return classify_flow(self.current_flow_cfs)


class TriggeredAlert(BaseModel):
    site_number: str
    kind: str
    severity: str
    message: str
    flow_cfs: float
    threshold_cfs: float
    triggered_at: datetime


class RiverRefreshResponse(BaseModel):
    river: SavedRiver
    trend: int = Field(..., ge=-1, le=1, description="1 rising, -1 falling, 0 stable")
    alerts: List[TriggeredAlert] = []


class DashboardStats(BaseModel):
    total_rivers: int
    average_flow_cfs: Optional[float] = None
    alert_count: int
    last_updated_at: Optional[datetime] = None


class AlertRuleIn(BaseModel):
    enabled: bool = False
    threshold_cfs: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def threshold_required_when_enabled(self):
        if self.enabled and self.threshold_cfs is None:
            raise ValueError("threshold_cfs is required for an enabled alert")
        return self


class AlertConfigUpdate(BaseModel):
    """Alert rules for one gauge; omitted or disabled kinds are removed."""
    high: Optional[AlertRuleIn] = None
    low: Optional[AlertRuleIn] = None
    flood: Optional[AlertRuleIn] = None


class AlertRuleOut(BaseSchema):
    threshold_cfs: float
    enabled: bool
    last_triggered_at: Optional[datetime] = None


class AlertConfigResponse(BaseModel):
    site_number: str
    high: Optional[AlertRuleOut] = None
    low: Optional[AlertRuleOut] = None
    flood: Optional[AlertRuleOut] = None
