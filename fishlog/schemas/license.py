"""
Fishing license schemas.
"""

from datetime import date
from typing import Optional
from pydantic import Field, computed_field, model_validator

from fishlog.schemas.base import BaseSchema, IDSchema, TimestampSchema
from fishlog.services.licenses import expiration_status


class LicenseBase(BaseSchema):
    state: str = Field(..., min_length=2, max_length=50)
    license_type: str = Field(..., min_length=1, max_length=100)
    license_number: Optional[str] = Field(None, max_length=100)
    start_date: date
    end_date: date
    notifications: bool = True

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LicenseCreate(LicenseBase):
    pass


class LicenseUpdate(BaseSchema):
    state: Optional[str] = Field(None, min_length=2, max_length=50)
    license_type: Optional[str] = Field(None, min_length=1, max_length=100)
    license_number: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notifications: Optional[bool] = None


class License(IDSchema, TimestampSchema):
    state: str
    license_type: str
    license_number: Optional[str] = None
    start_date: date
    end_date: date
    notifications: bool

    @computed_field
    @property
    def status(self) -> str:
        """expired, critical, warning or valid"""
        return expiration_status(self.end_date).status

    @computed_field
    @property
    def days_until_expiration(self) -> int:
        return expiration_status(self.end_date).days_until_expiration


class LicenseSummary(BaseSchema):
    total: int
    valid: int
    expiring: int
    expired: int
