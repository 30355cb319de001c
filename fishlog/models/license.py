"""
Fishing license database model.
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from fishlog.models.base import BaseModel


class FishingLicense(BaseModel):
    __tablename__ = "fishing_licenses"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    state = Column(String(50), nullable=False)
    license_type = Column(String(100), nullable=False)
    license_number = Column(String(100), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False, index=True)
    notifications = Column(Boolean, nullable=False, default=True)

    owner = relationship("User", back_populates="licenses")

    def __repr__(self):
        return f"<FishingLicense(id={self.id}, state='{self.state}', end_date={self.end_date})>"
