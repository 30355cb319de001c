"""
Flow alert rule database model.
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from fishlog.models.base import BaseModel


class FlowAlert(BaseModel):
    """
    One alert rule (high, low or flood) for a gauge.

    Rows exist only for enabled rules; turning a rule off deletes its row.
    """

    __tablename__ = "flow_alerts"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    site_number = Column(String(20), nullable=False, index=True)
    kind = Column(String(10), nullable=False)
    threshold_cfs = Column(Float, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    last_triggered_at = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("User", back_populates="flow_alerts")

    __table_args__ = (
        UniqueConstraint('user_id', 'site_number', 'kind', name='uq_flow_alert_user_site_kind'),
        CheckConstraint("kind IN ('high', 'low', 'flood')", name='ck_flow_alert_kind'),
        CheckConstraint('threshold_cfs >= 0', name='ck_flow_alert_threshold'),
    )

    def __repr__(self):
        return f"<FlowAlert(site_number='{self.site_number}', kind='{self.kind}', threshold={self.threshold_cfs})>"
