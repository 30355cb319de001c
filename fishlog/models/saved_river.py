"""
Saved river gauge database model.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from fishlog.models.base import BaseModel


class SavedRiver(BaseModel):
    """
    A USGS gauge a user follows on the river flow dashboard.

    A user saves each site number at most once.
    """

    __tablename__ = "saved_rivers"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    site_number = Column(String(20), nullable=False, index=True)
    river_name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=True)

    current_flow_cfs = Column(Float, nullable=True)
    flow_status = Column(String(20), nullable=False, default="No Data", comment="Active, No Data or Error")
    last_updated_at = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("User", back_populates="saved_rivers")

    __table_args__ = (
        UniqueConstraint('user_id', 'site_number', name='uq_saved_river_user_site'),
    )

    def __repr__(self):
        return f"<SavedRiver(id={self.id}, site_number='{self.site_number}')>"
