"""
Journal entry database model.
"""

from sqlalchemy import Column, Date, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from fishlog.models.base import BaseModel


class JournalEntry(BaseModel):
    """
    One fishing outing.

    ``water_flow`` holds the display string captured at save time
    ("1400 CFS", "No data for 2024-07-04", "512 CFS (simulated)").
    ``moon_phase`` is either a JSON object or a legacy pre-formatted string.
    ``cached_flow_data`` is a JSON snapshot of the day's 24 hourly readings.
    """

    __tablename__ = "journal_entries"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False, comment="Date fished")
    start_time = Column(String(5), nullable=True, comment="HH:MM")
    end_time = Column(String(5), nullable=True, comment="HH:MM")
    angler = Column(String(200), nullable=True)
    species = Column(String(100), nullable=True)
    length = Column(Float, nullable=True, comment="Inches")
    weight = Column(Float, nullable=True, comment="Pounds")

    city_state = Column(String(200), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    site_number = Column(String(20), nullable=True, comment="USGS gauge site number")
    river_name = Column(String(200), nullable=True)
    water_flow = Column(String(100), nullable=True)
    cached_flow_data = Column(Text, nullable=True)

    weather_temp = Column(Float, nullable=True, comment="Fahrenheit")
    barometric_pressure = Column(Float, nullable=True, comment="inHg")
    wind_speed = Column(Float, nullable=True, comment="mph")
    wind_direction = Column(String(4), nullable=True)

    moon_phase = Column(Text, nullable=True)
    flies_used = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    owner = relationship("User", back_populates="journal_entries")

    __table_args__ = (
        Index('idx_journal_user_date', 'user_id', 'date'),
    )

    def __repr__(self):
        return f"<JournalEntry(id={self.id}, date={self.date}, species='{self.species}')>"
