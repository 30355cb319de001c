"""
Moon phase calculation for journal entries.

The phase is derived from the calendar date alone: the date is converted to a
Julian Day, the age of the moon is measured from a reference new moon
(January 6, 2000 18:14 UTC) and bucketed into the eight traditional phases.

Illumination follows a cosine of the lunation fraction and is computed
independently of the phase buckets, so near a bucket boundary the two can
disagree slightly (e.g. "First Quarter" at 43%).

Stored entries carry the phase either as a JSON object or as a legacy
pre-formatted string ("🌕 Full Moon (98%)"); `parse_stored_phase` accepts both.
"""

import json
import math
import re
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Optional, Union

SYNODIC_MONTH = 29.5305888531  # days
REFERENCE_NEW_MOON_JD = 2451549.259722  # 2000-01-06 18:14 UTC

PHASE_EMOJIS = ['🌑', '🌒', '🌓', '🌔', '🌕', '🌖', '🌗', '🌘']
PHASE_NAMES = [
    'New Moon',
    'Waxing Crescent',
    'First Quarter',
    'Waxing Gibbous',
    'Full Moon',
    'Waning Gibbous',
    'Last Quarter',
    'Waning Crescent',
]

# Upper bound (exclusive) of each phase bucket in days of moon age.
# Ages past the last boundary wrap back to New Moon.
PHASE_BOUNDARIES = [
    1.84566,
    5.53699,
    9.22831,
    12.91963,
    16.61096,
    20.30228,
    23.99361,
    27.68493,
]

DEFAULT_EMOJI = '🌙'


@dataclass(frozen=True)
class LunarPhase:
    """Moon phase for a single calendar date."""

    emoji: str
    name: str
    illumination_percent: int
    age_days: float

    @property
    def label(self) -> str:
        """Display form, e.g. ``"🌕 Full Moon (98%)"``."""
        return f"{self.emoji} {self.name} ({self.illumination_percent}%)"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def julian_day_number(year: int, month: int, day: int) -> int:
    """
    Julian Day Number for a proleptic Gregorian calendar date.

    Valid for all dates, including those before the 1582 reform.
    """
    a = (14 - month) // 12
    y = year - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 + 1721119


def phase_index(age_days: float) -> int:
    """Bucket a moon age (days since new moon) into one of the 8 phases."""
    for index, boundary in enumerate(PHASE_BOUNDARIES):
        if age_days < boundary:
            return index
    return 0


def compute_phase(on: date) -> LunarPhase:
    """
    Compute the moon phase for a date.

    Args:
        on: Calendar date

    Returns:
        LunarPhase with emoji, name, illumination (0-100) and age in days

    Example:
        >>> compute_phase(date(2000, 1, 6)).name
        'New Moon'
    """
    jd = julian_day_number(on.year, on.month, on.day) + 0.5
    days_since_new_moon = jd - REFERENCE_NEW_MOON_JD

    lunation = days_since_new_moon / SYNODIC_MONTH
    fraction = lunation - math.floor(lunation)
    if fraction < 0:
        fraction += 1

    age = fraction * SYNODIC_MONTH
    index = phase_index(age)

    illumination = round(50 * (1 - math.cos(2 * math.pi * fraction)))
    illumination = max(0, min(100, illumination))

    return LunarPhase(
        emoji=PHASE_EMOJIS[index],
        name=PHASE_NAMES[index],
        illumination_percent=illumination,
        age_days=round(age, 2),
    )


# ---------------------------------------------------------------------------
# Stored representations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StructuredPhase:
    """A phase persisted as a structured record."""

    phase: LunarPhase

    @property
    def emoji(self) -> str:
        return self.phase.emoji

    @property
    def title(self) -> str:
        return f"{self.phase.name} ({self.phase.illumination_percent}%)"

    @property
    def name(self) -> Optional[str]:
        return self.phase.name

    def serialize(self) -> str:
        return json.dumps(self.phase.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class LegacyPhase:
    """A phase persisted as a pre-formatted display string."""

    text: str

    @property
    def emoji(self) -> str:
        first = self.text.split(' ', 1)[0] if self.text else ''
        return first or DEFAULT_EMOJI

    @property
    def title(self) -> str:
        return self.text

    @property
    def name(self) -> Optional[str]:
        for phase_name in PHASE_NAMES:
            if phase_name in self.text:
                return phase_name
        return None

    def serialize(self) -> str:
        return self.text


StoredMoonPhase = Union[StructuredPhase, LegacyPhase]

_PERCENT = re.compile(r"(\d+)\s*%")


def _phase_from_mapping(data: dict[str, Any]) -> LunarPhase:
    illumination = data.get('illumination_percent', data.get('illumination', 0))
    if isinstance(illumination, str):
        match = _PERCENT.search(illumination)
        illumination = int(match.group(1)) if match else 0
    return LunarPhase(
        emoji=data.get('emoji') or DEFAULT_EMOJI,
        name=data.get('name') or 'Unknown',
        illumination_percent=int(illumination),
        age_days=float(data.get('age_days', data.get('age', 0.0)) or 0.0),
    )


def parse_stored_phase(raw: Union[str, dict, LunarPhase, None]) -> Optional[StoredMoonPhase]:
    """
    Normalize a persisted moon phase into a StoredMoonPhase.

    Accepts a LunarPhase, a dict, a JSON-encoded object, or a legacy
    pre-formatted string. Returns None when nothing is stored.
    """
    if raw is None or raw == '':
        return None
    if isinstance(raw, LunarPhase):
        return StructuredPhase(raw)
    if isinstance(raw, dict):
        return StructuredPhase(_phase_from_mapping(raw))

    text = raw.strip()
    if text.startswith('{'):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return LegacyPhase(text)
        if isinstance(data, dict):
            return StructuredPhase(_phase_from_mapping(data))
    return LegacyPhase(text)
