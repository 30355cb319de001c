"""
Import fishing journal entries from a CSV file.

Accepts the CSV produced by ``GET /api/v1/entries/export`` as well as
exports from the older browser version of the app, whose columns are
camelCase (``siteNumber``, ``waterFlow``, ``moonPhase``, ...).

Stored moon phases are kept exactly as found, including legacy strings
such as "🌕 Full Moon (98%)"; rows without one get a computed phase.
Flow and weather values are imported as recorded; nothing is fetched.

Usage:
    python scripts/import_journal_csv.py journal.csv --email angler@example.com
    python scripts/import_journal_csv.py journal.csv --email angler@example.com --dry-run
"""

import asyncio
import sys
import argparse
from datetime import date
from pathlib import Path
from typing import Any, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pandas as pd

from fishlog.database import async_session
from fishlog.crud.user import user as crud_user
from fishlog.models.journal_entry import JournalEntry
from fishlog.services.moon import StructuredPhase, compute_phase
from fishlog.utils.logging_config import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

COLUMN_ALIASES = {
    'startTime': 'start_time',
    'endTime': 'end_time',
    'targetSpecies': 'species',
    'cityState': 'city_state',
    'fishingLat': 'latitude',
    'fishingLon': 'longitude',
    'siteNumber': 'site_number',
    'riverName': 'river_name',
    'waterFlow': 'water_flow',
    'weatherTemp': 'weather_temp',
    'barometricPressure': 'barometric_pressure',
    'windSpeed': 'wind_speed',
    'windDirection': 'wind_direction',
    'moonPhase': 'moon_phase',
    'fliesUsed': 'flies_used',
    'cachedFlowData': 'cached_flow_data',
}

TEXT_COLUMNS = [
    'start_time', 'end_time', 'angler', 'species', 'city_state', 'site_number',
    'river_name', 'water_flow', 'wind_direction', 'moon_phase', 'flies_used',
    'notes', 'cached_flow_data',
]
NUMBER_COLUMNS = [
    'length', 'weight', 'latitude', 'longitude', 'weather_temp',
    'barometric_pressure', 'wind_speed',
]


def _clean(value: Any) -> Optional[Any]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def rows_from_dataframe(df: pd.DataFrame) -> list[dict]:
    """
    Normalize CSV rows into JournalEntry column values.

    Rows without a parseable date are skipped with a warning.
    """
    df = df.rename(columns=COLUMN_ALIASES)
    rows = []

    for idx, record in df.iterrows():
        raw_date = _clean(record.get('date'))
        parsed = pd.to_datetime(raw_date, errors='coerce') if raw_date is not None else pd.NaT
        if pd.isna(parsed):
            logger.warning(f"Row {idx}: missing or invalid date '{raw_date}', skipping")
            continue
        on: date = parsed.date()

        row: dict[str, Any] = {'date': on}
        for col in TEXT_COLUMNS:
            value = _clean(record.get(col))
            row[col] = None if value is None else str(value).strip()
        for col in NUMBER_COLUMNS:
            value = _clean(record.get(col))
            try:
                row[col] = None if value is None else float(value)
            except (TypeError, ValueError):
                logger.warning(f"Row {idx}: ignoring non-numeric {col} '{value}'")
                row[col] = None

        # Site numbers lose leading zeros when a spreadsheet reads them as numbers
        if row['site_number'] and row['site_number'].isdigit():
            row['site_number'] = row['site_number'].zfill(8)

        if not row['moon_phase']:
            row['moon_phase'] = StructuredPhase(compute_phase(on)).serialize()

        rows.append(row)

    return rows


async def import_journal(csv_path: Path, email: str, dry_run: bool = False) -> int:
    """Import a CSV into the journal of the user with ``email``."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=True)
    logger.info(f"Read {len(df)} rows from {csv_path}")
    rows = rows_from_dataframe(df)

    async with async_session() as session:
        owner = await crud_user.get_by_email(session, email=email)
        if not owner:
            raise SystemExit(f"No user registered with email {email}")

        if dry_run:
            logger.info(f"Dry run: {len(rows)} entries would be imported for {email}")
            return len(rows)

        for row in rows:
            session.add(JournalEntry(user_id=owner.id, **row))
        await session.commit()

    logger.info(f"✓ Imported {len(rows)} journal entries for {email}")
    return len(rows)


def main():
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        description="Import fishing journal entries from CSV"
    )
    parser.add_argument('csv_path', type=Path, help='CSV file to import')
    parser.add_argument('--email', required=True, help='Email of the account that owns the entries')
    parser.add_argument('--dry-run', action='store_true', help='Parse and validate without writing')

    args = parser.parse_args()
    asyncio.run(import_journal(args.csv_path, args.email, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
