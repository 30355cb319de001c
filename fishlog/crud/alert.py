"""
Flow alert rule CRUD operations.
"""

from typing import Dict, Optional
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fishlog.models.flow_alert import FlowAlert
from fishlog.services.alerts import AlertKind


class CRUDFlowAlert:
    """
    Alert rules per user, gauge and kind.

    Only enabled rules are stored; disabling a kind deletes its row.
    """

    async def get_for_site(self, db: AsyncSession, *, user_id: int, site_number: str) -> Dict[str, FlowAlert]:
        """A gauge's rules keyed by kind ("high", "low", "flood")."""
        result = await db.execute(
            select(FlowAlert).where(
                FlowAlert.user_id == user_id,
                FlowAlert.site_number == site_number,
            )
        )
        return {row.kind: row for row in result.scalars().all()}

    async def get_by_site_for_user(self, db: AsyncSession, *, user_id: int) -> Dict[str, Dict[str, FlowAlert]]:
        """All of a user's rules, grouped by site number then kind."""
        result = await db.execute(select(FlowAlert).where(FlowAlert.user_id == user_id))
        grouped: Dict[str, Dict[str, FlowAlert]] = {}
        for row in result.scalars().all():
            grouped.setdefault(row.site_number, {})[row.kind] = row
        return grouped

    async def set_rule(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        site_number: str,
        kind: AlertKind,
        threshold_cfs: Optional[float],
        enabled: bool,
    ) -> Optional[FlowAlert]:
        """
        Create, update or remove one rule.

        A changed threshold resets the cooldown. Returns None when the rule
        was removed.
        """
        existing = (await self.get_for_site(db, user_id=user_id, site_number=site_number)).get(kind.value)

        if not enabled or threshold_cfs is None:
            if existing:
                await db.delete(existing)
            return None

        if existing:
            if existing.threshold_cfs != threshold_cfs:
                existing.threshold_cfs = threshold_cfs
                existing.last_triggered_at = None
            existing.enabled = True
            db.add(existing)
            return existing

        rule = FlowAlert(
            user_id=user_id,
            site_number=site_number,
            kind=kind.value,
            threshold_cfs=threshold_cfs,
            enabled=True,
            last_triggered_at=None,
        )
        db.add(rule)
        return rule

    async def remove_for_site(self, db: AsyncSession, *, user_id: int, site_number: str) -> None:
        await db.execute(
            delete(FlowAlert).where(
                FlowAlert.user_id == user_id,
                FlowAlert.site_number == site_number,
            )
        )


flow_alert = CRUDFlowAlert()
