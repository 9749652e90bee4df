from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ringside.core.logging import get_logger
from ringside.models.mention import MentionLog
from ringside.models.metrics import WrestlerMetricsSnapshot
from ringside.schemas.wrestler import Mention, WrestlerAnalysis

logger = get_logger(__name__)


def _as_utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


class MetricsStore:
    """Write-mostly store for mention logs and metric snapshots."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def store_mentions(self, mentions: List[Mention]) -> int:
        """
        Persist mentions as log rows.

        Returns:
            Number of rows written, 0 on failure
        """
        if not mentions:
            return 0

        rows = [
            MentionLog(
                wrestler_id=m.wrestler_id,
                wrestler_name=m.wrestler_name,
                title=m.item.title[:500],
                snippet=m.item.snippet,
                url=m.item.link[:1000] or None,
                source_name=m.item.source,
                source_type=m.item.source_type,
                credibility_tier=m.credibility_tier,
                sentiment_score=m.sentiment_score,
                keywords=",".join(m.keywords)[:1000] or None,
                context=m.context,
                published_at=m.item.published_at,
            )
            for m in mentions
        ]

        try:
            with Session(self.engine) as session:
                session.add_all(rows)
                session.commit()
        except Exception as e:
            logger.error(f"Failed to store mentions: {e}")
            return 0

        logger.info(f"Stored {len(rows)} mentions")
        return len(rows)

    def store_metrics(self, analyses: List[WrestlerAnalysis], recorded_at: Optional[datetime] = None) -> int:
        """Persist one snapshot per analysed wrestler."""
        if not analyses:
            return 0

        recorded_at = _as_utc(recorded_at or datetime.now(timezone.utc))
        rows = [
            WrestlerMetricsSnapshot(
                wrestler_id=a.wrestler_id,
                wrestler_name=a.wrestler_name,
                promotion=a.promotion,
                mention_count=a.total_mentions,
                push_score=a.push_score,
                burial_score=a.burial_score,
                momentum_score=a.momentum_score,
                popularity_score=a.popularity_score,
                avg_sentiment=a.avg_sentiment,
                trend=a.trend,
                confidence_level=a.confidence_level,
                created_at=recorded_at,
                updated_at=recorded_at,
            )
            for a in analyses
        ]

        try:
            with Session(self.engine) as session:
                session.add_all(rows)
                session.commit()
        except Exception as e:
            logger.error(f"Failed to store metrics: {e}")
            return 0

        logger.info(f"Stored metrics for {len(rows)} wrestlers")
        return len(rows)

    def get_previous_snapshots(self, before: Optional[datetime] = None) -> Dict[str, WrestlerMetricsSnapshot]:
        """
        Latest snapshot per wrestler recorded at or before `before`.

        Returns:
            Dict of wrestler_id to snapshot; empty on failure
        """
        before = _as_utc(before or datetime.now(timezone.utc))

        try:
            with Session(self.engine) as session:
                latest = (
                    select(
                        WrestlerMetricsSnapshot.wrestler_id,
                        func.max(WrestlerMetricsSnapshot.created_at).label("latest_at"),
                    )
                    .where(WrestlerMetricsSnapshot.created_at <= before)
                    .group_by(WrestlerMetricsSnapshot.wrestler_id)
                    .subquery()
                )
                snapshots = session.exec(
                    select(WrestlerMetricsSnapshot).join(
                        latest,
                        (WrestlerMetricsSnapshot.wrestler_id == latest.c.wrestler_id)
                        & (WrestlerMetricsSnapshot.created_at == latest.c.latest_at),
                    )
                ).all()
        except Exception as e:
            logger.error(f"Failed to load previous snapshots: {e}")
            return {}

        return {snapshot.wrestler_id: snapshot for snapshot in snapshots}

    def get_history(self, wrestler_id: str, limit: int = 20) -> List[WrestlerMetricsSnapshot]:
        """Most recent snapshots of one wrestler, newest first."""
        try:
            with Session(self.engine) as session:
                return list(session.exec(
                    select(WrestlerMetricsSnapshot)
                    .where(WrestlerMetricsSnapshot.wrestler_id == wrestler_id)
                    .order_by(WrestlerMetricsSnapshot.created_at.desc())
                    .limit(limit)
                ).all())
        except Exception as e:
            logger.error(f"Failed to load history for {wrestler_id}: {e}")
            return []
