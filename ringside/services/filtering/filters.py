from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, TypeVar

from ringside.core.logging import get_logger
from ringside.schemas.wrestler import ContentItem, Wrestler

logger = get_logger(__name__)

T = TypeVar("T")

NON_WRESTLER_MARKERS = ("referee", "announcer", "commentator", "road agent", "music group")
FALLBACK_PERIOD_DAYS = 7


def filter_wrestlers_by_promotion(wrestlers: Sequence[T], promotion: Optional[str]) -> List[T]:
    """
    Keep entries whose promotion contains `promotion` (case-insensitive).

    Works on anything with a `promotion` attribute; "all" or empty keeps everything.
    """
    if not promotion or promotion.lower() == "all":
        return list(wrestlers)

    wanted = promotion.lower()
    return [w for w in wrestlers if wanted in (getattr(w, "promotion", "") or "").lower()]


def filter_popular_wrestlers(
    wrestlers: Sequence[Wrestler],
    aliased_names: Optional[Iterable[str]] = None,
) -> List[Wrestler]:
    """
    Drop referees, announcers and other non-wrestlers, and names of 3 characters or fewer.

    Short names listed in `aliased_names` are kept, since their aliases make them matchable.
    """
    aliased = {" ".join(name.lower().split()) for name in (aliased_names or [])}
    popular = []
    for wrestler in wrestlers:
        name = wrestler.name.lower()
        if any(marker in name for marker in NON_WRESTLER_MARKERS):
            continue
        if len(wrestler.name) <= 3 and " ".join(name.split()) not in aliased:
            continue
        popular.append(wrestler)
    return popular


def _newer_than(items: Sequence[ContentItem], cutoff: datetime) -> List[ContentItem]:
    # Undated items cannot be aged out
    return [item for item in items if item.published_at is None or item.published_at >= cutoff]


def filter_items_by_period(
    items: Sequence[ContentItem],
    days: int,
    now: Optional[datetime] = None,
    min_items: int = 50,
) -> List[ContentItem]:
    """
    Keep items published within the last `days` days.

    When fewer than `min_items` remain, the window is widened to seven days
    if that yields more items.
    """
    now = now or datetime.now(timezone.utc)
    selected = _newer_than(items, now - timedelta(days=days))

    if len(selected) < min_items and days < FALLBACK_PERIOD_DAYS:
        widened = _newer_than(items, now - timedelta(days=FALLBACK_PERIOD_DAYS))
        if len(widened) > len(selected):
            logger.info(f"Only {len(selected)} items in last {days} days, widening to {FALLBACK_PERIOD_DAYS}")
            selected = widened

    return selected
