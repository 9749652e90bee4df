import math
import statistics
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ringside.core.logging import get_logger
from ringside.models.metrics import WrestlerMetricsSnapshot
from ringside.schemas.wrestler import (
    ConfidenceLevel,
    Mention,
    RelatedNews,
    SourceBreakdown,
    Trend,
    Wrestler,
    WrestlerAnalysis,
)

logger = get_logger(__name__)


class KeywordMultiplier(BaseModel):
    """Multiplier applied when any of the terms appears in the content."""
    model_config = ConfigDict(frozen=True)

    terms: List[str]
    multiplier: float


class ScoringProfile(BaseModel):
    """All tunable constants of the push/burial scoring rules."""
    model_config = ConfigDict(frozen=True)

    name: str = "standard"
    push_sentiment_threshold: float = 0.6
    burial_sentiment_threshold: float = 0.4
    push_multipliers: List[KeywordMultiplier] = Field(default_factory=lambda: [
        KeywordMultiplier(terms=["champion", "title"], multiplier=1.5),
        KeywordMultiplier(terms=["main event"], multiplier=1.3),
        KeywordMultiplier(terms=["winner", "victory"], multiplier=1.2),
    ])
    burial_multipliers: List[KeywordMultiplier] = Field(default_factory=lambda: [
        KeywordMultiplier(terms=["fired", "released"], multiplier=2.0),
        KeywordMultiplier(terms=["buried", "jobber"], multiplier=1.8),
        KeywordMultiplier(terms=["lose", "defeat"], multiplier=1.3),
    ])

    # push when push - burial > margin and (push > min_score or avg sentiment > push_sentiment)
    trend_margin: float = 0.0
    trend_min_score: float = 2.0
    trend_push_sentiment: float = 0.55
    trend_burial_sentiment: float = 0.45

    on_fire_min_mentions: int = 2
    on_fire_min_sentiment: float = 0.6
    on_fire_min_push: float = 15.0

    high_coverage_mentions: int = 5
    moderate_coverage_mentions: int = 2
    related_news_limit: int = 10


SCORING_PROFILES: Dict[str, ScoringProfile] = {
    "standard": ScoringProfile(),
    "conservative": ScoringProfile(
        name="conservative",
        trend_margin=10.0,
        trend_min_score=0.0,
        trend_push_sentiment=0.0,
        trend_burial_sentiment=1.0,
        on_fire_min_mentions=3,
        on_fire_min_sentiment=0.0,
        on_fire_min_push=70.0,
        related_news_limit=5,
    ),
}


def get_scoring_profile(name: Optional[str]) -> ScoringProfile:
    """Look up a named profile, falling back to the standard one."""
    profile = SCORING_PROFILES.get((name or "standard").lower())
    if profile is None:
        logger.warning(f"Unknown scoring profile '{name}', using standard")
        return SCORING_PROFILES["standard"]
    return profile


def _highest_multiplier(content: str, multipliers: List[KeywordMultiplier]) -> float:
    applicable = [m.multiplier for m in multipliers if any(term in content for term in m.terms)]
    return max(applicable, default=1.0)


def calculate_mention_scores(
    content: str,
    sentiment: float,
    profile: Optional[ScoringProfile] = None,
) -> Tuple[float, float]:
    """
    Push and burial contribution of a single mention.

    Args:
        content: Text of the mention, matched by substring
        sentiment: Sentiment score in [0, 1]
        profile: Scoring constants

    Returns:
        Tuple of (push, burial)
    """
    profile = profile or SCORING_PROFILES["standard"]
    text = (content or "").lower()
    push = 0.0
    burial = 0.0

    if sentiment > profile.push_sentiment_threshold:
        push += (sentiment - 0.5) * 2 * _highest_multiplier(text, profile.push_multipliers)

    if sentiment < profile.burial_sentiment_threshold:
        burial += (0.5 - sentiment) * 2 * _highest_multiplier(text, profile.burial_multipliers)

    return push, burial


def determine_trend(
    push_score: float,
    burial_score: float,
    avg_sentiment: float,
    profile: Optional[ScoringProfile] = None,
) -> Trend:
    profile = profile or SCORING_PROFILES["standard"]

    if push_score - burial_score > profile.trend_margin and (
        push_score > profile.trend_min_score or avg_sentiment > profile.trend_push_sentiment
    ):
        return "push"
    if burial_score - push_score > profile.trend_margin and (
        burial_score > profile.trend_min_score or avg_sentiment < profile.trend_burial_sentiment
    ):
        return "burial"
    return "stable"


def calculate_confidence_level(
    mention_count: int,
    tier1_count: int,
    tier2_count: int,
    tier3_count: int,
    hours_since_last_mention: float,
) -> ConfidenceLevel:
    """Confidence in a wrestler's metrics from mention volume, source quality and recency."""
    trusted = tier1_count + tier2_count

    if mention_count >= 5 and trusted >= 2 and hours_since_last_mention <= 48:
        return "high"
    if mention_count >= 3 and trusted >= 1 and hours_since_last_mention <= 168:
        return "medium"
    return "low"


def coverage_evidence(mention_count: int, profile: Optional[ScoringProfile] = None) -> str:
    profile = profile or SCORING_PROFILES["standard"]
    if mention_count > profile.high_coverage_mentions:
        return "High Media Coverage"
    if mention_count > profile.moderate_coverage_mentions:
        return "Moderate Coverage"
    return "Limited Coverage"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, so 2.5 gives 3 and -2.5 gives -2."""
    return math.floor(value + 0.5)


def calculate_change_24h(
    trend: Trend,
    push_score: float,
    burial_score: float,
    momentum_score: float,
    previous: Optional[WrestlerMetricsSnapshot] = None,
) -> Tuple[float, bool]:
    """
    Momentum change against a snapshot taken 24 hours or more earlier.

    Without a snapshot the value is derived from the trend and flagged synthetic.

    Returns:
        Tuple of (change, synthetic)
    """
    if previous is not None:
        return round(momentum_score - previous.momentum_score, 2), False

    if trend == "push":
        return float(round_half_up(push_score / 2)), True
    if trend == "burial":
        return float(-round_half_up(burial_score / 2)), True
    return 0.0, True


def _mention_time(mention: Mention) -> datetime:
    moment = mention.item.published_at or mention.timestamp
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def calculate_wrestler_metrics(
    wrestler: Wrestler,
    mentions: List[Mention],
    previous: Optional[WrestlerMetricsSnapshot] = None,
    profile: Optional[ScoringProfile] = None,
    now: Optional[datetime] = None,
) -> Optional[WrestlerAnalysis]:
    """
    Aggregate a wrestler's mentions into push/burial/momentum metrics.

    Args:
        wrestler: Roster entry
        mentions: Mentions matched to this wrestler
        previous: Latest earlier snapshot, used for change_24h
        profile: Scoring constants
        now: Reference time for recency

    Returns:
        WrestlerAnalysis, or None when there are no mentions
    """
    if not mentions:
        return None

    profile = profile or SCORING_PROFILES["standard"]
    now = now or datetime.now(timezone.utc)
    count = len(mentions)

    avg_sentiment = statistics.mean(m.sentiment_score for m in mentions)
    push_acc = 0.0
    burial_acc = 0.0
    for mention in mentions:
        push, burial = calculate_mention_scores(mention.item.text, mention.sentiment_score, profile)
        push_acc += push
        burial_acc += burial

    push_score = max(0.0, min(push_acc / count * 100, 100.0))
    burial_score = max(0.0, min(burial_acc / count * 100, 100.0))

    trend = determine_trend(push_score, burial_score, avg_sentiment, profile)
    momentum_score = count * (avg_sentiment * 2) + (push_score - burial_score)
    popularity_score = round_half_up(count * 10 + avg_sentiment * 50)
    is_on_fire = (
        count >= profile.on_fire_min_mentions
        and avg_sentiment > profile.on_fire_min_sentiment
        and push_score > profile.on_fire_min_push
    )
    change_24h, synthetic = calculate_change_24h(trend, push_score, burial_score, momentum_score, previous)

    tiers = [m.credibility_tier for m in mentions]
    latest = max(_mention_time(m) for m in mentions)
    hours_since_last = max((now - latest).total_seconds() / 3600, 0.0)
    confidence_level = calculate_confidence_level(
        count, tiers.count(1), tiers.count(2), tiers.count(3), hours_since_last
    )

    related_news = [
        RelatedNews(
            title=m.item.title,
            link=m.item.link or "#",
            source=m.item.source,
            published_at=m.item.published_at,
        )
        for m in mentions[:profile.related_news_limit]
    ]
    news_count = sum(1 for m in mentions if m.item.source_type == "news")

    return WrestlerAnalysis(
        wrestler_id=wrestler.id,
        wrestler_name=wrestler.name,
        promotion=wrestler.promotion,
        total_mentions=count,
        push_score=push_score,
        burial_score=burial_score,
        momentum_score=momentum_score,
        popularity_score=popularity_score,
        sentiment_score=round_half_up(avg_sentiment * 100),
        avg_sentiment=avg_sentiment,
        trend=trend,
        is_on_fire=is_on_fire,
        change_24h=change_24h,
        change_24h_synthetic=synthetic,
        confidence_level=confidence_level,
        evidence=coverage_evidence(count, profile),
        is_champion=wrestler.is_champion,
        championship_title=wrestler.championship_title,
        related_news=related_news,
        source_breakdown=SourceBreakdown(
            news_count=news_count,
            reddit_count=count - news_count,
            total_sources=count,
        ),
    )
