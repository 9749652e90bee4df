from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Trend = Literal["push", "burial", "stable"]
ConfidenceLevel = Literal["high", "medium", "low"]
SourceType = Literal["news", "reddit"]


class Wrestler(BaseModel):
    """Roster entry supplied by the roster provider."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    promotion: str = Field(default="Unknown", alias="brand")
    is_champion: bool = False
    championship_title: Optional[str] = None


class ContentItem(BaseModel):
    """News article or Reddit post, normalized."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    snippet: str = ""
    link: str = ""
    published_at: Optional[datetime] = None
    source: str = "Unknown"
    source_type: SourceType = "news"
    engagement: int = 0

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}"

    @classmethod
    def from_news(cls, raw: Dict[str, Any]) -> "ContentItem":
        """Build from an RSS-shaped dict (contentSnippet/link/pubDate)."""
        return cls(
            title=raw.get("title") or "",
            snippet=raw.get("contentSnippet") or raw.get("snippet") or "",
            link=raw.get("link") or "",
            published_at=_parse_datetime(raw.get("pubDate") or raw.get("published_at")),
            source=raw.get("source") or "Unknown",
            source_type="news",
        )

    @classmethod
    def from_reddit(cls, raw: Dict[str, Any]) -> "ContentItem":
        """Build from a Reddit listing child (selftext/permalink/created_utc)."""
        permalink = raw.get("permalink") or ""
        link = f"https://www.reddit.com{permalink}" if permalink.startswith("/") else (permalink or raw.get("url") or "")
        created_utc = raw.get("created_utc")
        subreddit = raw.get("subreddit")

        return cls(
            title=raw.get("title") or "",
            snippet=raw.get("selftext") or "",
            link=link,
            published_at=datetime.fromtimestamp(created_utc, tz=timezone.utc) if created_utc else None,
            source=f"r/{subreddit}" if subreddit else "Reddit",
            source_type="reddit",
            engagement=int(raw.get("score") or 0) + int(raw.get("num_comments") or 0),
        )


class Mention(BaseModel):
    """A content item judged to reference a wrestler."""
    model_config = ConfigDict(frozen=True)

    wrestler_id: str
    wrestler_name: str
    item: ContentItem
    sentiment_score: float
    keywords: List[str] = Field(default_factory=list)
    context: str = "mixed"
    credibility_tier: int = 3
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RelatedNews(BaseModel):
    title: str
    link: str
    source: str
    published_at: Optional[datetime] = None


class SourceBreakdown(BaseModel):
    news_count: int = 0
    reddit_count: int = 0
    total_sources: int = 0


class WrestlerAnalysis(BaseModel):
    """Per-wrestler aggregate, recomputed on every analysis pass."""
    wrestler_id: str
    wrestler_name: str
    promotion: str
    total_mentions: int
    push_score: float = Field(ge=0, le=100)
    burial_score: float = Field(ge=0, le=100)
    momentum_score: float
    popularity_score: int
    sentiment_score: int  # 0-100
    avg_sentiment: float  # 0-1
    trend: Trend
    is_on_fire: bool
    change_24h: float
    change_24h_synthetic: bool
    confidence_level: ConfidenceLevel
    evidence: str
    is_champion: bool = False
    championship_title: Optional[str] = None
    related_news: List[RelatedNews] = Field(default_factory=list)
    source_breakdown: SourceBreakdown = Field(default_factory=SourceBreakdown)


class AnalysisResponse(BaseModel):
    """Latest analysis run."""
    items: List[WrestlerAnalysis]
    total: int
    content_items: int
    updated_at: Optional[datetime]


class RefreshResponse(BaseModel):
    status: str
    wrestlers_analyzed: int
    updated_at: Optional[datetime]


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 or RFC-822 dates; unparseable values become None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        from email.utils import parsedate_to_datetime
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None

    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class LeaderboardResponse(BaseModel):
    """Top-push or worst-buried board."""
    board: Literal["push", "burial"]
    items: List[WrestlerAnalysis]
    updated_at: Optional[datetime]


class MetricsSnapshotItem(BaseModel):
    """Persisted metrics of one analysis run."""
    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    mention_count: int
    push_score: float
    burial_score: float
    momentum_score: float
    popularity_score: int
    avg_sentiment: float
    trend: str
    confidence_level: str


class WrestlerHistoryResponse(BaseModel):
    wrestler_id: str
    items: List[MetricsSnapshotItem]
