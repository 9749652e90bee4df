"""Mention detection and push/burial analysis pipeline."""
import asyncio
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ringside.core.config import get_settings
from ringside.core.logging import get_logger, setup_logging
from ringside.models.metrics import WrestlerMetricsSnapshot
from ringside.schemas.wrestler import ContentItem, Mention, Wrestler, WrestlerAnalysis
from ringside.services.filtering.filters import filter_items_by_period, filter_popular_wrestlers
from ringside.services.ingest.reddit_client import RedditClient
from ringside.services.ingest.roster import load_roster
from ringside.services.ingest.rss_client import RSSClient
from ringside.services.nlp.matching import WrestlerNameMatcher, get_default_matcher
from ringside.services.nlp.sentiment import SentimentAnalyzer, get_sentiment_analyzer
from ringside.services.scoring.momentum import ScoringProfile, calculate_wrestler_metrics, get_scoring_profile
from ringside.services.scoring.ranking import sort_by_mentions
from ringside.services.storage.metrics_store import MetricsStore

logger = get_logger(__name__)

# change_24h compares against the latest snapshot at least this old
CHANGE_WINDOW = timedelta(hours=24)


def merge_duplicate_wrestlers(wrestlers: List[Wrestler]) -> List[Wrestler]:
    """Collapse roster entries sharing a name; the first entry wins."""
    merged: Dict[str, Wrestler] = {}
    for wrestler in wrestlers:
        key = " ".join(wrestler.name.lower().split())
        if key and key not in merged:
            merged[key] = wrestler
    return list(merged.values())


def collect_mentions(
    wrestlers: List[Wrestler],
    items: List[ContentItem],
    matcher: Optional[WrestlerNameMatcher] = None,
    analyzer: Optional[SentimentAnalyzer] = None,
) -> List[Mention]:
    """
    Match every wrestler against every item and score the matched items.

    Returns:
        Flat list of mentions, grouped by wrestler in roster order
    """
    matcher = matcher or get_default_matcher()
    analyzer = analyzer or get_sentiment_analyzer()
    sentiments: Dict[int, dict] = {}
    mentions: List[Mention] = []

    for wrestler in merge_duplicate_wrestlers(wrestlers):
        for index, item in enumerate(items):
            if not matcher.is_mentioned(wrestler.name, item.text):
                continue

            # Sentiment depends only on the item
            if index not in sentiments:
                sentiments[index] = analyzer.analyze_sentiment(item.text, item.source)
            sentiment = sentiments[index]

            mentions.append(Mention(
                wrestler_id=wrestler.id,
                wrestler_name=wrestler.name,
                item=item,
                sentiment_score=sentiment["score"],
                keywords=sentiment["keywords"],
                context=sentiment["context"],
                credibility_tier=sentiment["credibility_tier"],
            ))

    return mentions


def analyze_wrestler_mentions(
    wrestlers: List[Wrestler],
    items: List[ContentItem],
    matcher: Optional[WrestlerNameMatcher] = None,
    analyzer: Optional[SentimentAnalyzer] = None,
    profile: Optional[ScoringProfile] = None,
    previous_snapshots: Optional[Dict[str, WrestlerMetricsSnapshot]] = None,
    mentions: Optional[List[Mention]] = None,
    now: Optional[datetime] = None,
) -> List[WrestlerAnalysis]:
    """
    Per-wrestler analysis over a batch of content items.

    Wrestlers without mentions are omitted. Results are ordered by total
    mentions, then momentum, both descending.

    Args:
        wrestlers: Roster
        items: News and Reddit items
        matcher: Name matcher, defaults to the bundled lexicon
        analyzer: Sentiment analyzer, defaults to the bundled lexicon
        profile: Scoring constants
        previous_snapshots: Snapshot from 24 hours or more earlier per wrestler id, for change_24h
        mentions: Precomputed output of collect_mentions for the same inputs
        now: Reference time for recency
    """
    if mentions is None:
        mentions = collect_mentions(wrestlers, items, matcher, analyzer)
    previous_snapshots = previous_snapshots or {}

    by_wrestler: Dict[str, List[Mention]] = {}
    for mention in mentions:
        by_wrestler.setdefault(mention.wrestler_id, []).append(mention)

    analyses = []
    for wrestler in merge_duplicate_wrestlers(wrestlers):
        analysis = calculate_wrestler_metrics(
            wrestler,
            by_wrestler.get(wrestler.id, []),
            previous=previous_snapshots.get(wrestler.id),
            profile=profile,
            now=now,
        )
        if analysis is not None:
            analyses.append(analysis)

    return sort_by_mentions(analyses)


class AnalysisPipeline:
    """Fetches content, analyses it and keeps the latest results in memory."""

    def __init__(
        self,
        store: Optional[MetricsStore] = None,
        roster: Optional[List[Wrestler]] = None,
        matcher: Optional[WrestlerNameMatcher] = None,
        analyzer: Optional[SentimentAnalyzer] = None,
    ):
        self.settings = get_settings()
        self.store = store
        self.roster = roster if roster is not None else load_roster(self.settings.ROSTER_PATH or None)
        self.matcher = matcher or get_default_matcher()
        self.analyzer = analyzer or get_sentiment_analyzer()
        self.profile = get_scoring_profile(self.settings.SCORING_PROFILE)

        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._results: List[WrestlerAnalysis] = []
        self._content_count = 0
        self._updated_at: Optional[datetime] = None

    @property
    def results(self) -> List[WrestlerAnalysis]:
        with self._lock:
            return list(self._results)

    @property
    def updated_at(self) -> Optional[datetime]:
        with self._lock:
            return self._updated_at

    @property
    def content_count(self) -> int:
        with self._lock:
            return self._content_count

    def get_wrestler(self, wrestler_id: str) -> Optional[WrestlerAnalysis]:
        for analysis in self.results:
            if analysis.wrestler_id == wrestler_id:
                return analysis
        return None

    async def fetch_content(self) -> List[ContentItem]:
        """Fetch news and Reddit items concurrently."""
        rss = RSSClient()
        reddit = RedditClient()

        try:
            news, posts = await asyncio.gather(rss.fetch_feeds(), reddit.fetch_posts())
            logger.info(f"Fetched {len(news)} news items and {len(posts)} Reddit posts")
            return news + posts
        finally:
            await rss.close()
            await reddit.close()

    def analyze(self, items: List[ContentItem], now: Optional[datetime] = None) -> List[WrestlerAnalysis]:
        """Analyse a batch of items, persist the outcome and publish it as the latest results."""
        now = now or datetime.now(timezone.utc)

        wrestlers = filter_popular_wrestlers(self.roster, self.matcher.config.aliases)
        recent = filter_items_by_period(items, self.settings.ANALYSIS_PERIOD_DAYS, now=now)
        mentions = collect_mentions(wrestlers, recent, self.matcher, self.analyzer)

        previous = self.store.get_previous_snapshots(before=now - CHANGE_WINDOW) if self.store else {}
        analyses = analyze_wrestler_mentions(
            wrestlers,
            recent,
            profile=self.profile,
            previous_snapshots=previous,
            mentions=mentions,
            now=now,
        )

        if self.store:
            self.store.store_mentions(mentions)
            self.store.store_metrics(analyses, recorded_at=now)

        with self._lock:
            self._results = analyses
            self._content_count = len(recent)
            self._updated_at = now

        logger.info(
            f"Analysed {len(recent)} items: {len(mentions)} mentions across {len(analyses)} wrestlers"
        )
        return analyses

    async def refresh(self) -> List[WrestlerAnalysis]:
        """Run one full fetch-and-analyse pass; a pass already in progress is not repeated."""
        if not self._refresh_lock.acquire(blocking=False):
            logger.info("Refresh already in progress, skipping")
            return self.results

        try:
            items = await self.fetch_content()
            if not items:
                logger.warning("No content fetched, keeping previous results")
                return self.results
            # Matching and persistence are blocking; keep them off the event loop
            return await asyncio.to_thread(self.analyze, items)
        except Exception as e:
            logger.error(f"Analysis pipeline error: {e}")
            return self.results
        finally:
            self._refresh_lock.release()


async def main():
    """Main entry point for a one-off analysis run."""
    setup_logging()

    from ringside.db.session import create_db_and_tables, engine

    create_db_and_tables()
    pipeline = AnalysisPipeline(store=MetricsStore(engine))
    analyses = await pipeline.refresh()

    for analysis in analyses[:10]:
        logger.info(
            f"{analysis.wrestler_name}: {analysis.total_mentions} mentions, "
            f"trend={analysis.trend}, momentum={analysis.momentum_score:.1f}"
        )


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
