import asyncio
import html
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser
import httpx

from ringside.core.config import get_settings
from ringside.core.logging import get_logger
from ringside.schemas.wrestler import ContentItem

logger = get_logger(__name__)

TAG_RE = re.compile(r"<[^>]+>")
WHITESPACE_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Remove tags and entities from an RSS description."""
    if not text:
        return ""
    cleaned = html.unescape(TAG_RE.sub(" ", text))
    return WHITESPACE_RE.sub(" ", cleaned).strip()


class RSSClient:
    """Client for wrestling news RSS feeds."""

    def __init__(
        self,
        feeds: Optional[Dict[str, str]] = None,
        items_per_feed: int = 10,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.feeds = feeds if feeds is not None else settings.RSS_FEEDS
        self.items_per_feed = items_per_feed
        self.client = httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            follow_redirects=True,
            headers={"User-Agent": settings.HTTP_USER_AGENT},
        )

    async def fetch_feed(self, source: str, url: str) -> List[Dict[str, Any]]:
        """
        Fetch and parse a single feed.

        Args:
            source: Display name of the feed
            url: Feed URL

        Returns:
            List of news-shaped dicts; empty on any failure
        """
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            feed = feedparser.parse(response.text)

            entries = []
            for entry in feed.entries[:self.items_per_feed]:
                entries.append({
                    "title": strip_html(entry.get("title")),
                    "contentSnippet": strip_html(entry.get("summary") or entry.get("description")),
                    "link": entry.get("link") or "",
                    "pubDate": entry.get("published") or entry.get("updated"),
                    "guid": entry.get("id") or entry.get("link"),
                    "source": source,
                })

            logger.info(f"Fetched {len(entries)} items from {source}")
            return entries

        except Exception as e:
            logger.error(f"RSS feed error for {source}: {e}")
            return []

    async def fetch_feeds(self) -> List[ContentItem]:
        """Fetch all configured feeds, deduplicated and sorted newest first."""
        results = await asyncio.gather(
            *(self.fetch_feed(source, url) for source, url in self.feeds.items())
        )

        seen = set()
        items: List[ContentItem] = []
        for entries in results:
            for entry in entries:
                title_key = entry["title"].lower()
                guid_key = entry.get("guid")
                if not title_key or title_key in seen or (guid_key and guid_key in seen):
                    continue
                seen.add(title_key)
                if guid_key:
                    seen.add(guid_key)
                items.append(ContentItem.from_news(entry))

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        items.sort(key=lambda item: item.published_at or epoch, reverse=True)

        logger.info(f"Collected {len(items)} unique news items from {len(self.feeds)} feeds")
        return items

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
