import asyncio
from typing import Any, Dict, List, Optional

import httpx

from ringside.core.config import get_settings
from ringside.core.logging import get_logger
from ringside.schemas.wrestler import ContentItem

logger = get_logger(__name__)


class RedditClient:
    """Client for subreddit hot listings (unauthenticated JSON API)."""

    def __init__(
        self,
        subreddits: Optional[List[str]] = None,
        posts_per_subreddit: int = 10,
        max_posts: int = 50,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.subreddits = subreddits if subreddits is not None else settings.SUBREDDITS
        self.posts_per_subreddit = posts_per_subreddit
        self.max_posts = max_posts
        self.base_url = "https://www.reddit.com"
        self.client = httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            headers={"User-Agent": settings.HTTP_USER_AGENT},
        )

    async def fetch_subreddit(self, subreddit: str) -> List[Dict[str, Any]]:
        """Fetch hot posts of one subreddit; empty on failure."""
        try:
            response = await self.client.get(
                f"{self.base_url}/r/{subreddit}/hot.json",
                params={"limit": self.posts_per_subreddit},
            )
            response.raise_for_status()

            data = response.json()
            posts = [child.get("data", {}) for child in data.get("data", {}).get("children", [])]
            posts = [post for post in posts if post.get("title")]

            logger.info(f"Fetched {len(posts)} posts from r/{subreddit}")
            return posts

        except Exception as e:
            logger.error(f"Reddit API error for r/{subreddit}: {e}")
            return []

    async def fetch_posts(self) -> List[ContentItem]:
        """Hot posts across configured subreddits, highest score first."""
        results = await asyncio.gather(*(self.fetch_subreddit(s) for s in self.subreddits))

        posts = [post for batch in results for post in batch]
        posts.sort(key=lambda post: post.get("score") or 0, reverse=True)

        items = [ContentItem.from_reddit(post) for post in posts[:self.max_posts]]
        logger.info(f"Collected {len(items)} Reddit posts from {len(self.subreddits)} subreddits")
        return items

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
