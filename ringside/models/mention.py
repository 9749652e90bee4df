from datetime import datetime
from typing import Optional

from sqlmodel import Field, Column, Text

from ringside.models.base import BaseModel


class MentionLog(BaseModel, table=True):
    """One row per wrestler mention found in an analysis run."""

    wrestler_id: str = Field(index=True, max_length=100)
    wrestler_name: str = Field(max_length=255)

    # Source content
    title: str = Field(default="", max_length=500)
    snippet: Optional[str] = Field(default=None, sa_column=Column(Text))
    url: Optional[str] = Field(default=None, max_length=1000)
    source_name: str = Field(index=True, max_length=100)
    source_type: str = Field(max_length=20)  # news, reddit
    credibility_tier: int = Field(default=3)

    # Sentiment analysis
    sentiment_score: float
    keywords: Optional[str] = Field(default=None, max_length=1000)  # comma separated
    context: str = Field(default="mixed", max_length=20)  # kayfabe, backstage, mixed

    published_at: Optional[datetime] = Field(default=None, index=True)
