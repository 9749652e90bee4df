from sqlmodel import Field

from ringside.models.base import BaseModel


class WrestlerMetricsSnapshot(BaseModel, table=True):
    """Metrics of one wrestler at the end of one analysis run."""

    wrestler_id: str = Field(index=True, max_length=100)
    wrestler_name: str = Field(max_length=255)
    promotion: str = Field(default="Unknown", max_length=100)

    mention_count: int = Field(default=0)
    push_score: float = Field(default=0.0)
    burial_score: float = Field(default=0.0)
    momentum_score: float = Field(default=0.0)
    popularity_score: int = Field(default=0)
    avg_sentiment: float = Field(default=0.5)
    trend: str = Field(default="stable", max_length=10)  # push, burial, stable
    confidence_level: str = Field(default="low", max_length=10)
