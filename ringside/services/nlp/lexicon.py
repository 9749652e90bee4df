from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from ringside.core.config import get_settings
from ringside.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent.parent.parent / "lexicon" / "wrestling.yaml"


class MatcherConfig(BaseModel):
    """Vocabularies and thresholds for wrestler name matching."""
    aliases: Dict[str, List[str]] = Field(default_factory=dict)
    distinctive_surnames: List[str] = Field(default_factory=list)
    context_terms: List[str] = Field(default_factory=list)
    common_first_names: List[str] = Field(default_factory=list)
    common_surnames: List[str] = Field(default_factory=list)
    standalone_first_names: List[str] = Field(default_factory=list)
    proximity_window: int = 200
    min_single_name_length: int = 3
    min_distinctive_surname_length: int = 4
    min_context_token_length: int = 4


class SourceCredibility(BaseModel):
    tier: int = 3
    weight: float = 1.0


class SentimentLexicon(BaseModel):
    """Keyword bags for wrestling-domain sentiment."""
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)
    kayfabe: List[str] = Field(default_factory=list)
    backstage: List[str] = Field(default_factory=list)
    sources: Dict[str, SourceCredibility] = Field(default_factory=dict)

    def credibility_for(self, source: Optional[str]) -> SourceCredibility:
        """Look up a source case-insensitively; unknown sources are tier 3, weight 1.0."""
        if source:
            wanted = source.lower()
            for name, credibility in self.sources.items():
                if name.lower() == wanted:
                    return credibility
        return SourceCredibility()


class Lexicon(BaseModel):
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    sentiment: SentimentLexicon = Field(default_factory=SentimentLexicon)


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    """Load the lexicon from YAML, falling back to an empty lexicon on error."""
    config_path = Path(path) if path else DEFAULT_LEXICON_PATH

    try:
        with open(config_path, 'r', encoding='utf-8') as file:
            config = yaml.safe_load(file) or {}
        return Lexicon.model_validate(config)
    except Exception as e:
        logger.error(f"Failed to load lexicon from {config_path}: {e}")
        return Lexicon()


@lru_cache()
def get_lexicon() -> Lexicon:
    """Lexicon configured by LEXICON_PATH, loaded once per process."""
    settings = get_settings()
    return load_lexicon(settings.LEXICON_PATH or None)
