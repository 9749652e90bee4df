import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Pattern, Tuple

from ringside.core.logging import get_logger
from ringside.services.nlp.lexicon import SentimentLexicon, SourceCredibility, get_lexicon

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5


class SentimentAnalyzer:
    """Wrestling-domain sentiment analyzer based on keyword counting."""

    def __init__(self, lexicon: Optional[SentimentLexicon] = None):
        self.lexicon = lexicon if lexicon is not None else get_lexicon().sentiment
        self._positive = self._compile(self.lexicon.positive)
        self._negative = self._compile(self.lexicon.negative)
        self._kayfabe = self._compile(self.lexicon.kayfabe)
        self._backstage = self._compile(self.lexicon.backstage)

    @staticmethod
    def _compile(keywords: List[str]) -> List[Tuple[str, Pattern]]:
        """Compile whole-word patterns for a keyword list."""
        patterns = []
        for keyword in keywords:
            keyword = keyword.strip().lower()
            if not keyword:
                continue
            pattern = r'\b' + re.escape(keyword).replace(r'\ ', r'\s+') + r'\b'
            patterns.append((keyword, re.compile(pattern, re.IGNORECASE)))
        return patterns

    @staticmethod
    def _count(patterns: List[Tuple[str, Pattern]], text: str, found: Optional[List[str]] = None) -> int:
        total = 0
        for keyword, pattern in patterns:
            hits = len(pattern.findall(text))
            if hits and found is not None:
                found.append(keyword)
            total += hits
        return total

    def _apply_source_weighting(self, score: float, credibility: SourceCredibility) -> float:
        """Scale the distance from neutral by the source weight, capped at the [0, 1] range."""
        distance = min(abs(score - NEUTRAL_SCORE) * credibility.weight, NEUTRAL_SCORE)
        if score > NEUTRAL_SCORE:
            return NEUTRAL_SCORE + distance
        return NEUTRAL_SCORE - distance

    def analyze_sentiment(self, text: Optional[str], source: Optional[str] = None) -> Dict[str, Any]:
        """
        Analyze sentiment of text.

        Args:
            text: Title and snippet of a content item
            source: Optional source name used for credibility weighting

        Returns:
            Dict with score (0-1), keywords, confidence and context
        """
        content = (text or "").lower()
        keywords: List[str] = []

        positive = self._count(self._positive, content, keywords)
        negative = self._count(self._negative, content, keywords)
        kayfabe = self._count(self._kayfabe, content)
        backstage = self._count(self._backstage, content)

        if backstage > kayfabe:
            context = "backstage"
        elif kayfabe > backstage:
            context = "kayfabe"
        else:
            context = "mixed"

        total = positive + negative
        score = positive / total if total > 0 else NEUTRAL_SCORE

        credibility = self.lexicon.credibility_for(source)
        if source is not None:
            score = self._apply_source_weighting(score, credibility)

        confidence = min(1.0, len(keywords) * 0.2 + credibility.weight * 0.3)

        return {
            "score": max(0.0, min(1.0, score)),
            "keywords": keywords,
            "confidence": max(0.1, confidence),
            "context": context,
            "credibility_tier": credibility.tier,
        }


@lru_cache()
def get_sentiment_analyzer() -> SentimentAnalyzer:
    return SentimentAnalyzer()


def analyze_sentiment(text: Optional[str], source: Optional[str] = None) -> Dict[str, Any]:
    return get_sentiment_analyzer().analyze_sentiment(text, source)
