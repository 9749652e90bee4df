import re
from functools import lru_cache
from typing import Dict, List, Optional, Pattern

from ringside.core.logging import get_logger
from ringside.services.nlp.lexicon import MatcherConfig, get_lexicon

logger = get_logger(__name__)


def _term_pattern(term: str) -> str:
    """Whole-word pattern for a term; inner whitespace matches any run of whitespace."""
    return r'\b' + re.escape(term.lower()).replace(r'\ ', r'\s+') + r'\b'


def _normalize_name(name: str) -> str:
    return " ".join((name or "").lower().split())


class WrestlerNameMatcher:
    """Decides whether a wrestler is mentioned in free text using name-variant heuristics."""

    def __init__(self, config: MatcherConfig):
        self.config = config
        self._aliases = {_normalize_name(name): variants for name, variants in config.aliases.items()}
        self._distinctive_surnames = {s.lower() for s in config.distinctive_surnames}
        self._common_first_names = {n.lower() for n in config.common_first_names}
        self._common_surnames = {s.lower() for s in config.common_surnames}
        self._standalone_first_names = {n.lower() for n in config.standalone_first_names}
        self._context_pattern = self._compile_any(config.context_terms)
        self._token_patterns: Dict[str, Pattern] = {}
        self._alias_patterns: Dict[str, Optional[Pattern]] = {}

    @staticmethod
    def _compile_any(terms: List[str]) -> Optional[Pattern]:
        patterns = [_term_pattern(term) for term in terms if term.strip()]
        if not patterns:
            return None
        return re.compile('|'.join(patterns), re.IGNORECASE)

    def _token(self, token: str) -> Pattern:
        pattern = self._token_patterns.get(token)
        if pattern is None:
            pattern = re.compile(_term_pattern(token), re.IGNORECASE)
            self._token_patterns[token] = pattern
        return pattern

    def _alias(self, name: str) -> Optional[Pattern]:
        if name not in self._alias_patterns:
            self._alias_patterns[name] = self._compile_any(self._aliases.get(name, []))
        return self._alias_patterns[name]

    def has_wrestling_context(self, text: str) -> bool:
        return bool(self._context_pattern and self._context_pattern.search(text))

    def _within_window(self, first: str, last: str, text: str) -> bool:
        first_positions = [m.start() for m in self._token(first).finditer(text)]
        if not first_positions:
            return False
        last_positions = [m.start() for m in self._token(last).finditer(text)]
        window = self.config.proximity_window

        return any(abs(f - l) <= window for f in first_positions for l in last_positions)

    def match_strategy(self, wrestler_name: str, text: str) -> Optional[str]:
        """
        Return the name of the first rule that matches, or None.

        Rules in precedence order: alias, single_name, full_name, first_last,
        distinctive_surname, proximity, context, standalone_first_name.
        """
        name = _normalize_name(wrestler_name)
        content = (text or "").lower()
        if not name or not content.strip():
            return None

        alias_pattern = self._alias(name)
        if alias_pattern and alias_pattern.search(content):
            return "alias"

        tokens = name.split(" ")

        if len(tokens) == 1:
            token = tokens[0]
            if len(token) >= self.config.min_single_name_length and self._token(token).search(content):
                return "single_name"
            return None

        first, last = tokens[0], tokens[-1]

        if self._token(name).search(content):
            return "full_name"

        if self._token(f"{first} {last}").search(content):
            return "first_last"

        if (
            last in self._distinctive_surnames
            and len(last) >= self.config.min_distinctive_surname_length
            and self._token(last).search(content)
        ):
            return "distinctive_surname"

        if self._within_window(first, last, content):
            return "proximity"

        if not self.has_wrestling_context(content):
            return None

        min_length = self.config.min_context_token_length
        if last not in self._common_surnames and len(last) >= min_length and self._token(last).search(content):
            return "context"
        if first not in self._common_first_names and len(first) >= min_length and self._token(first).search(content):
            return "context"

        if first in self._standalone_first_names and self._token(first).search(content):
            return "standalone_first_name"

        return None

    def is_mentioned(self, wrestler_name: str, text: str) -> bool:
        strategy = self.match_strategy(wrestler_name, text)
        if strategy:
            logger.debug(f"Matched '{wrestler_name}' via {strategy}: {(text or '')[:100]!r}")
        return strategy is not None


@lru_cache()
def get_default_matcher() -> WrestlerNameMatcher:
    return WrestlerNameMatcher(get_lexicon().matcher)


def is_wrestler_mentioned(wrestler_name: str, text: str, config: Optional[MatcherConfig] = None) -> bool:
    """Whether `wrestler_name` is mentioned in `text` (case-insensitive, whole-word)."""
    matcher = WrestlerNameMatcher(config) if config is not None else get_default_matcher()
    return matcher.is_mentioned(wrestler_name, text)
