from typing import List

from ringside.schemas.wrestler import WrestlerAnalysis


def get_top_push_wrestlers(analyses: List[WrestlerAnalysis], limit: int = 10) -> List[WrestlerAnalysis]:
    """Wrestlers trending up, most mentioned first, ties broken by momentum."""
    pushed = [a for a in analyses if a.trend == "push"]
    pushed.sort(key=lambda a: (a.total_mentions, a.momentum_score), reverse=True)
    return pushed[:limit]


def get_worst_buried_wrestlers(analyses: List[WrestlerAnalysis], limit: int = 10) -> List[WrestlerAnalysis]:
    """Wrestlers trending down, most mentioned first, ties broken by burial score."""
    buried = [a for a in analyses if a.trend == "burial"]
    buried.sort(key=lambda a: (a.total_mentions, a.burial_score), reverse=True)
    return buried[:limit]


def sort_by_mentions(analyses: List[WrestlerAnalysis]) -> List[WrestlerAnalysis]:
    """Order used for the full analysis list."""
    return sorted(analyses, key=lambda a: (a.total_mentions, a.momentum_score), reverse=True)
