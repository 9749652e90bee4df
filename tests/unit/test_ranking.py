from datetime import datetime, timedelta, timezone

import pytest

from ringside.schemas.wrestler import ContentItem, Wrestler, WrestlerAnalysis
from ringside.services.filtering.filters import (
    filter_items_by_period,
    filter_popular_wrestlers,
    filter_wrestlers_by_promotion,
)
from ringside.services.scoring.ranking import (
    get_top_push_wrestlers,
    get_worst_buried_wrestlers,
    sort_by_mentions,
)

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_analysis(wrestler_id, trend, mentions=1, momentum=0.0, burial=0.0, promotion="WWE"):
    return WrestlerAnalysis(
        wrestler_id=wrestler_id,
        wrestler_name=wrestler_id.title(),
        promotion=promotion,
        total_mentions=mentions,
        push_score=0.0,
        burial_score=burial,
        momentum_score=momentum,
        popularity_score=0,
        sentiment_score=50,
        avg_sentiment=0.5,
        trend=trend,
        is_on_fire=False,
        change_24h=0.0,
        change_24h_synthetic=True,
        confidence_level="low",
        evidence="Limited Coverage",
    )


class TestRanking:

    @pytest.fixture
    def analyses(self):
        return [
            make_analysis("a", "push", mentions=1, momentum=90.0),
            make_analysis("b", "push", mentions=3, momentum=10.0),
            make_analysis("c", "push", mentions=3, momentum=40.0),
            make_analysis("d", "burial", mentions=2, burial=20.0),
            make_analysis("e", "burial", mentions=2, burial=80.0),
            make_analysis("f", "stable", mentions=9),
        ]

    def test_top_push_order(self, analyses):
        ids = [a.wrestler_id for a in get_top_push_wrestlers(analyses)]

        assert ids == ["c", "b", "a"]

    def test_worst_buried_order(self, analyses):
        ids = [a.wrestler_id for a in get_worst_buried_wrestlers(analyses)]

        assert ids == ["e", "d"]

    def test_limit(self, analyses):
        assert len(get_top_push_wrestlers(analyses, limit=2)) == 2

    def test_sort_by_mentions(self, analyses):
        ids = [a.wrestler_id for a in sort_by_mentions(analyses)]

        assert ids[0] == "f"
        assert ids[1:3] == ["c", "b"]


class TestWrestlerFilters:

    @pytest.fixture
    def roster(self):
        return [
            Wrestler(id="1", name="Roman Reigns", promotion="WWE"),
            Wrestler(id="2", name="Jon Moxley", promotion="AEW"),
            Wrestler(id="3", name="Charles Robinson (Referee)", promotion="AEW"),
            Wrestler(id="4", name="Lead Announcer", promotion="WWE"),
            Wrestler(id="5", name="MJF", promotion="AEW"),
            Wrestler(id="6", name="Tama Tonga", promotion="NJPW Strong"),
        ]

    def test_promotion_all(self, roster):
        assert len(filter_wrestlers_by_promotion(roster, "all")) == len(roster)
        assert len(filter_wrestlers_by_promotion(roster, None)) == len(roster)

    def test_promotion_substring(self, roster):
        assert [w.id for w in filter_wrestlers_by_promotion(roster, "njpw")] == ["6"]
        assert [w.id for w in filter_wrestlers_by_promotion(roster, "AEW")] == ["2", "3", "5"]

    def test_promotion_on_analyses(self):
        analyses = [make_analysis("a", "push", promotion="WWE"), make_analysis("b", "push", promotion="AEW")]

        assert [a.wrestler_id for a in filter_wrestlers_by_promotion(analyses, "aew")] == ["b"]

    def test_popular_wrestlers(self, roster):
        ids = [w.id for w in filter_popular_wrestlers(roster)]

        assert ids == ["1", "2", "6"]

    def test_popular_keeps_short_aliased_names(self, roster):
        ids = [w.id for w in filter_popular_wrestlers(roster, aliased_names=["mjf", "roman reigns"])]

        assert ids == ["1", "2", "5", "6"]

    def test_brand_alias(self):
        wrestler = Wrestler.model_validate({"id": "x", "name": "Seth Rollins", "brand": "Raw"})

        assert wrestler.promotion == "Raw"


class TestItemPeriodFilter:

    @pytest.fixture
    def items(self):
        return [
            ContentItem(title="recent", published_at=NOW - timedelta(hours=12)),
            ContentItem(title="this week", published_at=NOW - timedelta(days=3)),
            ContentItem(title="old", published_at=NOW - timedelta(days=10)),
            ContentItem(title="undated"),
        ]

    def test_widens_to_seven_days(self, items):
        titles = [i.title for i in filter_items_by_period(items, 1, now=NOW)]

        assert titles == ["recent", "this week", "undated"]

    def test_enough_items_keeps_period(self, items):
        titles = [i.title for i in filter_items_by_period(items, 1, now=NOW, min_items=2)]

        assert titles == ["recent", "undated"]

    def test_long_period(self, items):
        assert len(filter_items_by_period(items, 30, now=NOW)) == 4
