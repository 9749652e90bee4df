import itertools
from datetime import datetime, timedelta, timezone

import pytest

from ringside.models.metrics import WrestlerMetricsSnapshot
from ringside.schemas.wrestler import ContentItem, Mention, Wrestler
from ringside.services.scoring.momentum import (
    SCORING_PROFILES,
    calculate_change_24h,
    calculate_confidence_level,
    calculate_mention_scores,
    calculate_wrestler_metrics,
    coverage_evidence,
    determine_trend,
    get_scoring_profile,
    round_half_up,
)

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_mention(text, sentiment, tier=3, source_type="news", published_at=None):
    item = ContentItem(
        title=text,
        source="Test Source",
        source_type=source_type,
        link="https://example.com/story",
        published_at=published_at or NOW - timedelta(hours=1),
    )
    return Mention(
        wrestler_id="wwe-test",
        wrestler_name="Test Wrestler",
        item=item,
        sentiment_score=sentiment,
        credibility_tier=tier,
    )


@pytest.fixture
def wrestler():
    return Wrestler(id="wwe-test", name="Test Wrestler", promotion="WWE")


class TestMentionScores:

    def test_push_uses_highest_multiplier(self):
        push, burial = calculate_mention_scores("roman reigns wins championship in main event", 1.0)

        assert push == pytest.approx(1.5)
        assert burial == 0.0

    def test_burial_uses_highest_multiplier(self):
        push, burial = calculate_mention_scores("star fired after buried angle", 0.0)

        assert push == 0.0
        assert burial == pytest.approx(2.0)

    def test_no_multiplier(self):
        push, _ = calculate_mention_scores("great show", 0.8)

        assert push == pytest.approx(0.6)

    def test_neutral_band(self):
        assert calculate_mention_scores("champion released", 0.5) == (0.0, 0.0)
        assert calculate_mention_scores("champion", 0.6) == (0.0, 0.0)
        assert calculate_mention_scores("released", 0.4) == (0.0, 0.0)

    def test_case_insensitive_triggers(self):
        push, _ = calculate_mention_scores("MAIN EVENT tonight", 1.0)

        assert push == pytest.approx(1.3)


class TestTrend:

    @pytest.mark.parametrize("push,burial,avg,expected", [
        (50.0, 0.0, 0.7, "push"),
        (0.0, 50.0, 0.2, "burial"),
        (0.0, 0.0, 0.5, "stable"),
        (1.0, 0.0, 0.56, "push"),
        (1.0, 0.0, 0.5, "stable"),
        (0.0, 1.0, 0.44, "burial"),
        (30.0, 30.0, 0.9, "stable"),
    ])
    def test_standard_trend(self, push, burial, avg, expected):
        assert determine_trend(push, burial, avg) == expected

    def test_conservative_requires_margin(self):
        profile = SCORING_PROFILES["conservative"]

        assert determine_trend(15.0, 10.0, 0.9, profile) == "stable"
        assert determine_trend(25.0, 10.0, 0.9, profile) == "push"
        assert determine_trend(10.0, 25.0, 0.1, profile) == "burial"

    def test_trend_is_total(self):
        values = [0.0, 1.0, 2.5, 15.0, 50.0, 100.0]
        sentiments = [0.0, 0.4, 0.45, 0.5, 0.55, 0.6, 1.0]
        for profile in SCORING_PROFILES.values():
            for push, burial, avg in itertools.product(values, values, sentiments):
                assert determine_trend(push, burial, avg, profile) in {"push", "burial", "stable"}


class TestConfidenceLevel:

    def test_high(self):
        assert calculate_confidence_level(5, 1, 1, 3, 24) == "high"

    def test_medium(self):
        assert calculate_confidence_level(5, 0, 1, 4, 100) == "medium"
        assert calculate_confidence_level(3, 1, 0, 2, 10) == "medium"

    def test_low(self):
        assert calculate_confidence_level(2, 2, 0, 0, 1) == "low"
        assert calculate_confidence_level(10, 0, 0, 10, 1) == "low"
        assert calculate_confidence_level(10, 5, 5, 0, 200) == "low"


class TestEvidence:

    def test_labels(self):
        assert coverage_evidence(6) == "High Media Coverage"
        assert coverage_evidence(5) == "Moderate Coverage"
        assert coverage_evidence(3) == "Moderate Coverage"
        assert coverage_evidence(2) == "Limited Coverage"


class TestWrestlerMetrics:

    def test_no_mentions(self, wrestler):
        assert calculate_wrestler_metrics(wrestler, []) is None

    def test_push_metrics(self, wrestler):
        mentions = [make_mention("great show", 0.8), make_mention("great show again", 0.8)]

        analysis = calculate_wrestler_metrics(wrestler, mentions, now=NOW)

        assert analysis.total_mentions == 2
        assert analysis.push_score == pytest.approx(60.0)
        assert analysis.burial_score == 0.0
        assert analysis.avg_sentiment == pytest.approx(0.8)
        assert analysis.sentiment_score == 80
        assert analysis.trend == "push"
        assert analysis.momentum_score == pytest.approx(63.2)
        assert analysis.popularity_score == 60
        assert analysis.is_on_fire is True
        assert analysis.evidence == "Limited Coverage"
        assert analysis.promotion == "WWE"

    def test_scores_clamped(self, wrestler):
        mentions = [make_mention("champion", 1.0) for _ in range(3)]

        analysis = calculate_wrestler_metrics(wrestler, mentions, now=NOW)

        assert analysis.push_score == 100.0
        assert analysis.burial_score == 0.0

    def test_synthetic_change_for_push(self, wrestler):
        mentions = [make_mention("great show", 0.8), make_mention("great show again", 0.8)]

        analysis = calculate_wrestler_metrics(wrestler, mentions, now=NOW)

        assert analysis.change_24h == 30.0
        assert analysis.change_24h_synthetic is True

    def test_synthetic_change_for_burial(self, wrestler):
        analysis = calculate_wrestler_metrics(wrestler, [make_mention("released", 0.0)], now=NOW)

        assert analysis.trend == "burial"
        assert analysis.burial_score == 100.0
        assert analysis.change_24h == -50.0
        assert analysis.change_24h_synthetic is True

    def test_synthetic_change_for_stable(self, wrestler):
        analysis = calculate_wrestler_metrics(wrestler, [make_mention("show recap", 0.5)], now=NOW)

        assert analysis.trend == "stable"
        assert analysis.change_24h == 0.0
        assert analysis.change_24h_synthetic is True

    def test_change_from_previous_snapshot(self, wrestler):
        mentions = [make_mention("great show", 0.8), make_mention("great show again", 0.8)]
        previous = WrestlerMetricsSnapshot(
            wrestler_id="wwe-test",
            wrestler_name="Test Wrestler",
            momentum_score=50.0,
        )

        analysis = calculate_wrestler_metrics(wrestler, mentions, previous=previous, now=NOW)

        assert analysis.change_24h == pytest.approx(13.2)
        assert analysis.change_24h_synthetic is False

    def test_synthetic_change_rounds_halves_up(self):
        assert calculate_change_24h("push", 5.0, 0.0, 0.0) == (3.0, True)
        assert calculate_change_24h("burial", 0.0, 5.0, 0.0) == (-3.0, True)
        assert calculate_change_24h("push", 3.0, 0.0, 0.0) == (2.0, True)

    def test_change_is_deterministic(self, wrestler):
        mentions = [make_mention("show recap", 0.5)]

        first = calculate_wrestler_metrics(wrestler, mentions, now=NOW)
        second = calculate_wrestler_metrics(wrestler, mentions, now=NOW)

        assert first.change_24h == second.change_24h

    def test_confidence_from_sources(self, wrestler):
        mentions = [make_mention("show recap", 0.5, tier=1) for _ in range(5)]

        assert calculate_wrestler_metrics(wrestler, mentions, now=NOW).confidence_level == "high"

        stale = [
            make_mention("show recap", 0.5, tier=1, published_at=NOW - timedelta(days=10))
            for _ in range(5)
        ]
        assert calculate_wrestler_metrics(wrestler, stale, now=NOW).confidence_level == "low"

    def test_related_news_limit(self, wrestler):
        mentions = [make_mention(f"story {i}", 0.5) for i in range(12)]

        standard = calculate_wrestler_metrics(wrestler, mentions, now=NOW)
        conservative = calculate_wrestler_metrics(
            wrestler, mentions, profile=SCORING_PROFILES["conservative"], now=NOW
        )

        assert len(standard.related_news) == 10
        assert len(conservative.related_news) == 5
        assert standard.related_news[0].title == "story 0"

    def test_source_breakdown(self, wrestler):
        mentions = [
            make_mention("a", 0.5),
            make_mention("b", 0.5),
            make_mention("c", 0.5, source_type="reddit"),
        ]

        breakdown = calculate_wrestler_metrics(wrestler, mentions, now=NOW).source_breakdown

        assert breakdown.news_count == 2
        assert breakdown.reddit_count == 1
        assert breakdown.total_sources == 3

    def test_conservative_on_fire(self, wrestler):
        mentions = [make_mention("great show", 0.8) for _ in range(3)]
        profile = SCORING_PROFILES["conservative"]

        assert calculate_wrestler_metrics(wrestler, mentions, profile=profile, now=NOW).is_on_fire is False

    def test_champion_fields(self):
        champion = Wrestler(
            id="wwe-champ", name="Champ", promotion="WWE",
            is_champion=True, championship_title="WWE Championship",
        )

        analysis = calculate_wrestler_metrics(champion, [make_mention("recap", 0.5)], now=NOW)

        assert analysis.is_champion is True
        assert analysis.championship_title == "WWE Championship"


class TestScoringProfiles:

    def test_lookup(self):
        assert get_scoring_profile("Conservative").name == "conservative"
        assert get_scoring_profile(None).name == "standard"

    def test_unknown_profile_falls_back(self):
        assert get_scoring_profile("aggressive").name == "standard"


class TestRoundHalfUp:

    def test_halves_go_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2

    def test_other_values_round_to_nearest(self):
        assert round_half_up(2.4) == 2
        assert round_half_up(-2.6) == -3
        assert round_half_up(0.0) == 0
