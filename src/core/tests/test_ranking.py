import pytest

from contracts.models import Candidate, DecisionKind, EntityKind, ResultKind, SearchResult
from core.ranking import (
    ResolutionThresholds,
    composite_score,
    decide,
    domain_confidence,
    extract_year,
    is_confident,
    primary_confidence,
    rank_results,
    score_movie,
    score_person,
)

pytestmark = pytest.mark.unit


def candidate(id, score, kind=EntityKind.MOVIE, name=None):
    return Candidate(id=id, name=name or f"c{id}", kind=kind, score=score)


def result(title, url, confidence=0.7):
    return SearchResult(title=title, url=url, kind=ResultKind.MOVIE, confidence=confidence)


class TestScoring:
    def test_movie_score(self):
        assert score_movie("Interstellar", 200, "2014-11-05", "Interstellar") == pytest.approx(1.2)

    def test_year_boost_requires_prefix(self):
        with_year = score_movie("Dune", 0, "2021-09-15", "Dune 2021")
        other_year = score_movie("Dune", 0, "1984-12-14", "Dune 2021")
        assert with_year - other_year == pytest.approx(0.2)
        assert score_movie("Dune", 0, None, "Dune 2021") == pytest.approx(other_year)

    def test_popularity_is_not_clamped(self):
        assert score_person("Christopher Nolan", 300, "Christopher Nolan") == pytest.approx(1.6)

    def test_missing_popularity(self):
        assert score_person("Nolan", None, "Nolan") == pytest.approx(0.7)

    def test_extract_year(self):
        assert extract_year("Dune 2021") == "2021"
        assert extract_year("Blade Runner") is None
        assert extract_year("") is None


class TestDecision:
    @pytest.mark.parametrize(
        "top, second, confident",
        [
            (0.8, 0.79, True),
            (0.7, 0.5, True),
            (0.7, 0.56, False),
            (0.6, None, True),
            (0.59, None, False),
        ],
    )
    def test_is_confident(self, top, second, confident):
        assert is_confident(top, second) is confident

    def test_custom_thresholds(self):
        strict = ResolutionThresholds(confident_score=0.95, min_gap=0.3, single_candidate_score=0.9)
        assert is_confident(0.85, None, strict) is False

    def test_empty_is_none(self):
        decision = decide([])
        assert decision.kind == DecisionKind.NONE
        assert decision.chosen is None

    def test_confident_person(self):
        decision = decide(
            [candidate(1, 0.3), candidate(525, 1.15, EntityKind.PERSON, "Christopher Nolan")]
        )
        assert decision.kind == DecisionKind.PERSON
        assert decision.chosen.id == 525
        assert [c.id for c in decision.candidates] == [525, 1]

    def test_ambiguous_has_no_chosen(self):
        decision = decide([candidate(1, 0.615), candidate(2, 0.548)])
        assert decision.kind == DecisionKind.AMBIGUOUS
        assert decision.chosen is None

    def test_cap_and_rounding(self):
        decision = decide([candidate(i, 0.1 + i / 1000 + 0.00004) for i in range(12)], limit=10)
        assert len(decision.candidates) == 10
        assert decision.candidates[0].score == 0.111
        assert decision.candidates[0].id == 11


class TestConfidence:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.imdb.com/title/tt0816692/", 0.95),
            ("https://en.wikipedia.org/wiki/Interstellar_(film)", 0.9),
            ("https://www.rottentomatoes.com/m/interstellar_2014", 0.85),
            ("https://letterboxd.com/film/interstellar/", 0.85),
            ("https://example.com/interstellar", 0.7),
        ],
    )
    def test_domain_confidence(self, url, expected):
        assert domain_confidence(url) == expected

    def test_later_rule_overrides(self):
        assert domain_confidence("https://en.wikipedia.org/wiki/IMDb.com") == 0.9

    @pytest.mark.parametrize("popularity, expected", [(250, 1.0), (42.5, 0.425), (0, 0.7), (None, 0.7)])
    def test_primary_confidence(self, popularity, expected):
        assert primary_confidence(popularity) == expected


class TestRanking:
    def test_composite(self):
        assert composite_score(result("Interstellar", "https://www.themoviedb.org/movie/1", 0.9), "interstellar") == (
            pytest.approx(30.9)
        )
        assert composite_score(result("Other", "https://imdb.com/x", 0.95), "interstellar") == 0.95

    def test_rank_and_truncate(self):
        results = [result(f"Web {i}", f"https://example.com/{i}") for i in range(7)]
        results.append(result("RRR", "https://en.wikipedia.org/wiki/RRR", 0.9))
        ranked = rank_results(results, "RRR", limit=6)
        assert len(ranked) == 6
        assert ranked[0].title == "RRR"
        assert [r.title for r in ranked[1:]] == ["Web 0", "Web 1", "Web 2", "Web 3", "Web 4"]


class TestPopularityMonotonicity:
    POPULARITIES = [0.0, 5.0, 42.5, 100.0, 250.0, 1000.0]

    def test_movie_score_grows_with_popularity(self):
        scores = [score_movie("Dune", p, "2021-09-15", "Dune 2021") for p in self.POPULARITIES]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)

    def test_person_score_grows_with_popularity(self):
        scores = [score_person("Prabhas", p, "Prabhas") for p in self.POPULARITIES]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)

    def test_more_popular_namesake_ranks_first(self):
        decision = decide(
            [
                candidate(1, score_movie("Dune", 30.0, "1984-12-14", "Dune")),
                candidate(2, score_movie("Dune", 90.0, "2021-09-15", "Dune")),
            ]
        )
        assert [c.id for c in decision.candidates] == [2, 1]
