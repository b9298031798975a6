"""Tests for the distribution engine."""
import pytest

from survey_analyzer.distribution import compute_distribution
from survey_analyzer.exceptions import InvalidQuestionType, QuestionNotFound
from survey_analyzer.loader import build_survey


class TestDistribution:
    def test_age_scenario(self, table):
        dist = compute_distribution(table, "Age")
        assert dist.total_valid_responses == 6
        assert dist.counts == {
            "18-24 years old": 2,
            "Under 18 years old": 2,
            "45-54 years old": 1,
            "35-44 years old": 1,
        }
        assert round(dist.percentage("18-24 years old"), 1) == 33.3
        assert round(dist.percentage("45-54 years old"), 1) == 16.7
        assert dist.most_popular() == "18-24 years old"

    def test_languages_scenario(self, table):
        dist = compute_distribution(table, "Languages")
        assert dist.total_valid_responses == 4
        assert dist.counts["Python"] == 3
        assert dist.counts["Rust"] == 2
        assert dist.percentage("Python") == pytest.approx(75.0)

    def test_ties_keep_first_appearance_order(self, table):
        ordered = compute_distribution(table, "Languages").ordered()
        assert [answer for answer, _, _ in ordered] == ["Python", "Rust", "C++", "JavaScript"]
        ordered = compute_distribution(table, "Age").ordered()
        assert [answer for answer, _, _ in ordered] == [
            "18-24 years old", "Under 18 years old", "45-54 years old", "35-44 years old"
        ]

    def test_percentages_sum_to_100_for_single_choice(self, table):
        for column in ("Age", "Salary", "YearsCode", "Comments"):
            dist = compute_distribution(table, column)
            assert dist.total_valid_responses > 0
            assert sum(dist.percentages().values()) == pytest.approx(100.0)

    def test_percentages_within_bounds(self, table):
        for column in table.schema.columns:
            for pct in compute_distribution(table, column).percentages().values():
                assert 0.0 <= pct <= 100.0

    def test_single_choice_commas_not_split(self, table):
        dist = compute_distribution(table, "Salary")
        assert dist.counts == {"5,000": 2, "12,500": 1, "7,000": 1}
        assert dist.total_valid_responses == 4

    def test_above_threshold(self, table):
        dist = compute_distribution(table, "Languages")
        assert [a for a, _, _ in dist.above_threshold(50.0)] == ["Python", "Rust"]
        assert dist.above_threshold(100.0) == []

    def test_top(self, table):
        top = compute_distribution(table, "Languages").top(2)
        assert top == [("Python", 3, 75.0), ("Rust", 2, 50.0)]

    def test_to_frame(self, table):
        frame = compute_distribution(table, "Languages").to_frame()
        assert list(frame.columns) == ["answer", "count", "percentage"]
        assert frame.iloc[0]["answer"] == "Python"
        assert len(frame) == 4

    def test_restricted_to_rows(self, table):
        dist = compute_distribution(table, "Age", rows={0, 2})
        assert dist.total_valid_responses == 2
        assert dist.counts == {"18-24 years old": 1, "Under 18 years old": 1}

    def test_unknown_column(self, table):
        with pytest.raises(QuestionNotFound):
            compute_distribution(table, "Nonexistent")

    def test_text_allowed_unless_categorical_only(self, table):
        dist = compute_distribution(table, "Comments")
        assert dist.counts == {"Love it": 2, "Too long": 1}
        with pytest.raises(InvalidQuestionType):
            compute_distribution(table, "Comments", categorical_only=True)
        with pytest.raises(InvalidQuestionType):
            compute_distribution(table, "YearsCode", categorical_only=True)
        assert compute_distribution(table, "Age", categorical_only=True).total_valid_responses == 6


class TestEmptyDistribution:
    def test_no_valid_responses(self):
        table = build_survey(
            [("Q1", "Anything?", "SC")],
            [{"Q1": "NA"}, {"Q1": ""}, {}],
            log=lambda msg: None,
        )
        dist = compute_distribution(table, "Q1")
        assert dist.total_valid_responses == 0
        assert dist.counts == {}
        assert dist.most_popular() is None
        assert dist.percentage("anything") == 0.0
        assert "No data" in dist.display()



class TestCommaAnswers:
    @pytest.fixture
    def devtype(self):
        return build_survey(
            [("DevType", "Which best describes your role?", "MC")],
            [
                {"DevType": "Developer, full-stack;Student"},
                {"DevType": "Developer, full-stack"},
                {"DevType": "Developer, back-end"},
            ],
            log=lambda msg: None,
        )

    def test_same_answer_counted_alone_and_combined(self, devtype):
        dist = compute_distribution(devtype, "DevType")
        assert dist.counts == {"Developer, full-stack": 2, "Student": 1, "Developer, back-end": 1}
        assert dist.total_valid_responses == 3

    def test_comma_column_split_when_no_semicolons(self):
        table = build_survey(
            [("Tools", "Tools used", "MC")],
            [{"Tools": "Git, Docker"}, {"Tools": "Git"}],
            log=lambda msg: None,
        )
        assert compute_distribution(table, "Tools").counts == {"Git": 2, "Docker": 1}

    def test_counts_read_only(self, table):
        dist = compute_distribution(table, "Age")
        with pytest.raises(TypeError):
            dist.counts["18-24 years old"] = 99
        assert dist.counts["18-24 years old"] == 2

class TestDisplay:
    def test_one_decimal_percentages(self, table):
        text = compute_distribution(table, "Age").display()
        assert "18-24 years old: 2 (33.3%)" in text
        assert "35-44 years old: 1 (16.7%)" in text

    def test_threshold_hides_small_answers(self, table):
        text = compute_distribution(table, "Age").display(threshold=20.0)
        assert "45-54 years old" not in text
        assert "Under 18 years old: 2 (33.3%)" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
