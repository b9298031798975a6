"""
SurveyAnalyzer: the query surface used by the CLI, the REPL, the dashboard
and the report generator.

Usage:
    from survey_analyzer import SurveyAnalyzer

    analyzer = SurveyAnalyzer.from_excel("so_2024_raw.xlsx")
    dist = analyzer.compute_distribution("Age")
    rust = analyzer.create_subset("LanguageHaveWorkedWith", "Rust")
    dist_rust = analyzer.compute_distribution("Age", within=rust)
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .distribution import Distribution, compute_distribution, require_categorical
from .exceptions import IncompatibleSubset, SurveyError
from .loader import LogFn, load_survey
from .responses import ResponseTable
from .schema import Question
from .search import question_options, search_options, search_questions
from .subset import Subset, create_subset


class SurveyAnalyzer:
    """Read-only queries over one loaded survey."""

    def __init__(self, table: ResponseTable, source: Optional[Path] = None):
        self._table = table
        self.source = Path(source) if source is not None else None
        self._distributions: Dict[str, Distribution] = {}

    @classmethod
    def from_excel(cls, path, log: Optional[LogFn] = None) -> "SurveyAnalyzer":
        return cls(load_survey(path, log=log), source=path)

    def reload(self, log: Optional[LogFn] = None) -> None:
        """Reload the whole workbook from its source path and drop memoized results."""
        if self.source is None:
            raise SurveyError("This survey was not loaded from a file and cannot be reloaded")
        table = load_survey(self.source, log=log)
        self._table = table
        self._distributions = {}

    @property
    def table(self) -> ResponseTable:
        return self._table

    @property
    def stats(self) -> dict:
        return dict(self._table.stats)

    def respondent_count(self) -> int:
        return self._table.row_count

    # ------------------------------------------------------------------
    # Structure and search
    # ------------------------------------------------------------------

    def list_questions(self) -> List[Question]:
        return self._table.questions

    def get_question(self, column: str) -> Question:
        return self._table.question(column)

    def columns(self) -> List[str]:
        return self._table.schema.columns

    def search_questions(self, term: str) -> List[Question]:
        return search_questions(self._table.schema, term)

    def search_options(self, term: str) -> List[Tuple[Question, str]]:
        return search_options(self._table, term)

    def question_options(self, column: str) -> List[str]:
        return question_options(self._table, column)

    # ------------------------------------------------------------------
    # Distributions and subsets
    # ------------------------------------------------------------------

    def compute_distribution(
        self,
        column: str,
        within: Optional[Subset] = None,
        categorical_only: bool = False,
    ) -> Distribution:
        """
        Distribution for column over every respondent, or only those in within.

        Whole-table results are memoized per column until reload().
        """
        if within is not None:
            self._check_subset(within)
            return compute_distribution(
                self._table, column, rows=within.member_row_indices, categorical_only=categorical_only
            )

        dist = self._distributions.get(column)
        if dist is None:
            dist = compute_distribution(self._table, column)
            self._distributions[column] = dist
        if categorical_only:
            require_categorical(dist.question)
        return dist

    def create_subset(self, column: str, answer: str, case_sensitive: bool = True) -> Subset:
        return create_subset(self._table, column, answer, case_sensitive=case_sensitive)

    def intersect(self, first: Subset, *others: Subset) -> Subset:
        result = first
        for other in others:
            result = result.intersect(other)
        return result

    def subset_rows(self, subset: Subset, limit: Optional[int] = None) -> List[Dict[str, str]]:
        """Raw rows of a subset's members in row order, for detailed views."""
        self._check_subset(subset)
        rows = subset.sorted_rows()
        if limit is not None:
            rows = rows[:limit]
        return [self._table.row(i) for i in rows]

    def _check_subset(self, subset: Subset) -> None:
        if subset.dataset_id != self._table.dataset_id:
            raise IncompatibleSubset("Subset was not created from this survey")
