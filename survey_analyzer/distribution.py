"""Distribution engine: per-question answer frequencies and percentages."""
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .exceptions import InvalidQuestionType
from .responses import ResponseTable
from .schema import Question, QuestionType

# (answer, count, percentage)
AnswerStat = Tuple[str, int, float]


@dataclass(frozen=True)
class Distribution:
    """
    Answer counts for one question.

    counts keeps answers in first-appearance order across the rows that were
    scanned; every ordering below relies on that (ties never fall back to
    lexicographic order). counts is a read-only view, so a Distribution can
    be shared between callers.
    """
    question: Question
    total_valid_responses: int
    counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    def percentage(self, answer: str) -> float:
        if self.total_valid_responses == 0:
            return 0.0
        return self.counts.get(answer, 0) / self.total_valid_responses * 100

    def percentages(self) -> Dict[str, float]:
        return {answer: self.percentage(answer) for answer in self.counts}

    def ordered(self) -> List[AnswerStat]:
        """Answers by descending count, ties in first-appearance order."""
        ranked = Counter(self.counts).most_common()
        return [(answer, count, self.percentage(answer)) for answer, count in ranked]

    def answers(self) -> List[str]:
        return list(self.counts)

    def top(self, n: int) -> List[AnswerStat]:
        return self.ordered()[:max(0, n)]

    def most_popular(self) -> Optional[str]:
        if self.total_valid_responses == 0:
            return None
        return self.ordered()[0][0]

    def above_threshold(self, threshold: float) -> List[AnswerStat]:
        return [stat for stat in self.ordered() if stat[2] >= threshold]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.ordered(), columns=["answer", "count", "percentage"])

    def display(self, threshold: float = 0.0) -> str:
        lines = [
            f"=== Distribution for: {self.question.text} ===",
            f"Column: {self.question.column} (Type: {self.question.type.label})",
            f"Total valid responses: {self.total_valid_responses}",
        ]
        if self.question.type is QuestionType.MULTIPLE_CHOICE:
            lines.append("Note: percentages are based on respondents, not on options selected")
        lines.append("")
        if self.total_valid_responses == 0:
            lines.append("No data")
            return "\n".join(lines)
        for answer, count, pct in self.above_threshold(threshold):
            lines.append(f"{answer}: {count} ({pct:.1f}%)")
        return "\n".join(lines)


def require_categorical(question: Question) -> None:
    """Raise InvalidQuestionType unless question is single or multiple choice."""
    if not question.is_categorical:
        raise InvalidQuestionType(
            f"Column '{question.column}' is a {question.type.label.lower()} question; "
            "a categorical (single or multiple choice) question is required"
        )


def compute_distribution(
    table: ResponseTable,
    column: str,
    rows: Optional[Iterable[int]] = None,
    categorical_only: bool = False,
) -> Distribution:
    """
    Count normalized answers for a column.

    A row counts toward total_valid_responses once if it produced at least one
    answer, however many answers it produced. When rows is given only those
    row indices are scanned (in ascending order).

    Raises:
        QuestionNotFound: column is not in the schema.
        InvalidQuestionType: categorical_only is set and the question is free text or numeric.
    """
    question = table.question(column)
    if categorical_only:
        require_categorical(question)

    answer_sets = table.answer_sets(column)
    indices = range(len(answer_sets)) if rows is None else sorted(set(rows))

    counts: Dict[str, int] = {}
    total = 0
    for i in indices:
        answers = answer_sets[i]
        if not answers:
            continue
        total += 1
        for answer in answers:
            counts[answer] = counts.get(answer, 0) + 1

    return Distribution(question=question, total_valid_responses=total, counts=counts)
