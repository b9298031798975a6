"""Schema table: the ordered question metadata describing the dataset's columns."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import QuestionNotFound


class QuestionType(Enum):
    SINGLE_CHOICE = "SC"
    MULTIPLE_CHOICE = "MC"
    TEXT = "TE"
    NUMERIC = "NUM"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "QuestionType":
        """
        Map a schema type code to a QuestionType.

        Codes are matched case-insensitively after trimming. Unknown or empty
        codes fall back to TEXT; use is_known_code() to detect them.
        """
        key = str(code or "").strip().upper()
        return _CODE_MAP.get(key, cls.TEXT)

    @staticmethod
    def is_known_code(code: Optional[str]) -> bool:
        return str(code or "").strip().upper() in _CODE_MAP

    @property
    def is_categorical(self) -> bool:
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)

    @property
    def label(self) -> str:
        return _LABELS[self]


_CODE_MAP = {
    "SC": QuestionType.SINGLE_CHOICE,
    "MC": QuestionType.MULTIPLE_CHOICE,
    "TE": QuestionType.TEXT,
    "NUM": QuestionType.NUMERIC,
    "NU": QuestionType.NUMERIC,
    "N": QuestionType.NUMERIC,
    "NUMERIC": QuestionType.NUMERIC,
}

_LABELS = {
    QuestionType.SINGLE_CHOICE: "Single choice",
    QuestionType.MULTIPLE_CHOICE: "Multiple choice",
    QuestionType.TEXT: "Text entry",
    QuestionType.NUMERIC: "Numeric",
}


@dataclass(frozen=True)
class Question:
    id: int
    column: str
    text: str
    type: QuestionType

    @property
    def is_categorical(self) -> bool:
        return self.type.is_categorical


class Schema:
    """Ordered, read-only collection of questions keyed by column name."""

    def __init__(self, questions: Iterable[Question]):
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._by_column: Dict[str, Question] = {}
        for q in self._questions:
            if q.column in self._by_column:
                raise ValueError(f"Duplicate schema column: {q.column}")
            self._by_column[q.column] = q

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[str, str, str]]) -> "Schema":
        """Build a schema from (column, question_text, type_code) triples, assigning ids in order."""
        return cls(
            Question(id=i, column=column, text=text, type=QuestionType.from_code(code))
            for i, (column, text, code) in enumerate(triples, start=1)
        )

    def get(self, column: str) -> Question:
        try:
            return self._by_column[column]
        except KeyError:
            raise QuestionNotFound(column) from None

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def columns(self) -> List[str]:
        return [q.column for q in self._questions]

    def __contains__(self, column) -> bool:
        return column in self._by_column

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)
