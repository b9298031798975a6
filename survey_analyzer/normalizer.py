"""Value normalizer: turn a raw cell into the answers it stands for."""
from typing import Iterable, List, Optional, Tuple

from .config import MISSING_MARKERS, MULTI_CHOICE_DELIMITER, MULTI_CHOICE_FALLBACK_DELIMITER
from .schema import QuestionType


def is_missing(value: Optional[str]) -> bool:
    """True for None, empty/whitespace-only cells and missing markers such as "NA"."""
    if value is None:
        return True
    text = str(value).strip()
    return not text or text.lower() in MISSING_MARKERS


def column_delimiter(values: Iterable[Optional[str]]) -> str:
    """
    Pick the multiple-choice delimiter for a whole column.

    Semicolon if any cell in the column holds one, comma otherwise. Deciding
    per column keeps an answer such as "Developer, full-stack" whole whether
    it was selected alone or alongside other answers.
    """
    for value in values:
        if value is not None and MULTI_CHOICE_DELIMITER in str(value):
            return MULTI_CHOICE_DELIMITER
    return MULTI_CHOICE_FALLBACK_DELIMITER


def split_multi_choice(value: str, delimiter: str = MULTI_CHOICE_DELIMITER) -> List[str]:
    """Split a multiple-choice cell into trimmed tokens; empty tokens are dropped."""
    return [part.strip() for part in str(value).split(delimiter) if part.strip()]


def normalize_answers(
    value: Optional[str],
    question_type: QuestionType,
    delimiter: str = MULTI_CHOICE_DELIMITER,
) -> Tuple[str, ...]:
    """
    Return the normalized answers for one cell.

    Single choice, numeric and text cells give at most one answer (the trimmed
    cell). Multiple choice cells give every distinct token in first-appearance
    order, split on delimiter (see column_delimiter). Missing cells give an
    empty tuple.
    """
    if is_missing(value):
        return ()

    if question_type is not QuestionType.MULTIPLE_CHOICE:
        return (str(value).strip(),)

    seen = []
    for token in split_multi_choice(value, delimiter):
        if is_missing(token) or token in seen:
            continue
        seen.append(token)
    return tuple(seen)
