"""Linear keyword search over questions and answer options."""
from typing import List, Tuple

from .responses import ResponseTable
from .schema import Question, Schema


def search_questions(schema: Schema, term: str) -> List[Question]:
    """
    Questions whose text or column contains term (case-insensitive), in schema order.

    An empty or whitespace-only term matches every question.
    """
    needle = (term or "").strip().casefold()
    if not needle:
        return schema.questions
    return [
        q for q in schema
        if needle in q.column.casefold() or needle in q.text.casefold()
    ]


def question_options(table: ResponseTable, column: str) -> List[str]:
    """Distinct normalized answers for a column in first-appearance order."""
    seen = {}
    for answers in table.answer_sets(column):
        for answer in answers:
            seen.setdefault(answer, None)
    return list(seen)


def search_options(table: ResponseTable, term: str) -> List[Tuple[Question, str]]:
    """(question, answer) pairs of categorical questions whose answer contains term."""
    needle = (term or "").strip().casefold()
    results = []
    for question in table.schema:
        if not question.is_categorical:
            continue
        for answer in question_options(table, question.column):
            if needle in answer.casefold():
                results.append((question, answer))
    return results
