"""Subset engine: respondents selected by column/answer predicates."""
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from .exceptions import IncompatibleSubset
from .responses import ResponseTable

# (column, expected_answer)
Predicate = Tuple[str, str]


@dataclass(frozen=True)
class Subset:
    """
    Row indices of the respondents matching a predicate.

    predicate holds one (column, answer) pair per condition; an intersection
    carries the conjunction of both sides. It is kept for display only.
    """
    predicate: Tuple[Predicate, ...]
    member_row_indices: FrozenSet[int]
    dataset_id: int
    total_rows: int

    def size(self) -> int:
        return len(self.member_row_indices)

    def __len__(self) -> int:
        return len(self.member_row_indices)

    def contains(self, row: int) -> bool:
        return row in self.member_row_indices

    def sorted_rows(self) -> List[int]:
        return sorted(self.member_row_indices)

    def percentage_of(self, total: Optional[int] = None) -> float:
        """Share of total (default: every row of the source table) as a percentage."""
        total = self.total_rows if total is None else total
        if not total:
            return 0.0
        return self.size() / total * 100

    def intersect(self, other: "Subset") -> "Subset":
        if self.dataset_id != other.dataset_id:
            raise IncompatibleSubset(
                "Cannot intersect subsets drawn from different datasets "
                f"(dataset {self.dataset_id} vs {other.dataset_id})"
            )
        return Subset(
            predicate=self.predicate + other.predicate,
            member_row_indices=self.member_row_indices & other.member_row_indices,
            dataset_id=self.dataset_id,
            total_rows=self.total_rows,
        )

    def describe(self) -> str:
        return " AND ".join(f"{column} = '{answer}'" for column, answer in self.predicate)

    def display(self) -> str:
        return (
            f"Subset: {self.describe()}\n"
            f"Respondents: {self.size()} of {self.total_rows} ({self.percentage_of():.1f}%)"
        )


def create_subset(
    table: ResponseTable,
    column: str,
    expected_answer: str,
    case_sensitive: bool = True,
) -> Subset:
    """
    Select the rows whose normalized answers for column include expected_answer.

    Matching is exact on the trimmed answer; "Rust" and "RUST" are different
    answers unless case_sensitive is False.

    Raises:
        QuestionNotFound: column is not in the schema.
    """
    wanted = str(expected_answer).strip()
    if not case_sensitive:
        wanted = wanted.casefold()

    members = set()
    for i, answers in enumerate(table.answer_sets(column)):
        if not case_sensitive:
            answers = tuple(a.casefold() for a in answers)
        if wanted in answers:
            members.add(i)

    return Subset(
        predicate=((column, str(expected_answer).strip()),),
        member_row_indices=frozenset(members),
        dataset_id=table.dataset_id,
        total_rows=table.row_count,
    )
