"""Response table: immutable respondent rows plus the schema describing them."""
import itertools
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .normalizer import column_delimiter, normalize_answers
from .schema import Question, Schema

# Each table gets its own row-index space; subsets remember which one they came from.
_DATASET_IDS = itertools.count(1)


class ResponseTable:
    """
    Respondent answers keyed by column name.

    Rows are stored in a string-typed DataFrame whose columns are exactly the
    schema columns (in schema order) and whose index is the 0-based row number.
    Absent cells are empty strings. The frame is never handed out directly;
    callers get copies or plain Python values.
    """

    def __init__(self, schema: Schema, frame: pd.DataFrame, stats: Optional[Dict[str, Any]] = None):
        out = frame.reindex(columns=schema.columns, fill_value="")
        out = out.fillna("").astype(str).reset_index(drop=True)
        self.schema = schema
        self._frame = out
        self.dataset_id = next(_DATASET_IDS)
        self.stats: Dict[str, Any] = dict(stats or {})
        self._answer_sets: Dict[str, List[Tuple[str, ...]]] = {}

    @classmethod
    def from_rows(cls, schema: Schema, rows: Iterable[Mapping[str, Any]], stats: Optional[Dict[str, Any]] = None) -> "ResponseTable":
        """Build a table from row mappings; keys outside the schema are ignored."""
        records = [
            {col: ("" if row.get(col) is None else str(row.get(col))) for col in schema.columns}
            for row in rows
        ]
        frame = pd.DataFrame.from_records(records, columns=schema.columns)
        return cls(schema, frame, stats=stats)

    def __len__(self) -> int:
        return len(self._frame)

    @property
    def row_count(self) -> int:
        return len(self._frame)

    @property
    def questions(self) -> List[Question]:
        return self.schema.questions

    def question(self, column: str) -> Question:
        return self.schema.get(column)

    def column_values(self, column: str) -> List[str]:
        """Raw cell strings for one column, in row order."""
        self.schema.get(column)
        return self._frame[column].tolist()

    def answer_sets(self, column: str) -> List[Tuple[str, ...]]:
        """Normalized answers for each row of column, computed once per column."""
        if column not in self._answer_sets:
            question = self.schema.get(column)
            values = self._frame[column].tolist()
            delimiter = column_delimiter(values)
            self._answer_sets[column] = [normalize_answers(v, question.type, delimiter) for v in values]
        return list(self._answer_sets[column])

    def cell(self, row: int, column: str) -> str:
        self.schema.get(column)
        return self._frame.at[row, column]

    def row(self, index: int) -> Dict[str, str]:
        return self._frame.iloc[index].to_dict()

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()
