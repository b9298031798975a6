"""
Survey loader: workbook (data sheet + schema sheet) → ResponseTable.

The workbook must hold two sheets:
    - "raw data": header row of column names, then one row per respondent
    - "schema":   header row, then (column, question text, type code) rows

Loading is all-or-nothing: any error is raised before a table exists.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .config import DATA_SHEET, SCHEMA_SHEET, SUPPORTED_SUFFIXES
from .exceptions import EmptyDataset, MissingRequiredSheet, SurveyFileNotFound, UnsupportedFormat
from .responses import ResponseTable
from .schema import QuestionType, Schema

LogFn = Callable[[str], None]


def _default_log(msg: str) -> None:
    print(msg, flush=True)


def _find_sheets(sheet_names: List[str]) -> Dict[str, str]:
    """Map required sheet names to the workbook's actual sheet names (case/whitespace-insensitive)."""
    lower = {str(name).strip().lower(): name for name in sheet_names}
    missing = [s for s in (DATA_SHEET, SCHEMA_SHEET) if s not in lower]
    if missing:
        raise MissingRequiredSheet(
            f"Workbook is missing required sheet(s): {missing}. Found: {list(sheet_names)}"
        )
    return {s: lower[s] for s in (DATA_SHEET, SCHEMA_SHEET)}


def _schema_triples(schema_df: pd.DataFrame) -> List[Tuple[str, str, str]]:
    if schema_df.shape[1] < 3:
        raise UnsupportedFormat(
            "Schema sheet must have at least three columns (column, question text, type); "
            f"found {schema_df.shape[1]}"
        )
    triples = []
    for values in schema_df.iloc[:, :3].itertuples(index=False, name=None):
        column, text, code = ("" if pd.isna(v) else str(v) for v in values)
        triples.append((column, text, code))
    return triples


def _assemble(
    triples: Iterable[Tuple[str, str, str]],
    frame: pd.DataFrame,
    source: str,
    log: LogFn,
) -> ResponseTable:
    stats: Dict[str, Any] = {
        "source": source,
        "duplicate_columns": [],
        "unknown_type_codes": {},
    }

    kept = []
    seen = set()
    for column, text, code in triples:
        column = column.strip()
        if not column:
            continue
        if column in seen:
            stats["duplicate_columns"].append(column)
            continue
        if not QuestionType.is_known_code(code):
            stats["unknown_type_codes"][column] = code
        seen.add(column)
        kept.append((column, text.strip(), code))

    if stats["duplicate_columns"]:
        log(f"  Warning: duplicate schema columns ignored: {stats['duplicate_columns']}")
    if stats["unknown_type_codes"]:
        log(f"  Warning: {len(stats['unknown_type_codes'])} unknown type code(s), treated as text entry")

    if not kept:
        raise EmptyDataset("Schema contains no questions")
    if len(frame) == 0:
        raise EmptyDataset("No respondent rows loaded")

    schema = Schema.from_triples(kept)
    log(f"  Schema: {len(schema)} questions")

    frame = frame.copy()
    frame.columns = [str(c).strip() for c in frame.columns]
    frame = frame.loc[:, ~frame.columns.duplicated()]
    stats["dropped_columns"] = [c for c in frame.columns if c not in schema]
    stats["missing_columns"] = [c for c in schema.columns if c not in frame.columns]
    if stats["dropped_columns"]:
        log(f"  Dropped {len(stats['dropped_columns'])} data column(s) not described by the schema")
    if stats["missing_columns"]:
        log(f"  {len(stats['missing_columns'])} schema column(s) have no data: {stats['missing_columns']}")

    stats["rows"] = len(frame)
    stats["questions"] = len(schema)
    stats["loaded_at"] = datetime.now(timezone.utc).isoformat()

    table = ResponseTable(schema, frame, stats=stats)
    log(f"  Loaded {table.row_count} rows, {len(schema)} questions")
    return table


def load_survey(path, log: Optional[LogFn] = None) -> ResponseTable:
    """
    Load a survey workbook.

    Raises:
        SurveyFileNotFound: path does not exist.
        UnsupportedFormat: not an Excel workbook, or unreadable.
        MissingRequiredSheet: the data or schema sheet is absent.
        EmptyDataset: no respondent rows or no questions.
    """
    _log = log if log else _default_log
    p = Path(path)
    if not p.exists():
        raise SurveyFileNotFound(f"Survey file not found: {p}")
    if p.is_dir() or p.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormat(
            f"Unsupported survey file: {p.name} (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
        )

    _log(f"Loading survey data from: {p}")
    try:
        xls = pd.ExcelFile(p)
    except Exception as exc:
        raise UnsupportedFormat(f"Could not read workbook {p.name}: {exc}") from exc

    with xls:
        sheets = _find_sheets(xls.sheet_names)
        # Read every cell as text; "NA" must reach the normalizer untouched
        schema_df = xls.parse(sheets[SCHEMA_SHEET], dtype=str, keep_default_na=False)
        data_df = xls.parse(sheets[DATA_SHEET], dtype=str, keep_default_na=False)

    return _assemble(_schema_triples(schema_df), data_df, source=str(p), log=_log)


def build_survey(
    questions: Iterable[Tuple[str, str, str]],
    rows: Iterable[Mapping[str, Any]],
    log: Optional[LogFn] = None,
    source: str = "memory",
) -> ResponseTable:
    """
    Build a table from already-materialized data.

    questions are (column, question_text, type_code) triples; rows map column
    name to a raw cell value (missing keys and None are empty cells).
    """
    _log = log if log else _default_log
    records = [
        {str(k): (None if v is None else str(v)) for k, v in row.items()}
        for row in rows
    ]
    # Explicit index: rows whose cells are all absent still count as respondents
    frame = pd.DataFrame(records, index=range(len(records)))
    triples = [(str(c), str(t), str(code)) for c, t, code in questions]
    return _assemble(triples, frame, source=source, log=_log)
