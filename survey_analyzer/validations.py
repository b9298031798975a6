"""
Validations for a loaded survey.

Each validation returns a dict: {"name", "passed", "message", "details"}.
Run via `survey-analyzer validate` for a clear report.
"""
from typing import Any, Dict, List

from .responses import ResponseTable


def validation_schema_columns_present(table: ResponseTable) -> Dict[str, Any]:
    """Check that every schema column had a column in the data sheet."""
    missing = table.stats.get("missing_columns", [])
    passed = len(missing) == 0
    return {
        "name": "schema_columns_present",
        "passed": passed,
        "message": "All schema columns present in data" if passed else f"{len(missing)} schema column(s) missing from data",
        "details": {"missing": missing},
    }


def validation_no_dropped_columns(table: ResponseTable) -> Dict[str, Any]:
    """Check that the data sheet has no columns the schema does not describe."""
    dropped = table.stats.get("dropped_columns", [])
    passed = len(dropped) == 0
    return {
        "name": "no_dropped_columns",
        "passed": passed,
        "message": "Every data column is described by the schema" if passed else f"{len(dropped)} data column(s) dropped",
        "details": {"dropped": dropped[:20]},
    }


def validation_known_type_codes(table: ResponseTable) -> Dict[str, Any]:
    """Check that every schema type code is recognized."""
    unknown = table.stats.get("unknown_type_codes", {})
    passed = len(unknown) == 0
    return {
        "name": "known_type_codes",
        "passed": passed,
        "message": "All type codes recognized" if passed else f"{len(unknown)} unknown type code(s) treated as text",
        "details": {"unknown": unknown},
    }


def validation_min_rows(table: ResponseTable, min_rows: int = 1) -> Dict[str, Any]:
    """Check that the survey has at least min_rows respondents."""
    count = table.row_count
    passed = count >= min_rows
    return {
        "name": "min_rows",
        "passed": passed,
        "message": f"Row count {count} >= {min_rows}" if passed else f"Row count {count} < {min_rows}",
        "details": {"rows": count, "min_required": min_rows},
    }


def validation_questions_answered(table: ResponseTable) -> Dict[str, Any]:
    """Check that every question has at least one valid response."""
    unanswered = []
    for question in table.schema:
        if not any(table.answer_sets(question.column)):
            unanswered.append(question.column)
    passed = len(unanswered) == 0
    total = len(table.schema)
    return {
        "name": "questions_answered",
        "passed": passed,
        "message": "Every question has responses" if passed else f"{len(unanswered)}/{total} question(s) have no valid responses",
        "details": {"unanswered": unanswered},
    }


def run_all_validations(table: ResponseTable, min_rows: int = 1) -> List[Dict[str, Any]]:
    """Run all validation checks. Returns list of result dicts."""
    return [
        validation_schema_columns_present(table),
        validation_no_dropped_columns(table),
        validation_known_type_codes(table),
        validation_min_rows(table, min_rows=min_rows),
        validation_questions_answered(table),
    ]
