"""Pytest configuration - adds the project root to path and provides survey fixtures."""
import sys
from pathlib import Path

import pandas as pd
import pytest

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from survey_analyzer.analyzer import SurveyAnalyzer  # noqa: E402
from survey_analyzer.loader import build_survey  # noqa: E402

QUESTIONS = [
    ("Age", "What is your age?", "SC"),
    ("Languages", "Which programming languages have you worked with?", "MC"),
    ("Comments", "Any other comments?", "TE"),
    ("YearsCode", "How many years have you been coding?", "NUM"),
    ("Salary", "What is your annual salary?", "SC"),
]

ROWS = [
    {"Age": "18-24 years old", "Languages": "Python;Rust", "Comments": "Love it", "YearsCode": "5", "Salary": "5,000"},
    {"Age": "18-24 years old", "Languages": "Python", "Comments": "", "YearsCode": "10", "Salary": "NA"},
    {"Age": "Under 18 years old", "Languages": "Rust;C++", "Comments": "NA", "YearsCode": "3", "Salary": "5,000"},
    {"Age": "45-54 years old", "Languages": "", "Comments": "Too long", "YearsCode": "", "Salary": "12,500"},
    {"Age": "35-44 years old", "Languages": "NA", "Comments": "", "YearsCode": "20", "Salary": ""},
    {"Age": "Under 18 years old", "Languages": "Python;JavaScript", "Comments": "Love it", "YearsCode": "1", "Salary": "7,000"},
]


def _quiet(msg):
    pass


@pytest.fixture
def table():
    return build_survey(QUESTIONS, ROWS, log=_quiet)


@pytest.fixture
def analyzer(table):
    return SurveyAnalyzer(table)


def write_workbook(path, data=None, schema=None, data_sheet="raw data", schema_sheet="schema"):
    """Write a survey workbook; pass data=False or schema=False to leave a sheet out."""
    if data is None:
        data = pd.DataFrame(ROWS)
    if schema is None:
        schema = pd.DataFrame(QUESTIONS, columns=["column", "question_text", "type"])
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        if data is not False:
            data.to_excel(writer, sheet_name=data_sheet, index=False)
        if schema is not False:
            schema.to_excel(writer, sheet_name=schema_sheet, index=False)
    return path


@pytest.fixture
def workbook(tmp_path):
    return write_workbook(tmp_path / "survey.xlsx")


@pytest.fixture
def make_workbook(tmp_path):
    def _make(name="custom.xlsx", **kwargs):
        return write_workbook(tmp_path / name, **kwargs)
    return _make
