"""Tests for the workbook loader."""
import pandas as pd
import pytest

from survey_analyzer.exceptions import (
    EmptyDataset,
    MissingRequiredSheet,
    SurveyFileNotFound,
    SurveyLoadError,
    UnsupportedFormat,
)
from survey_analyzer.loader import build_survey, load_survey
from survey_analyzer.schema import QuestionType


def quiet(msg):
    pass


class TestLoadWorkbook:
    def test_loads_schema_and_rows(self, workbook):
        table = load_survey(workbook, log=quiet)
        assert table.row_count == 6
        assert table.schema.columns == ["Age", "Languages", "Comments", "YearsCode", "Salary"]
        assert [q.id for q in table.questions] == [1, 2, 3, 4, 5]
        assert table.question("Languages").type is QuestionType.MULTIPLE_CHOICE
        assert table.question("YearsCode").type is QuestionType.NUMERIC

    def test_cells_read_as_text(self, workbook):
        table = load_survey(workbook, log=quiet)
        assert table.cell(1, "Salary") == "NA"
        assert table.cell(3, "Languages") == ""
        assert table.cell(0, "YearsCode") == "5"

    def test_progress_goes_to_log(self, workbook):
        lines = []
        load_survey(workbook, log=lines.append)
        assert any("Loaded 6 rows" in line for line in lines)

    def test_sheet_names_case_insensitive(self, make_workbook):
        path = make_workbook(data_sheet="Raw Data", schema_sheet=" SCHEMA")
        assert load_survey(path, log=quiet).row_count == 6

    def test_missing_file(self, tmp_path):
        with pytest.raises(SurveyFileNotFound) as exc:
            load_survey(tmp_path / "nope.xlsx", log=quiet)
        assert isinstance(exc.value, FileNotFoundError)
        assert isinstance(exc.value, SurveyLoadError)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "survey.csv"
        path.write_text("Age\n18-24 years old\n")
        with pytest.raises(UnsupportedFormat):
            load_survey(path, log=quiet)

    def test_legacy_xls_rejected(self, tmp_path):
        path = tmp_path / "survey.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0")
        with pytest.raises(UnsupportedFormat, match="expected one of .xlsx, .xlsm"):
            load_survey(path, log=quiet)

    def test_unreadable_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("this is not a workbook")
        with pytest.raises(UnsupportedFormat):
            load_survey(path, log=quiet)

    def test_missing_schema_sheet(self, make_workbook):
        with pytest.raises(MissingRequiredSheet):
            load_survey(make_workbook(schema=False), log=quiet)

    def test_missing_data_sheet(self, make_workbook):
        with pytest.raises(MissingRequiredSheet):
            load_survey(make_workbook(data=False), log=quiet)

    def test_no_rows(self, make_workbook):
        empty = pd.DataFrame(columns=["Age", "Languages"])
        with pytest.raises(EmptyDataset):
            load_survey(make_workbook(data=empty), log=quiet)

    def test_no_questions(self, make_workbook):
        schema = pd.DataFrame(columns=["column", "question_text", "type"])
        with pytest.raises(EmptyDataset):
            load_survey(make_workbook(schema=schema), log=quiet)

    def test_schema_needs_three_columns(self, make_workbook):
        schema = pd.DataFrame({"column": ["Age"], "question_text": ["What is your age?"]})
        with pytest.raises(UnsupportedFormat):
            load_survey(make_workbook(schema=schema), log=quiet)

    def test_columns_reconciled_with_schema(self, make_workbook):
        data = pd.DataFrame({"Age": ["18-24 years old"], "ResponseId": ["1"]})
        schema = pd.DataFrame(
            [("Age", "What is your age?", "SC"), ("Country", "Where do you live?", "SC")],
            columns=["column", "question_text", "type"],
        )
        table = load_survey(make_workbook(data=data, schema=schema), log=quiet)
        assert table.schema.columns == ["Age", "Country"]
        assert table.stats["dropped_columns"] == ["ResponseId"]
        assert table.stats["missing_columns"] == ["Country"]
        assert table.cell(0, "Country") == ""


class TestBuildSurvey:
    def test_unknown_type_codes_default_to_text(self):
        table = build_survey([("Q1", "Free?", "XX"), ("Q2", "Pick", " sc ")], [{"Q1": "a", "Q2": "b"}], log=quiet)
        assert table.question("Q1").type is QuestionType.TEXT
        assert table.question("Q2").type is QuestionType.SINGLE_CHOICE
        assert table.stats["unknown_type_codes"] == {"Q1": "XX"}

    def test_duplicate_columns_keep_first(self):
        table = build_survey(
            [("Q1", "First", "SC"), ("Q1", "Second", "MC"), ("Q2", "Other", "SC")],
            [{"Q1": "a", "Q2": "b"}],
            log=quiet,
        )
        assert table.question("Q1").text == "First"
        assert [q.id for q in table.questions] == [1, 2]
        assert table.stats["duplicate_columns"] == ["Q1"]

    def test_absent_and_none_cells_are_empty(self):
        table = build_survey([("Q1", "x", "SC"), ("Q2", "y", "SC")], [{"Q1": None}, {"Q2": 5}], log=quiet)
        assert table.cell(0, "Q1") == ""
        assert table.cell(0, "Q2") == ""
        assert table.cell(1, "Q2") == "5"

    def test_rows_with_every_cell_absent_are_respondents(self):
        table = build_survey([("Q1", "x", "SC")], [{}, {}], log=quiet)
        assert table.row_count == 2
        assert table.cell(1, "Q1") == ""
        assert table.stats["rows"] == 2

    def test_no_rows(self):
        with pytest.raises(EmptyDataset):
            build_survey([("Q1", "x", "SC")], [], log=quiet)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
