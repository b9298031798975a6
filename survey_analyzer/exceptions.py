"""Errors raised by the survey query engine and the workbook loader."""


class SurveyError(Exception):
    """Base class for every error this package raises."""


class QuestionNotFound(SurveyError, KeyError):
    """Raised when a column is not part of the survey schema."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidQuestionType(SurveyError):
    """Raised when an operation does not apply to a question's type."""


class IncompatibleSubset(SurveyError):
    """Raised when intersecting subsets drawn from different datasets."""


class SurveyLoadError(SurveyError):
    """Raised when a survey workbook cannot be turned into a dataset."""


class SurveyFileNotFound(SurveyLoadError, FileNotFoundError):
    pass


class UnsupportedFormat(SurveyLoadError):
    pass


class MissingRequiredSheet(SurveyLoadError):
    pass


class EmptyDataset(SurveyLoadError):
    pass
