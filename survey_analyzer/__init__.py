"""Survey analyzer: structure, search, distributions and subsets over a survey workbook."""
from .analyzer import SurveyAnalyzer
from .distribution import Distribution, compute_distribution
from .exceptions import (
    EmptyDataset,
    IncompatibleSubset,
    InvalidQuestionType,
    MissingRequiredSheet,
    QuestionNotFound,
    SurveyError,
    SurveyFileNotFound,
    SurveyLoadError,
    UnsupportedFormat,
)
from .loader import build_survey, load_survey
from .normalizer import column_delimiter, normalize_answers
from .schema import Question, QuestionType, Schema
from .subset import Subset, create_subset

__all__ = [
    "SurveyAnalyzer",
    "Distribution",
    "compute_distribution",
    "Subset",
    "create_subset",
    "Question",
    "QuestionType",
    "Schema",
    "column_delimiter",
    "normalize_answers",
    "build_survey",
    "load_survey",
    "SurveyError",
    "SurveyLoadError",
    "QuestionNotFound",
    "InvalidQuestionType",
    "IncompatibleSubset",
    "SurveyFileNotFound",
    "UnsupportedFormat",
    "MissingRequiredSheet",
    "EmptyDataset",
]
