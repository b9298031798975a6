#!/usr/bin/env python3
"""
Survey analyzer CLI: structure, search, distributions, subsets, validations and reports.

Usage:
    survey-analyzer --file so_2024_raw.xlsx structure --limit 20
    survey-analyzer search "language"
    survey-analyzer search python --options
    survey-analyzer dist Age --threshold 5
    survey-analyzer dist Age --within LanguageHaveWorkedWith Rust
    survey-analyzer subset LanguageHaveWorkedWith Rust --and Age "18-24 years old"
    survey-analyzer options Age
    survey-analyzer validate
    survey-analyzer report --output report.md --compare AISelect Yes
    survey-analyzer repl
"""
import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from .analyzer import SurveyAnalyzer
from .config import (
    DEFAULT_SURVEY_FILE,
    DEFAULT_TOP_N,
    DETAIL_ROW_LIMIT,
    MISSING_MARKERS,
    OPTIONS_DISPLAY_LIMIT,
    get_report_path,
)
from .exceptions import SurveyError
from .report import generate_report, write_report
from .schema import Question
from .validations import run_all_validations

OutFn = Callable[[str], None]


def _question_line(i: int, q: Question) -> str:
    return f"{i}. [{q.column}] {q.text} (Type: {q.type.label})"


def print_structure(analyzer: SurveyAnalyzer, out: OutFn, limit: Optional[int] = None, term: Optional[str] = None):
    questions = analyzer.search_questions(term) if term else analyzer.list_questions()
    if limit is not None:
        questions = questions[:limit]
    out("=== Survey Structure ===")
    out(f"Total questions: {len(analyzer.list_questions())}")
    out(f"Total responses: {analyzer.respondent_count()}")
    out("")
    for i, q in enumerate(questions, start=1):
        out(_question_line(i, q))


def print_question_search(analyzer: SurveyAnalyzer, term: str, out: OutFn):
    results = analyzer.search_questions(term)
    if not results:
        out(f"No questions found matching '{term}'")
        return
    out(f"Found {len(results)} question(s) matching '{term}':")
    out("")
    for i, q in enumerate(results, start=1):
        out(_question_line(i, q))


def print_option_search(analyzer: SurveyAnalyzer, term: str, out: OutFn):
    results = analyzer.search_options(term)
    if not results:
        out(f"No options found matching '{term}'")
        return
    out(f"Found {len(results)} option(s) matching '{term}':")
    for q, answer in results:
        out(f"  [{q.column}] {answer}")


def print_options(analyzer: SurveyAnalyzer, column: str, out: OutFn, limit: Optional[int] = None):
    q = analyzer.get_question(column)
    options = analyzer.question_options(column)
    out(f"Available options for '{q.text}' (Type: {q.type.label}):")
    out(f"Total options: {len(options)}")
    out("")
    shown = options if limit is None else options[:limit]
    for i, option in enumerate(shown, start=1):
        out(f"{i}. {option}")
    if len(options) > len(shown):
        out(f"... and {len(options) - len(shown)} more options")


def print_subset_rows(analyzer: SurveyAnalyzer, subset, out: OutFn, limit: int = DETAIL_ROW_LIMIT):
    out("")
    out("Detailed responses:")
    for i, row in enumerate(analyzer.subset_rows(subset, limit=limit), start=1):
        out("")
        out(f"--- Response {i} ---")
        for key, value in row.items():
            if value.strip() and value.strip().lower() not in MISSING_MARKERS:
                out(f"{key}: {value}")
    if subset.size() > limit:
        out("")
        out(f"... and {subset.size() - limit} more responses")


# ---------------------------------------------------------------------------
# One-shot commands
# ---------------------------------------------------------------------------

def cmd_structure(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    print_structure(analyzer, out, limit=args.limit, term=args.filter)
    return 0


def cmd_search(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    if args.options:
        print_option_search(analyzer, args.term, out)
    else:
        print_question_search(analyzer, args.term, out)
    return 0


def cmd_dist(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    within = None
    if args.within:
        within = analyzer.create_subset(*args.within)
        out(within.display())
        out("")
    dist = analyzer.compute_distribution(args.column, within=within, categorical_only=args.categorical)
    out(dist.display(threshold=args.threshold))
    return 0


def cmd_subset(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    case_sensitive = not args.ignore_case
    subset = analyzer.create_subset(args.column, args.answer, case_sensitive=case_sensitive)
    for column, answer in args.also or []:
        subset = subset.intersect(analyzer.create_subset(column, answer, case_sensitive=case_sensitive))
    out(subset.display())
    if args.detailed and subset.size():
        print_subset_rows(analyzer, subset, out)
    return 0


def cmd_options(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    print_options(analyzer, args.column, out)
    return 0


def cmd_validate(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    results = run_all_validations(analyzer.table, min_rows=args.min_rows)
    passed = sum(1 for r in results if r.get("passed"))
    out("VALIDATIONS")
    out("-" * 40)
    for r in results:
        status = "PASS" if r.get("passed") else "FAIL"
        symbol = "✓" if r.get("passed") else "✗"
        out(f"  {symbol} [{status}] {r['name']}: {r['message']}")
        for k, v in (r.get("details") or {}).items():
            if v:
                out(f"      {k}: {v}")
    out(f"\n  Validations: {passed}/{len(results)} passed")
    if args.json:
        out_path = Path(args.json)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        report = {
            "run_at": datetime.now(timezone.utc).isoformat(),
            "source": analyzer.stats.get("source"),
            "passed": passed,
            "total": len(results),
            "all_passed": passed == len(results),
            "results": results,
        }
        with open(out_path, "w") as f:
            json.dump(report, f, indent=2, default=str)
        out(f"Report written to {out_path}")
    return 0 if passed == len(results) else 1


def cmd_report(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    markdown = generate_report(
        analyzer,
        columns=args.columns,
        top_n=args.top,
        comparisons=args.compare,
    )
    path = write_report(markdown, args.output or get_report_path())
    out(f"Report written to {path}")
    return 0


def cmd_repl(analyzer: SurveyAnalyzer, args, out: OutFn) -> int:
    run_repl(analyzer, out=out)
    return 0


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------

REPL_HELP = """Available commands:
  structure [N]                - Display survey structure (alias: list)
  columns                      - List all column names
  search <keyword>             - Search for questions
  searchopt <keyword>          - Search answer options
  dist <column>                - Show distribution for a question
  subset <column> <option>     - Create subset of respondents
  options <column>             - Show available options for a question
  help                         - Show this help
  quit                         - Exit interactive mode"""


def run_repl(
    analyzer: SurveyAnalyzer,
    input_fn: Callable[[str], str] = input,
    out: OutFn = print,
) -> None:
    """Read-eval-print loop. A failing command prints an error and the loop continues."""
    out("=== Interactive Survey Analyzer ===")
    out("Type 'help' for available commands, 'quit' to exit")
    out("")

    while True:
        try:
            line = input_fn("> ")
        except EOFError:
            break

        parts = line.strip().split()
        if not parts:
            continue
        command, rest = parts[0].lower(), parts[1:]

        if command in ("quit", "exit"):
            break
        try:
            _dispatch(analyzer, command, rest, out)
        except SurveyError as e:
            out(f"Error: {e}")
        out("")

    out("Goodbye!")


def _dispatch(analyzer: SurveyAnalyzer, command: str, rest: List[str], out: OutFn) -> None:
    if command == "help":
        out(REPL_HELP)
    elif command in ("structure", "list"):
        limit = int(rest[0]) if rest and rest[0].isdigit() else None
        print_structure(analyzer, out, limit=limit)
    elif command == "columns":
        out("Available columns:")
        for i, column in enumerate(analyzer.columns(), start=1):
            out(f"{i}. {column}")
    elif command == "search":
        if not rest:
            out("Usage: search <keyword>")
            return
        print_question_search(analyzer, " ".join(rest), out)
    elif command == "searchopt":
        if not rest:
            out("Usage: searchopt <keyword>")
            return
        print_option_search(analyzer, " ".join(rest), out)
    elif command == "dist":
        if not rest:
            out("Usage: dist <column>")
            return
        out(analyzer.compute_distribution(rest[0]).display())
    elif command == "subset":
        if len(rest) < 2:
            out("Usage: subset <column> <option>")
            return
        out(analyzer.create_subset(rest[0], " ".join(rest[1:])).display())
    elif command == "options":
        if not rest:
            out("Usage: options <column>")
            return
        print_options(analyzer, rest[0], out, limit=OPTIONS_DISPLAY_LIMIT)
    else:
        out(f"Unknown command: '{command}'. Type 'help' for available commands.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-analyzer",
        description="Survey data analyzer: structure, search, distributions and subsets",
    )
    parser.add_argument(
        "--file", "-f",
        default=str(DEFAULT_SURVEY_FILE),
        help=f"Path to the survey workbook (default: {DEFAULT_SURVEY_FILE}, or $SURVEY_FILE)"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print loading progress"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("structure", help="List the survey questions")
    p.add_argument("--limit", "-l", type=int, help="Show only the first N questions")
    p.add_argument("--filter", help="Show only questions matching this term")
    p.set_defaults(handler=cmd_structure)

    p = sub.add_parser("search", help="Search questions (or answer options)")
    p.add_argument("term", help="Search term")
    p.add_argument("--options", "-o", action="store_true", help="Search answer options instead of questions")
    p.set_defaults(handler=cmd_search)

    p = sub.add_parser("dist", aliases=["distribution"], help="Show the answer distribution for a question")
    p.add_argument("column", help="Column name of the question")
    p.add_argument("--threshold", "-t", type=float, default=0.0, help="Only show answers at or above this percentage")
    p.add_argument("--within", nargs=2, metavar=("COLUMN", "ANSWER"), help="Restrict to respondents who gave ANSWER for COLUMN")
    p.add_argument("--categorical", action="store_true", help="Fail unless the question is single or multiple choice")
    p.set_defaults(handler=cmd_dist)

    p = sub.add_parser("subset", help="Count respondents who selected an answer")
    p.add_argument("column", help="Column name of the question")
    p.add_argument("answer", help="Answer to filter by")
    p.add_argument("--and", dest="also", nargs=2, action="append", metavar=("COLUMN", "ANSWER"), help="Intersect with another condition")
    p.add_argument("--ignore-case", action="store_true", help="Match answers case-insensitively")
    p.add_argument("--detailed", "-d", action="store_true", help=f"Show up to {DETAIL_ROW_LIMIT} matching responses")
    p.set_defaults(handler=cmd_subset)

    p = sub.add_parser("options", help="List the distinct answers for a question")
    p.add_argument("column", help="Column name of the question")
    p.set_defaults(handler=cmd_options)

    p = sub.add_parser("validate", help="Run dataset validations")
    p.add_argument("--min-rows", type=int, default=1, help="Min rows required (default 1)")
    p.add_argument("--json", type=str, default="", help="Write full validation results to this JSON file")
    p.set_defaults(handler=cmd_validate)

    p = sub.add_parser("report", help="Write a Markdown report")
    p.add_argument("--output", "-o", default="", help="Report path (default: data/reports/survey_analysis_report.md)")
    p.add_argument("--column", dest="columns", action="append", help="Question to include (repeatable; default: all categorical)")
    p.add_argument("--top", type=int, default=DEFAULT_TOP_N, help=f"Answers per question (default: {DEFAULT_TOP_N})")
    p.add_argument("--compare", nargs=2, action="append", metavar=("COLUMN", "ANSWER"), help="Add a group to the comparison table")
    p.set_defaults(handler=cmd_report)

    p = sub.add_parser("repl", aliases=["interactive"], help="Interactive mode")
    p.set_defaults(handler=cmd_repl)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log = (lambda msg: None) if args.quiet else (lambda msg: print(msg, flush=True))
    try:
        analyzer = SurveyAnalyzer.from_excel(args.file, log=log)
    except SurveyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    log("")

    try:
        return args.handler(analyzer, args, print)
    except SurveyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
