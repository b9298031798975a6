"""Markdown report over distributions and subsets. Regenerated wholesale on every run."""
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .analyzer import SurveyAnalyzer
from .config import DEFAULT_TOP_N
from .distribution import Distribution


def _cell(text) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


def _distribution_section(dist: Distribution, top_n: int) -> List[str]:
    q = dist.question
    lines = [
        f"### {_cell(q.text) or q.column}",
        "",
        f"- **Column**: `{q.column}` ({q.type.label})",
        f"- **Valid responses**: {dist.total_valid_responses}",
    ]
    if dist.total_valid_responses == 0:
        lines += ["", "_No data._", ""]
        return lines

    lines.append(f"- **Most popular**: {_cell(dist.most_popular())}")
    lines += ["", "| Answer | Count | Share |", "|---|---:|---:|"]
    for answer, count, pct in dist.top(top_n):
        lines.append(f"| {_cell(answer)} | {count} | {pct:.1f}% |")
    remaining = len(dist.counts) - top_n
    if remaining > 0:
        lines.append(f"| _{remaining} more answer(s)_ | | |")
    lines.append("")
    return lines


def generate_report(
    analyzer: SurveyAnalyzer,
    columns: Optional[Iterable[str]] = None,
    top_n: int = DEFAULT_TOP_N,
    comparisons: Optional[Iterable[Tuple[str, str]]] = None,
    title: str = "Survey Analysis Report",
) -> str:
    """
    Build the report text.

    columns defaults to every single/multiple choice question. comparisons is a
    list of (column, answer) predicates whose subsets get a size/share table.
    """
    if columns is None:
        columns = [q.column for q in analyzer.list_questions() if q.is_categorical]
    columns = list(columns)
    total = analyzer.respondent_count()

    lines = [
        f"# {title}",
        "",
        f"Generated on: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}",
        "",
        "## Executive Summary",
        "",
        f"- **Total Survey Questions**: {len(analyzer.list_questions())}",
        f"- **Total Responses Analyzed**: {total}",
    ]
    if analyzer.source is not None:
        lines.append(f"- **Source**: `{analyzer.source.name}`")
    lines.append("")

    if columns:
        lines += ["## Answer Distributions", ""]
        for column in columns:
            lines += _distribution_section(analyzer.compute_distribution(column), top_n)

    comparisons = list(comparisons or [])
    if comparisons:
        lines += [
            "## Group Comparison",
            "",
            "| Group | Respondents | Share of all respondents |",
            "|---|---:|---:|",
        ]
        for column, answer in comparisons:
            subset = analyzer.create_subset(column, answer)
            lines.append(f"| {_cell(subset.describe())} | {subset.size()} | {subset.percentage_of(total):.1f}% |")
        lines.append("")

    return "\n".join(lines)


def write_report(markdown: str, path) -> Path:
    """Write the report, replacing any previous file."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(markdown)
    return out_path
