"""
Survey Analyzer dashboard.

Usage:
    streamlit run app/app.py

The workbook path defaults to $SURVEY_FILE (or data/so_2024_raw.xlsx) and can be
changed in the sidebar.
"""
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from survey_analyzer.analyzer import SurveyAnalyzer
from survey_analyzer.config import DEFAULT_SURVEY_FILE, DEFAULT_TOP_N
from survey_analyzer.exceptions import SurveyError, SurveyLoadError
from survey_analyzer.report import generate_report
from survey_analyzer.validations import run_all_validations

st.set_page_config(
    page_title="Survey Analyzer",
    page_icon="📊",
    layout="wide",
)


@st.cache_resource
def load_analyzer(path: str) -> SurveyAnalyzer:
    """Load the workbook once per path; cleared by the sidebar reload button."""
    return SurveyAnalyzer.from_excel(path, log=lambda msg: None)


def render_sidebar():
    """Render sidebar with dataset info and navigation. Returns (analyzer or None, page)."""
    with st.sidebar:
        st.title("📊 Survey Analyzer")
        path = st.text_input("Survey workbook", value=str(DEFAULT_SURVEY_FILE))

        if st.button("🔄 Reload data", key="sidebar_reload"):
            load_analyzer.clear()
            st.rerun()

        analyzer = None
        try:
            analyzer = load_analyzer(path)
        except SurveyLoadError as e:
            st.error(f"Could not load survey: {e}")
        else:
            st.success(f"Data loaded: {analyzer.respondent_count():,} responses")
            st.caption(f"Questions: {len(analyzer.list_questions())}")

        st.divider()
        st.subheader("Navigation")
        page = st.radio(
            "Section",
            ["Structure", "Search", "Distribution", "Subsets", "Validations", "Report"],
            label_visibility="collapsed",
        )
        return analyzer, page


def _question_picker(analyzer: SurveyAnalyzer, label: str, key: str, categorical: bool = False) -> str:
    questions = [q for q in analyzer.list_questions() if q.is_categorical or not categorical]
    return st.selectbox(
        label,
        [q.column for q in questions],
        format_func=lambda c: f"{c}: {analyzer.get_question(c).text}",
        key=key,
    )


def render_structure(analyzer: SurveyAnalyzer):
    st.header("Survey Structure")
    frame = pd.DataFrame(
        [{"#": q.id, "Column": q.column, "Question": q.text, "Type": q.type.label} for q in analyzer.list_questions()]
    )
    st.dataframe(frame, use_container_width=True, hide_index=True)


def render_search(analyzer: SurveyAnalyzer):
    st.header("Search")
    term = st.text_input("Keyword", placeholder="e.g., language")
    in_options = st.checkbox("Search answer options instead of questions")
    if not term:
        return
    if in_options:
        results = analyzer.search_options(term)
        rows = [{"Column": q.column, "Question": q.text, "Option": answer} for q, answer in results]
    else:
        results = analyzer.search_questions(term)
        rows = [{"Column": q.column, "Question": q.text, "Type": q.type.label} for q in results]
    if rows:
        st.caption(f"{len(rows)} match(es)")
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No matches.")


def render_distribution(analyzer: SurveyAnalyzer):
    st.header("Answer Distribution")
    column = _question_picker(analyzer, "Question", key="dist_column")
    col1, col2 = st.columns(2)
    with col1:
        top_n = st.selectbox("Top N", [5, 10, 15, 20, 50], index=1)
    with col2:
        threshold = st.slider("Minimum percentage", 0.0, 100.0, 0.0, step=0.5)

    dist = analyzer.compute_distribution(column)
    st.metric("Valid responses", dist.total_valid_responses)
    if dist.total_valid_responses == 0:
        st.info("No data for this question.")
        return

    frame = pd.DataFrame(
        [stat for stat in dist.top(top_n) if stat[2] >= threshold],
        columns=["Answer", "Count", "Percentage"],
    )
    col1, col2 = st.columns([2, 1])
    with col1:
        st.dataframe(frame.round({"Percentage": 1}), use_container_width=True, hide_index=True)
    with col2:
        st.bar_chart(frame.set_index("Answer")["Count"])


def render_subsets(analyzer: SurveyAnalyzer):
    st.header("Subsets")
    st.caption("Respondents matching every condition below; optionally compare another question within the group.")
    n_conditions = st.number_input("Conditions", min_value=1, max_value=4, value=1)

    subset = None
    for i in range(int(n_conditions)):
        col1, col2 = st.columns(2)
        with col1:
            column = _question_picker(analyzer, f"Question {i + 1}", key=f"subset_col_{i}", categorical=True)
        with col2:
            answer = st.selectbox("Answer", analyzer.question_options(column), key=f"subset_ans_{i}")
        if answer is None:
            return
        current = analyzer.create_subset(column, answer)
        subset = current if subset is None else subset.intersect(current)

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Respondents", subset.size())
    with col2:
        st.metric("Share of all respondents", f"{subset.percentage_of():.1f}%")
    st.caption(subset.describe())

    compare = _question_picker(analyzer, "Compare within group", key="subset_compare")
    try:
        dist = analyzer.compute_distribution(compare, within=subset)
    except SurveyError as e:
        st.error(str(e))
        return
    if dist.total_valid_responses:
        frame = dist.to_frame().head(DEFAULT_TOP_N)
        st.bar_chart(frame.set_index("answer")["percentage"])


def render_validations(analyzer: SurveyAnalyzer):
    st.header("Validations")
    results = run_all_validations(analyzer.table)
    passed = sum(1 for r in results if r.get("passed"))
    st.metric("Validations passed", f"{passed}/{len(results)}")
    for r in results:
        icon = "✓" if r.get("passed") else "✗"
        st.caption(f"{icon} **{r['name']}**: {r['message']}")


def render_report(analyzer: SurveyAnalyzer):
    st.header("Markdown Report")
    top_n = st.number_input("Answers per question", min_value=1, max_value=50, value=DEFAULT_TOP_N)
    markdown = generate_report(analyzer, top_n=int(top_n))
    st.download_button(
        "Download report (Markdown)",
        data=markdown,
        file_name="survey_analysis_report.md",
        mime="text/markdown",
    )
    with st.expander("Preview"):
        st.markdown(markdown)


def main():
    """Main application entry point."""
    analyzer, page = render_sidebar()
    if analyzer is None:
        st.warning("Load a survey workbook (with 'raw data' and 'schema' sheets) to begin.")
        return

    pages = {
        "Structure": render_structure,
        "Search": render_search,
        "Distribution": render_distribution,
        "Subsets": render_subsets,
        "Validations": render_validations,
        "Report": render_report,
    }
    pages[page](analyzer)

    st.divider()
    st.caption("Survey Analyzer | read-only queries over the loaded workbook")


if __name__ == "__main__":
    main()
