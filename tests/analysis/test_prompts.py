import pytest
from pydantic import ValidationError

from analysis.models.domain import SummaryResult
from analysis.prompts.templates import build_article_input, build_combined_input
from ingestion.models.domain import Article


def test_article_input_prefers_content_then_description():
    assert build_article_input(Article(title="t", url="https://x.com/1", description="d", content="c")) == "c"
    assert build_article_input(Article(title="t", url="https://x.com/2", description="d")) == "d"
    assert build_article_input(Article(title="t", url="https://x.com/3")) == ""


def test_combined_input_skips_unsummarized_articles():
    articles = [
        Article(title="A", url="https://x.com/a", summary="sa"),
        Article(title="B", url="https://x.com/b"),
        Article(title="C", url="https://x.com/c", summary="sc"),
    ]

    assert build_combined_input(articles) == "Title: A\nSummary: sa\n\nTitle: C\nSummary: sc\n\n"
    assert build_combined_input(articles[1:2]) == ""


def test_summary_result_rejects_blank_summary():
    with pytest.raises(ValidationError):
        SummaryResult(summary="   ")
    assert SummaryResult(summary=" ok ").summary == "ok"
