import pytest

from analysis.services.topics import OTHER_TOPIC, classify_topics, topic_distribution
from ingestion.models.domain import Article


def _a(title: str, content: str | None = None) -> Article:
    return Article(title=title, url=f"https://x.com/{abs(hash(title))}", content=content)


def test_article_can_land_in_several_buckets():
    topics = classify_topics(_a("University issues blockchain certificate"))

    assert topics == ["디지털 크리덴셜", "블록체인", "교육"]


def test_unmatched_article_goes_to_other():
    assert classify_topics(_a("Weather report")) == [OTHER_TOPIC]


def test_content_is_matched_too():
    assert classify_topics(_a("Update", content="New government policy")) == ["정책"]


def test_distribution_counts_descending_with_bucket_order_ties():
    articles = [
        _a("Open badge for students"),
        _a("Badge adoption at company"),
        _a("Weather report"),
    ]

    dist = topic_distribution(articles)

    assert [(t.topic, t.count) for t in dist] == [("오픈배지", 2), ("교육", 1), ("기업", 1), ("기타", 1)]
    assert dist[0].percentage == pytest.approx(66.666, rel=1e-3)
    # 여러 버킷에 포함되므로 합계가 100%를 넘는다
    assert sum(t.percentage for t in dist) > 100
