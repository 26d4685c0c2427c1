"""Fixed topic buckets and their article distribution."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from analysis.models.domain import TopicCount
from analysis.services.keywords import article_text
from ingestion.models.domain import Article

OTHER_TOPIC = "기타"

TOPIC_BUCKETS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("디지털 크리덴셜", ("digital credential", "credential", "certificate", "certification")),
    ("오픈배지", ("open badge", "badge", "micro-credential")),
    ("블록체인", ("blockchain", "web3", "nft", "token")),
    ("교육", ("education", "learning", "university", "school", "student")),
    ("기업", ("company", "enterprise", "business", "corporate")),
    ("정책", ("policy", "government", "regulation", "standard")),
)


def classify_topics(article: Article) -> List[str]:
    """기사가 속하는 모든 주제 버킷. 매칭이 없으면 기타."""
    text = article_text(article).lower()
    topics = [name for name, terms in TOPIC_BUCKETS if any(term in text for term in terms)]
    return topics or [OTHER_TOPIC]


def topic_distribution(articles: Sequence[Article]) -> List[TopicCount]:
    """버킷별 기사 수 내림차순 (동률은 버킷 순서). 비율 합계는 100%를 넘을 수 있다."""
    counts: Dict[str, int] = {}
    for article in articles:
        for topic in classify_topics(article):
            counts[topic] = counts.get(topic, 0) + 1

    order = [name for name, _ in TOPIC_BUCKETS] + [OTHER_TOPIC]
    total = len(articles)
    ranked = sorted(
        (name for name in order if name in counts),
        key=lambda name: -counts[name],
    )
    return [
        TopicCount(topic=name, count=counts[name], percentage=(counts[name] / total * 100) if total else 0.0)
        for name in ranked
    ]
