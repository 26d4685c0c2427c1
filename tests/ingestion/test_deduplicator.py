from ingestion.models.domain import Article
from ingestion.services.deduplicator import dedupe_and_sort, dedupe_articles, sort_by_recency


def _a(url: str, published_at: str = "", title: str = "t") -> Article:
    return Article(title=title, url=url, published_at=published_at)


def test_dedupe_is_case_insensitive_and_keeps_first():
    items = [
        _a("https://Example.com/A", title="first"),
        _a("https://example.com/a", title="second"),
        _a("https://example.com/b", title="third"),
    ]

    unique = dedupe_articles(items)

    assert [a.title for a in unique] == ["first", "third"]


def test_sort_puts_missing_and_unparseable_dates_last():
    items = [
        _a("https://x.com/1", ""),
        _a("https://x.com/2", "2024-01-01T00:00:00Z"),
        _a("https://x.com/3", "garbage"),
        _a("https://x.com/4", "2024-03-01T00:00:00Z"),
    ]

    ordered = sort_by_recency(items)

    assert [a.url for a in ordered] == [
        "https://x.com/4",
        "https://x.com/2",
        "https://x.com/1",
        "https://x.com/3",
    ]


def test_sort_is_stable_for_equal_dates():
    items = [_a(f"https://x.com/{i}", "2024-01-01") for i in range(3)]

    assert [a.url for a in sort_by_recency(items)] == [a.url for a in items]


def test_dedupe_and_sort_is_idempotent():
    items = [
        _a("https://x.com/1", "2024-01-02T00:00:00Z"),
        _a("https://X.com/1", "2024-05-02T00:00:00Z"),
        _a("https://x.com/2", "2024-02-02T00:00:00Z"),
        _a("https://x.com/3"),
    ]

    once = dedupe_and_sort(items)

    assert dedupe_and_sort(once) == once
    assert [a.url for a in once] == ["https://x.com/2", "https://x.com/1", "https://x.com/3"]
