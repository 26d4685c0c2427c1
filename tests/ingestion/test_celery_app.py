import pytest

celery = pytest.importorskip("celery")  # noqa: F841

from ingestion.celery_app import CYCLE_TASK_NAME, create_celery_app
from ingestion.settings import Settings


def test_beat_schedule_runs_cycle_at_configured_interval():
    settings = Settings(redis_url="redis://localhost:6379/0", ingestion_interval_minutes=30, log_level="DEBUG")

    app = create_celery_app(settings)

    assert list(app.conf.beat_schedule.keys()) == ["collect.gdelt"]
    entry = app.conf.beat_schedule["collect.gdelt"]
    assert entry["task"] == CYCLE_TASK_NAME
    assert entry["schedule"].run_every.total_seconds() == 1800
    assert app.conf.worker_concurrency == 1


def test_no_beat_schedule_when_interval_is_zero():
    app = create_celery_app(Settings(ingestion_interval_minutes=0))

    assert app.conf.beat_schedule == {}
