"""Celery 애플리케이션 부트스트랩."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict

from celery import Celery
from celery.schedules import schedule as celery_schedule

from .settings import Settings, get_settings
from .utils.logging import configure_logging

CYCLE_TASK_NAME = "ingestion.tasks.collect.run_ingestion_cycle"

_CELERY_APP: Celery | None = None


def create_celery_app(settings: Settings | None = None) -> Celery:
    """설정을 기반으로 Celery 인스턴스를 생성한다."""
    config = settings or get_settings()
    configure_logging(config.log_level, json_enabled=config.log_json)

    app = Celery("ingestion", broker=config.redis_url, backend=config.redis_url)
    app.conf.update(
        task_default_queue="ingestion.default",
        task_default_exchange="ingestion",
        task_default_routing_key="ingestion.default",
        # 수집 주기는 순차 실행이 전제이므로 워커 1개
        worker_concurrency=1,
        beat_schedule=_build_beat_schedule(config),
        timezone="UTC",
        enable_utc=True,
    )

    app.autodiscover_tasks(["ingestion.tasks"], related_name="collect")
    _install_signal_handlers(app)
    return app


def get_celery_app() -> Celery:
    """싱글톤 Celery 인스턴스를 반환한다 (워커/비트 진입점 전용)."""
    global _CELERY_APP
    if _CELERY_APP is None:
        _CELERY_APP = create_celery_app()
    return _CELERY_APP


def _build_beat_schedule(settings: Settings) -> Dict[str, Dict[str, Any]]:
    if settings.ingestion_interval_minutes <= 0:
        return {}
    return {
        f"collect.{settings.news_provider}": {
            "task": CYCLE_TASK_NAME,
            "schedule": celery_schedule(timedelta(minutes=settings.ingestion_interval_minutes)),
            "options": {"queue": "ingestion.default"},
        }
    }


def _install_signal_handlers(app: Celery) -> None:
    from celery import signals

    logger = logging.getLogger("ingestion.worker")

    @signals.worker_shutdown.connect  # type: ignore[attr-defined]
    def _on_worker_shutdown(sender=None, **kwargs):  # noqa: ANN001
        logger.info("worker.shutdown", extra={"sender": str(sender)})
