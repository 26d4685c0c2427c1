"""Locate the list of article-like records inside an upstream payload.

Providers wrap their results inconsistently across versions and queries
(bare list, nested list, or an object keyed by ``articles``/``items``/
``documents``), so extraction is a priority list of shape checks.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from ingestion.utils.logging import get_logger

logger = get_logger(__name__)

RECORD_LIST_KEYS = ("articles", "items", "documents")


def extract_records(payload: Any) -> List[Any]:
    """Return the raw records in ``payload``; never raises."""
    if isinstance(payload, list):
        if payload and isinstance(payload[0], list):
            flattened: List[Any] = []
            for element in payload:
                if isinstance(element, list):
                    flattened.extend(element)
                else:
                    flattened.append(element)
            return flattened
        return list(payload)

    if isinstance(payload, Mapping):
        for key in RECORD_LIST_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return list(value)
        logger.debug("extract.unrecognized_shape", extra={"keys": sorted(str(k) for k in payload.keys())[:20]})
        return []

    logger.debug("extract.unrecognized_shape", extra={"type": type(payload).__name__})
    return []
