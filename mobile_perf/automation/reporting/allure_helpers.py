"""Allure reporting helpers."""

from __future__ import annotations

import json
from typing import Any, Mapping

try:
    import allure  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    allure = None  # type: ignore


def attach_json(name: str, payload: Mapping[str, Any]) -> bool:
    """Attach ``payload`` to the running Allure test. Returns False when Allure is not installed."""
    if allure is None:
        return False
    body = json.dumps(payload, indent=2, sort_keys=True, default=str)
    allure.attach(body, name=name, attachment_type=allure.attachment_type.JSON)
    return True
