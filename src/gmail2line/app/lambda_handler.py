"""AWS Lambda entry point, invoked by an EventBridge schedule."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from gmail2line.app.run import run_once
from gmail2line.config.settings import load_ssm_config
from gmail2line.errors import Gmail2LineError
from gmail2line.logging_utils import configure_logger


logger = configure_logger("gmail2line")


def event_time(event: Optional[Dict[str, Any]]) -> datetime:
    """Return the scheduled event's ``time`` or the current UTC time."""
    raw = (event or {}).get("time")
    if not raw:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body)}


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    # Failures are reported in the response body, never raised.
    try:
        now = event_time(event)
    except ValueError as exc:
        logger.error("Invalid event time: %s", exc)
        return _response(400, {"error": f"invalid event time: {exc}"})

    try:
        cfg = load_ssm_config()
        summary = run_once(cfg, now)
    except Gmail2LineError as exc:
        logger.error("handler run error: %s", exc)
        return _response(500, {"error": str(exc)})

    logger.info("Run completed: %s", json.dumps(summary))
    return _response(200, summary)
