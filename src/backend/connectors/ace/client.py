from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import AceConfig

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


class AceHttpError(RuntimeError):
    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"ACE HTTP {status}: {message}")
        self.status = status
        self.body = body


def ace_request(
    config: AceConfig,
    method: str,
    path: str,
    *,
    body: Any = None,
) -> dict[str, Any]:
    """
    Perform an authenticated JSON request against the record store API.

    Retries throttling/5xx responses and connection errors with exponential
    backoff (config.max_retries); any other non-success raises AceHttpError.
    """
    retries = 0
    backoff = 0.5
    data = json.dumps(body).encode("utf-8") if body is not None else None

    while True:
        req = Request(_build_url(config.base_url, path), data=data, method=method)
        req.add_header("Accept", "application/json")
        req.add_header("Content-Type", "application/json")
        req.add_header("Authorization", f"Bearer {config.token}")

        try:
            with urlopen(req, timeout=config.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except HTTPError as exc:
            error_body = exc.read().decode("utf-8") if exc.fp else None
            if exc.code in RETRY_STATUSES and retries < config.max_retries:
                logger.warning("%s %s returned %s; retrying in %.1fs", method, path, exc.code, backoff)
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue
            raise AceHttpError(exc.code, str(exc.reason), error_body) from exc
        except URLError as exc:
            if retries < config.max_retries:
                logger.warning("%s %s failed (%s); retrying in %.1fs", method, path, exc.reason, backoff)
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue
            raise AceHttpError(0, str(exc)) from exc

        if not raw.strip():
            return {}
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise AceHttpError(200, f"Invalid JSON from {method} {path}", raw) from exc


def _build_url(base_url: str, path: str) -> str:
    normalized_path = path if path.startswith("/") else f"/{path}"
    return f"{base_url.rstrip('/')}{normalized_path}"
