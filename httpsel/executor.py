"""httpsel executor - HTTP request execution."""

import json
import time
from abc import ABC, abstractmethod
from typing import Any

import requests

BODY_METHODS = ("POST", "PUT", "PATCH")


class RequestResult:
    """Result of an HTTP request."""

    def __init__(self):
        self.status_code: int = 0
        self.headers: dict[str, str] = {}
        self.body: Any = None  # parsed JSON or raw text
        self.elapsed_ms: float = 0
        self.error: str | None = None
        self.raw_text: str = ""


def execute_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: str | None = None,
    timeout: int = 30,
) -> RequestResult:
    """Execute an HTTP request and return structured result.

    - Attempts to parse response as JSON
    - Falls back to raw text
    - Captures timing
    - Never raises - always returns RequestResult with error field set
    """
    result = RequestResult()

    try:
        start = time.monotonic()
        resp = requests.request(
            method=method,
            url=url,
            headers=headers,
            data=body.encode("utf-8") if body else None,
            timeout=timeout,
            allow_redirects=True,
        )
        result.elapsed_ms = (time.monotonic() - start) * 1000

        result.status_code = resp.status_code
        result.headers = dict(resp.headers)
        result.raw_text = resp.text

        try:
            result.body = resp.json()
        except (json.JSONDecodeError, ValueError):
            result.body = resp.text

    except requests.exceptions.Timeout:
        result.error = f"Request timed out after {timeout}s"
    except requests.exceptions.ConnectionError as e:
        result.error = f"Connection error: {e}"
    except requests.exceptions.RequestException as e:
        result.error = f"Request failed: {e}"
    except Exception as e:
        result.error = f"Unexpected error: {e}"

    return result


class RequestAdapter(ABC):
    """Something that can send a parsed request and report the outcome."""

    @abstractmethod
    def execute(self, request) -> RequestResult:
        """Send request; transport failures are reported via result.error."""


class RequestsAdapter(RequestAdapter):
    """Sends requests with the requests library.

    default_headers are applied first, so a request's own headers win. The
    body is only sent for POST, PUT and PATCH.
    """

    def __init__(self, timeout: int = 30, default_headers: dict[str, str] | None = None):
        self.timeout = timeout
        self.default_headers = dict(default_headers or {})

    def execute(self, request) -> RequestResult:
        headers = {**self.default_headers, **request.headers}
        body = request.body if request.method.upper() in BODY_METHODS else None
        return execute_request(
            method=request.method,
            url=request.url,
            headers=headers,
            body=body,
            timeout=self.timeout,
        )
