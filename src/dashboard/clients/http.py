"""Thin GET helpers shared by every data source.

Failures are classified into the src.dashboard.errors hierarchy: timeouts,
connection errors, 429 and 5xx are transient and retried with tenacity;
other 4xx responses and undecodable bodies are permanent.
"""

from typing import Any

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.dashboard.config import get_config
from src.dashboard.errors import PermanentError, RateLimitError, TransientError
from src.dashboard.logging import get_logger

log = get_logger(__name__)

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Shared requests session with the dashboard User-Agent."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers["User-Agent"] = get_config().http_user_agent
    return _session


def _check_status(response: requests.Response, url: str) -> None:
    status = response.status_code
    if status == 429:
        raise RateLimitError(f"Rate limited by {url}")
    if status >= 500:
        raise TransientError(f"{url} returned {status}")
    if status != 200:
        raise PermanentError(f"{url} returned {status}")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, max=8),
    retry=retry_if_exception_type(TransientError),
    reraise=True,
)
def _get(url: str, params: dict[str, Any] | None, headers: dict[str, str] | None) -> requests.Response:
    try:
        response = get_session().get(
            url,
            params=params,
            headers=headers,
            timeout=get_config().http_timeout_seconds,
        )
    except (requests.Timeout, requests.ConnectionError) as e:
        log.warning("http_transient_failure", url=url, error=str(e))
        raise TransientError(f"GET {url} failed: {e}") from e
    except requests.RequestException as e:
        raise PermanentError(f"GET {url} failed: {e}") from e

    _check_status(response, url)
    return response


def fetch_text(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    """GET ``url`` and return the body decoded as UTF-8.

    Raises:
        TransientError: If the request still fails after retries.
        PermanentError: On 4xx responses.
    """
    response = _get(url, params, headers)
    response.encoding = "utf-8"
    return response.text


def fetch_json(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET ``url`` and decode the JSON body.

    Raises:
        TransientError: If the request still fails after retries.
        PermanentError: On 4xx responses or a body that is not JSON.
    """
    response = _get(url, params, headers)
    try:
        return response.json()
    except ValueError as e:
        raise PermanentError(f"{url} returned invalid JSON") from e
