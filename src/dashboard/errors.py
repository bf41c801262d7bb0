"""Error hierarchy for data-source failures.

Network collaborators raise these so tenacity retry decorators can tell
transient failures (retry) apart from permanent ones (give up). The dashboard
service catches every DashboardError at the source boundary and reduces it to
an empty value, so the scheduling core never sees them.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    def fetch_meals(...):
        ...
"""


class DashboardError(Exception):
    """Base exception for all data-source errors."""

    pass


class TransientError(DashboardError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, connection resets, 503 Service Unavailable.
    """

    pass


class RateLimitError(TransientError):
    """Rate limit exceeded (HTTP 429) - needs longer backoff.

    Inherits from TransientError so tenacity will retry it.
    """

    pass


class PermanentError(DashboardError):
    """Failure that won't succeed on retry.

    Examples: 404 from an API, a payload that is not valid JSON.
    """

    pass


class ConfigurationError(PermanentError):
    """A source cannot be queried with the current settings.

    Missing NEIS API key, missing school codes, unparseable spreadsheet URL.
    """

    pass
