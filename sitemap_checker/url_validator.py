"""
1.0 URL Validator
Checks the HTTP status of a single sitemap URL.

Key features:
- One GET request per URL, no retries (a single attempt is authoritative)
- Shared requests Session so workers reuse pooled connections
- Transport failures never propagate: they become a status record
  (the status carried by the error's response, or 500 when there is none)
- Records are written to the shared StatusStore as part of the check
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from sitemap_checker.status_store import (
    NETWORK_FAILURE_STATUS,
    StatusRecord,
    StatusStore,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SitemapStatusChecker/1.0)"


def create_session(user_agent: str = DEFAULT_USER_AGENT, pool_size: int = 10) -> requests.Session:
    """
    1.1 Create a requests Session sized for the worker pool.

    Retries are disabled on purpose: each URL gets exactly one attempt.
    """
    session = requests.Session()

    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({"User-Agent": user_agent})

    return session


class URLValidator:
    """
    2.0 URLValidator Class
    Maps one GET request to one StatusRecord.
    """

    def __init__(
        self,
        store: StatusStore,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        record_failures_in_all: bool = False,
    ):
        """
        2.1 Initialize the validator.

        Args:
            store: Shared store that receives every record
            session: HTTP session (a default one is created if omitted)
            timeout: Request timeout in seconds; None leaves the transport default
            record_failures_in_all: Also append transport failures to the
                full record list (off by default, failures only land in the
                non-200 list)
        """
        self.store = store
        self.session = session or create_session()
        self.timeout = timeout
        self.record_failures_in_all = record_failures_in_all

    def validate(self, url: str) -> StatusRecord:
        """
        3.0 Check a URL with a single GET request.

        Returns:
            StatusRecord with the response status, or the failure status
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            return self._record_failure(url, e)

        record = StatusRecord(url=url, status=response.status_code)
        self.store.record_response(record)

        if record.status != 200:
            logger.info(f"Non-200 status for {url}: {record.status}")
        else:
            logger.debug(f"OK {url}")

        return record

    def _record_failure(self, url: str, error: requests.exceptions.RequestException) -> StatusRecord:
        """3.1 Map a transport error to a status record."""
        response = getattr(error, "response", None)
        if response is not None and getattr(response, "status_code", None):
            status = response.status_code
        else:
            status = NETWORK_FAILURE_STATUS

        if isinstance(error, requests.exceptions.Timeout):
            reason = "timeout"
        elif isinstance(error, requests.exceptions.ConnectionError):
            reason = "connection_error"
        elif isinstance(error, requests.exceptions.TooManyRedirects):
            reason = "too_many_redirects"
        else:
            reason = str(error)[:100]

        logger.warning(f"Request failed for {url} ({reason}), recorded as {status}")

        record = StatusRecord(url=url, status=status)
        self.store.record_failure(record, include_in_all=self.record_failures_in_all)
        return record
