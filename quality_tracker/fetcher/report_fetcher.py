"""HTTP retrieval of PHPCS JSON reports.

Reports are usually raw files published by CI (for example
raw.githubusercontent.com URLs). Private repositories need a bearer token.
"""

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from quality_tracker.consts import BODY_SNIPPET_LENGTH, FETCH_TIMEOUT_SECONDS, MAX_REDIRECTS
from quality_tracker.models.model_fetch import FetchErrorType, FetchResult

logger = logging.getLogger(__name__)


class ReportFetcher:
    """Fetches and decodes report documents.

    Every failure is reported through FetchResult rather than raised, and no
    request is retried.
    """

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        strict: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize ReportFetcher.

        Args:
            timeout: Request timeout in seconds (default: 25)
            strict: Also require a top-level 'files' object in the report
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.strict = strict
        self.transport = transport

    def _build_headers(self, token: str) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _decode_report(self, body: str) -> tuple[dict[str, Any] | None, str | None]:
        """Decode a response body into a report object.

        Returns:
            (report, None) on success, (None, reason) otherwise.
        """
        if not body.strip():
            return None, "Empty response body"

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            return None, f"Invalid JSON: {e.msg}"

        if not isinstance(data, dict):
            return None, f"Report must be a JSON object, got {type(data).__name__}"

        if self.strict and not isinstance(data.get("files"), dict):
            return None, "Report has no 'files' object"

        return data, None

    async def fetch(self, url: str, token: str = "") -> FetchResult:
        """Fetch a report.

        Args:
            url: Absolute URL of the JSON report
            token: Optional bearer token

        Returns:
            FetchResult with the decoded report on success, or the error
            classification, status code and body snippet on failure
        """
        start_time = time.monotonic()
        logger.debug(f"Fetching report: {url}")

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self._build_headers(token),
                transport=self.transport,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            logger.warning(f"Fetch timed out after {self.timeout}s: {url}")
            return FetchResult(
                success=False,
                url=url,
                fetched_at=datetime.now(UTC),
                error=f"Request timed out: {e}",
                error_type=FetchErrorType.TRANSPORT,
                duration_seconds=time.monotonic() - start_time,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Fetch failed for {url}: {e}")
            return FetchResult(
                success=False,
                url=url,
                fetched_at=datetime.now(UTC),
                error=f"Fetch failed: {e}",
                error_type=FetchErrorType.TRANSPORT,
                duration_seconds=time.monotonic() - start_time,
            )

        duration = time.monotonic() - start_time
        body = response.text

        if response.status_code != 200:
            logger.warning(f"Fetch failed for {url}: HTTP {response.status_code}")
            return FetchResult(
                success=False,
                url=url,
                fetched_at=datetime.now(UTC),
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
                error_type=FetchErrorType.HTTP_STATUS,
                body_snippet=body[:BODY_SNIPPET_LENGTH],
                duration_seconds=duration,
            )

        report, reason = self._decode_report(body)
        if report is None:
            logger.warning(f"Malformed report from {url}: {reason}")
            return FetchResult(
                success=False,
                url=url,
                fetched_at=datetime.now(UTC),
                status_code=response.status_code,
                error=f"Malformed report: {reason}",
                error_type=FetchErrorType.MALFORMED_REPORT,
                body_snippet=body[:BODY_SNIPPET_LENGTH],
                duration_seconds=duration,
            )

        logger.debug(f"Fetched report from {url} in {duration:.2f}s")
        return FetchResult(
            success=True,
            url=url,
            fetched_at=datetime.now(UTC),
            report=report,
            status_code=response.status_code,
            duration_seconds=duration,
        )
