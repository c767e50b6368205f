"""
Document retrieval for mapped scrapers.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

import requests

from app.scraping.config.models import RequestOptions, ScrapingSettings
from app.scraping.errors import FetchError
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class Fetcher(Protocol):
    """
    Retrieves one document body.
    """

    def fetch(self, url: str, request: RequestOptions | None = None) -> bytes:
        """
        Return the response body or raise FetchError.
        """


class HTTPFetcher:
    """
    `requests`-based fetcher with header, cookie and proxy support.

    Retryable HTTP statuses and transport errors are retried with
    exponential backoff up to `settings.max_retries` times.
    """

    def __init__(
        self,
        *,
        settings: ScrapingSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    def fetch(self, url: str, request: RequestOptions | None = None) -> bytes:
        request = request or RequestOptions()
        headers = {"User-Agent": self.settings.user_agent, **request.headers}
        proxies = None
        if self.settings.proxy_url:
            proxies = {"http": self.settings.proxy_url, "https": self.settings.proxy_url}

        response = self._request_with_retry(
            url,
            headers=headers,
            cookies=dict(request.cookies),
            proxies=proxies,
        )
        log_event(
            logger,
            logging.INFO,
            "document_fetched",
            url=url,
            status_code=response.status_code,
            size=len(response.content),
        )
        return response.content

    def _request_with_retry(
        self,
        url: str,
        *,
        headers: dict[str, str],
        cookies: dict[str, str],
        proxies: dict[str, str] | None,
    ) -> requests.Response:
        last_error: Exception | None = None
        status_code: int | None = None

        for attempt in range(self.settings.max_retries + 1):
            try:
                response = self.session.get(
                    url,
                    headers=headers,
                    cookies=cookies,
                    proxies=proxies,
                    timeout=self.settings.timeout_seconds,
                    allow_redirects=True,
                )
                status_code = response.status_code
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable status={response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as exc:
                last_error = exc
                if isinstance(exc, requests.HTTPError):
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise FetchError(
                            f"HTTP {status_code} fetching {url}",
                            url=url,
                            status_code=status_code,
                        ) from exc
            except requests.RequestException as exc:
                raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

            if attempt >= self.settings.max_retries:
                break

            backoff_seconds = self.settings.backoff_initial_seconds * (
                self.settings.backoff_multiplier**attempt
            )
            log_event(
                logger,
                logging.WARNING,
                "fetch_retry_scheduled",
                url=url,
                attempt=attempt + 1,
                backoff_seconds=backoff_seconds,
                error=str(last_error),
            )
            time.sleep(backoff_seconds)

        raise FetchError(
            f"Failed to fetch {url} after retries: {last_error}",
            url=url,
            status_code=status_code,
        )
