from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence
from urllib.parse import urlparse

import requests

from ..utils.logging import get_logger

logger = get_logger("seo.fetchers.http")

DEFAULT_TIMEOUT = 15.0

USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
)

_BASE_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
}


@dataclass(slots=True, frozen=True)
class FetchFailed:
    """Why a fetch produced no body. Returned, never raised."""

    url: str
    cause: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        status = f" status={self.status_code}" if self.status_code is not None else ""
        return f"FetchFailed(url={self.url}{status}): {self.cause}"


@dataclass(slots=True, frozen=True)
class FetchResult:
    url: str
    body: Optional[str] = None
    error: Optional[FetchFailed] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.body is not None


class FetchClient:
    """Polite HTTP GET.

    Every call picks a user agent at random from the pool and sends browser-like
    Accept headers. Failures come back as ``FetchResult.error``; there are no
    retries at this layer.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agents: Sequence[str] = USER_AGENTS,
        rng: Optional[random.Random] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not user_agents:
            raise ValueError("FetchClient needs at least one user agent")
        self.timeout = timeout
        self.user_agents = tuple(user_agents)
        self.rng = rng or random.Random()
        self.session = session or requests.Session()

    def _headers(self, extra: Optional[Mapping[str, str]]) -> Dict[str, str]:
        headers = {"User-Agent": self.rng.choice(self.user_agents), **_BASE_HEADERS}
        if extra:
            headers.update(extra)
        return headers

    def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> FetchResult:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return FetchResult(url=url, error=FetchFailed(url=url, cause="invalid URL"))

        logger.debug("GET %s", url)
        try:
            resp = self.session.get(
                url,
                headers=self._headers(headers),
                timeout=timeout if timeout is not None else self.timeout,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            logger.warning("Request error for %s: %s", url, exc)
            return FetchResult(url=url, error=FetchFailed(url=url, cause=str(exc)))

        if not 200 <= resp.status_code < 300:
            logger.warning("HTTP fetch failed (%s): %s", resp.status_code, url)
            return FetchResult(
                url=url,
                error=FetchFailed(url=url, cause=f"HTTP {resp.status_code}", status_code=resp.status_code),
            )
        if "charset=" not in resp.headers.get("Content-Type", "").lower():
            # requests falls back to ISO-8859-1 for text/* without a charset
            resp.encoding = resp.apparent_encoding
        return FetchResult(url=url, body=resp.text)

    def close(self) -> None:
        self.session.close()
