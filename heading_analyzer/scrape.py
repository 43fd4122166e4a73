"""Page fetching and parsing utilities."""
from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENT = os.getenv("FETCH_USER_AGENT", "HeadingStructureAnalyzer/1.0")
# Public CORS proxy used by the browser version of the tool. Set to an empty
# string to request pages directly.
PROXY_TEMPLATE = os.getenv("FETCH_PROXY_TEMPLATE", "https://api.allorigins.win/raw?url={url}")


def request_timeout() -> Optional[float]:
    value = os.getenv("FETCH_TIMEOUT")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid FETCH_TIMEOUT value %r", value)
        return None


class InvalidURLError(ValueError):
    """Raised when the submitted URL cannot be analysed."""


class FetchError(RuntimeError):
    """Raised when the page could not be retrieved."""


def normalise_url(url: str | None) -> str:
    value = (url or "").strip()
    if not value:
        raise InvalidURLError("Please enter a URL.")
    if not value.startswith("http://") and not value.startswith("https://"):
        value = f"https://{value}"
    return value


def build_fetch_url(url: str) -> str:
    if not PROXY_TEMPLATE:
        return url
    return PROXY_TEMPLATE.format(url=quote(url, safe=""))


def fetch_html(url: str) -> str:
    """Fetch the raw HTML for ``url``.

    A single attempt is made; callers decide whether to ask again. Any
    transport failure or non-success status is raised as :class:`FetchError`
    with the underlying message attached.
    """

    target = build_fetch_url(url)
    try:
        response = requests.get(
            target,
            headers={"User-Agent": USER_AGENT},
            timeout=request_timeout(),
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        raise FetchError(str(exc)) from exc

    if not response.ok:
        logger.info("Fetching %s returned status %s", url, response.status_code)
        raise FetchError(f"Failed to fetch: {response.status_code} {response.reason}")

    return response.text


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup leniently; malformed input yields a partial tree rather than an error."""
    return BeautifulSoup(html, "html.parser")
