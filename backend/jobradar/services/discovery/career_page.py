"""
Career Page Locator - find where a company lists its jobs

Two strategies, tried in order:
    1. Path probing: HEAD well-known paths (/careers, /jobs, ...) under the
       homepage; the first one answering with status < 400 wins.
    2. Link scanning: GET the homepage, collect same-site anchors and pick the
       one whose URL carries the most career keywords (path hits weigh more).

Every network failure for an individual candidate is treated as "not found";
locate() itself never raises for network reasons.
"""

import logging
from typing import List, Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from jobradar.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

CAREER_PATHS = [
    "/careers",
    "/jobs",
    "/work-with-us",
    "/join-us",
    "/career",
    "/job",
    "/hiring",
    "/opportunities",
    "/open-positions",
]

CAREER_KEYWORDS = [
    "career",
    "careers",
    "job",
    "jobs",
    "hiring",
    "join",
    "work-with-us",
    "opportunities",
    "open-positions",
    "openings",
]

USER_AGENT = "Mozilla/5.0 (compatible; JobAgent/1.0)"


def normalize_homepage(url: str) -> str:
    """Prefix https:// when no scheme is given and drop trailing slashes."""
    normalized = url.strip()
    if not normalized.startswith("http"):
        normalized = f"https://{normalized}"
    return normalized.rstrip("/")


def resolve_href(href: str, base_url: str) -> Optional[str]:
    href = href.strip()
    if href.startswith("http"):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    if href.startswith("/"):
        return f"{base_url}{href}"
    if href.startswith("#") or href.startswith("javascript:") or href.startswith("mailto:"):
        return None
    return f"{base_url}/{href}"


def is_same_site(url: str, base_url: str) -> bool:
    try:
        host = (urlparse(url).hostname or "").lower()
        base_host = (urlparse(base_url).hostname or "").lower()
    except ValueError:
        return False
    if not host or not base_host:
        return False
    return host == base_host or host.endswith(f".{base_host}")


def score_link(url: str) -> int:
    """+1 for each career keyword in the URL, +2 more when it sits in the path."""
    lower = url.lower()
    try:
        path = urlparse(url).path.lower()
    except ValueError:
        path = ""

    score = 0
    for keyword in CAREER_KEYWORDS:
        if keyword in lower:
            score += 1
            if keyword in path:
                score += 2
    return score


def extract_links(html: str, base_url: str) -> List[str]:
    """Absolute same-site links in document order, de-duplicated."""
    soup = BeautifulSoup(html, "html.parser")
    seen = set()
    links = []
    for anchor in soup.find_all("a", href=True):
        url = resolve_href(anchor["href"], base_url)
        if not url or url in seen or not is_same_site(url, base_url):
            continue
        seen.add(url)
        links.append(url)
    return links


def best_career_link(links: List[str]) -> Optional[str]:
    best_url = None
    best_score = 0
    for link in links:
        score = score_link(link)
        # Strictly greater keeps the first link on ties
        if score > best_score:
            best_url, best_score = link, score
    return best_url


class CareerPageLocator:
    """Locate a company's career page from its homepage URL."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, **kwargs)

    async def locate(self, homepage_url: str) -> Optional[str]:
        base_url = normalize_homepage(homepage_url)

        found = await self._probe_paths(base_url)
        if found:
            logger.info(f"Found career page via common path: {found}")
            return found

        found = await self._scan_homepage(base_url)
        if found:
            logger.info(f"Found career page via link scan: {found}")
            return found

        logger.warning(f"No career page found for: {base_url}")
        return None

    async def _probe_paths(self, base_url: str) -> Optional[str]:
        async with self._client(
            timeout=settings.probe_timeout_seconds,
            follow_redirects=True,
            max_redirects=settings.max_redirects,
        ) as client:
            for path in CAREER_PATHS:
                url = f"{base_url}{path}"
                try:
                    response = await client.head(url)
                except httpx.HTTPError:
                    continue
                if response.status_code < 400:
                    return url
        return None

    async def _scan_homepage(self, base_url: str) -> Optional[str]:
        try:
            async with self._client(
                timeout=settings.page_fetch_timeout_seconds,
                follow_redirects=True,
                max_redirects=settings.max_redirects,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.get(base_url)
                response.raise_for_status()
                html = response.text
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch homepage {base_url}: {e}")
            return None

        return best_career_link(extract_links(html, base_url))
