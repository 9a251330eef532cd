"""grep.app API utilities."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Tuple

import requests

from .types import ResultSet, SearchQuery

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://grep.app"
SEARCH_ENDPOINT = "/api/search"

MARK_BEGIN = "\033[32m"
RESET = "\033[0m"

_OPEN_MARK = "<mark"
_OPEN_MARK_RE = re.compile(r"<mark\b[^>]*>")
_CLOSE_MARK = "</mark>"
_TAG_RE = re.compile(r"<[^>]*>")


class GrepAppError(RuntimeError):
    """Base class for every failure that aborts a search run."""


class ConfigurationError(GrepAppError):
    """Invalid or missing configuration, detected before any request."""


class NetworkError(GrepAppError):
    """The request never produced an HTTP response."""


class ProtocolError(GrepAppError):
    """The service answered with a non-success status or an unreadable body."""


class SerializationError(GrepAppError):
    """The aggregated results could not be encoded."""


class GrepAppClient:
    """Thin client around the grep.app search endpoint."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = "grepapp-cli/0.1",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": user_agent,
            }
        )

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{SEARCH_ENDPOINT}"

    def build_params(self, page: int, query: SearchQuery) -> dict:
        """Return the query parameters for one page of ``query``."""
        params = {"q": query.query, "page": page}
        if query.use_regex:
            params["regexp"] = "true"
        elif query.whole_words:
            params["words"] = "true"
        if query.case_sensitive:
            params["case"] = "true"
        if query.repo_filter:
            params["f.repo.pattern"] = query.repo_filter
        if query.path_filter:
            params["f.path.pattern"] = query.path_filter
        if query.lang_filter:
            params["f.lang"] = query.lang_filter
        return params

    def fetch_page(self, page: int, query: SearchQuery) -> Tuple[ResultSet, int]:
        """Fetch one page and return its hits with the total match count."""
        params = self.build_params(page, query)
        try:
            response = self.session.get(self.search_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {self.search_url} failed: {exc}") from exc

        if response.status_code != 200:
            raise ProtocolError(f"HTTP {response.status_code} {response.url}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(f"Malformed JSON from {response.url}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ProtocolError(f"Unexpected response body from {response.url}")

        hits = _parse_hits(_raw_hits(payload))
        total = _total_count(payload)
        logger.debug("page %d: %d files, %d total matches", page, len(hits), total)
        return hits, total

    def close(self) -> None:
        self.session.close()


def process_snippet(snippet: str) -> List[str]:
    """Turn a highlighted HTML snippet into display lines.

    Only lines carrying a highlight are kept. Highlights become terminal
    color sequences and every other tag is removed.
    """
    lines: List[str] = []
    for line in snippet.split("\n"):
        if _OPEN_MARK not in line:
            continue
        line = _OPEN_MARK_RE.sub(MARK_BEGIN, line)
        # a tag cut off at the end of a truncated line has no closing ">"
        line = line.replace(_OPEN_MARK, MARK_BEGIN)
        line = line.replace(_CLOSE_MARK, RESET)
        line = _TAG_RE.sub("", line)
        line = line.replace(MARK_BEGIN, RESET + MARK_BEGIN)
        lines.append(line)
    return lines


def _parse_hits(items: Iterable[dict]) -> ResultSet:
    hits = ResultSet()
    for item in items:
        repo = _raw_field(item, "repo")
        path = _raw_field(item, "path")
        snippet = _field(_object(item, "content"), "snippet", str, "")
        hits.add_hit(repo, path)
        for line in process_snippet(snippet):
            hits.add_hit(repo, path, line, line)
    return hits


def _raw_hits(payload: dict) -> List[dict]:
    items = _field(_object(payload, "hits"), "hits", list, [])
    for item in items:
        if not isinstance(item, dict):
            raise ProtocolError(f"Unexpected response body: hit entry {item!r} is not an object")
    return items


def _raw_field(item: dict, name: str) -> str:
    return _field(_object(item, name), "raw", str, "")


def _total_count(payload: dict) -> int:
    count = _field(_object(payload, "facets"), "count", int, 0)
    if isinstance(count, bool):
        raise ProtocolError(f"Unexpected response body: invalid facet count {count!r}")
    return count


def _object(parent: dict, name: str) -> dict:
    return _field(parent, name, dict, {})


def _field(parent: dict, name: str, kind: type, default):
    """Return ``parent[name]`` checked against ``kind``; missing or null gives ``default``."""
    value = parent.get(name)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise ProtocolError(
            f"Unexpected response body: '{name}' should be {kind.__name__}, got {type(value).__name__}"
        )
    return value
