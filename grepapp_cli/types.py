"""Core dataclasses for queries and aggregated results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

HitKey = Tuple[str, str]


@dataclass(slots=True)
class SearchQuery:
    """Represents a single grep.app search with its flags and filters."""

    query: str
    case_sensitive: bool = False
    use_regex: bool = False
    whole_words: bool = False
    repo_filter: str = ""
    path_filter: str = ""
    lang_filter: str = ""

    @property
    def has_mode_conflict(self) -> bool:
        return self.use_regex and self.whole_words


@dataclass(slots=True)
class Hit:
    """One matched file and the display lines matched in it."""

    repo: str
    path: str
    lines: Dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> HitKey:
        return (self.repo, self.path)


class ResultSet:
    """Insertion-ordered collection of hits, unique per (repo, path).

    Lines are keyed by their own text, so identical lines within one file
    collapse into a single entry.
    """

    def __init__(self) -> None:
        self._hits: Dict[HitKey, Hit] = {}

    def add_hit(self, repo: str, path: str, line_key: str = "", line_text: str = "") -> Hit:
        """Register ``(repo, path)`` and, when ``line_key`` is set, store the line."""
        hit = self._hits.get((repo, path))
        if hit is None:
            hit = Hit(repo, path)
            self._hits[hit.key] = hit
        if line_key:
            hit.lines[line_key] = line_text
        return hit

    def merge(self, other: "ResultSet") -> List[HitKey]:
        """Fold every hit of ``other`` into this set.

        Returns the keys that were not present before the merge.
        """
        added: List[HitKey] = []
        for hit in other:
            if hit.key not in self._hits:
                added.append(hit.key)
            self.add_hit(hit.repo, hit.path)
            for line_key, line_text in hit.lines.items():
                self.add_hit(hit.repo, hit.path, line_key, line_text)
        return added

    def get(self, repo: str, path: str) -> Hit | None:
        return self._hits.get((repo, path))

    def keys(self) -> List[HitKey]:
        return list(self._hits)

    def __contains__(self, key: object) -> bool:
        return key in self._hits

    def __iter__(self) -> Iterator[Hit]:
        return iter(list(self._hits.values()))

    def __len__(self) -> int:
        return len(self._hits)

    def __repr__(self) -> str:
        return f"ResultSet({len(self._hits)} hits)"
