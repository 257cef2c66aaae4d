"""
Keyword highlighting for story text.

Keywords are matched longest first as whole words, case-insensitively.
Each match is parked behind a placeholder token until every keyword has been
processed, so a shorter keyword can never re-match inside markup produced for
a longer one. The surrounding text and the markup are HTML-escaped.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

# Private-use code points never occur in keywords, so placeholders are inert
_PLACEHOLDER_OPEN = '\ue000'
_PLACEHOLDER_CLOSE = '\ue001'
_PLACEHOLDER_BASE = 0xE100
_PLACEHOLDER_RE = re.compile(f'{_PLACEHOLDER_OPEN}(.){_PLACEHOLDER_CLOSE}', re.DOTALL)


@dataclass(frozen=True)
class Highlight:
    keyword: str
    translation: Optional[str]
    matched: str


@dataclass
class HighlightResult:
    html: str
    highlights: List[Highlight] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.highlights)

    @property
    def matched_keywords(self) -> List[str]:
        seen = []
        for item in self.highlights:
            if item.keyword not in seen:
                seen.append(item.keyword)
        return seen


def _normalize(keyword) -> Tuple[str, Optional[str]]:
    """Accept plain strings, dicts and objects exposing ``l2``/``l1``."""
    if isinstance(keyword, str):
        return keyword.strip(), None
    if isinstance(keyword, dict):
        return (keyword.get('l2') or '').strip(), keyword.get('l1')
    return (getattr(keyword, 'l2', None) or '').strip(), getattr(keyword, 'l1', None)


def _keyword_pattern(keyword: str) -> re.Pattern:
    """Whole-word match; the boundary applies only on sides where the keyword has a word character."""
    start = r'(?<!\w)' if re.match(r'\w', keyword[0]) else ''
    end = r'(?!\w)' if re.match(r'\w', keyword[-1]) else ''
    return re.compile(start + re.escape(keyword) + end, re.IGNORECASE)


def _markup(keyword: str, translation: Optional[str], matched: str) -> str:
    return (
        '<span class="keyword" data-keyword="{}" data-translation="{}">{}</span>'.format(
            html.escape(keyword, quote=True),
            html.escape(translation or '', quote=True),
            html.escape(matched, quote=False),
        )
    )


def highlight_keywords(text: str, keywords: Iterable, limit: Optional[int] = None) -> HighlightResult:
    """
    Wrap every whole-word occurrence of the keywords in ``<span class="keyword">``.

    Args:
        text: plain story text.
        keywords: strings, dicts or KeywordItem objects with ``l2`` (and ``l1``).
        limit: only the ``limit`` longest keywords are considered.

    Keywords without ``l2`` or without a match are skipped.
    """
    if not text:
        return HighlightResult(html='')

    entries = [entry for entry in (_normalize(k) for k in keywords or []) if entry[0]]
    entries.sort(key=lambda entry: len(entry[0]), reverse=True)
    if limit is not None:
        entries = entries[:limit]

    parked: List[Tuple[str, Highlight]] = []

    def park(keyword: str, translation: Optional[str]):
        def replace(match):
            index = len(parked)
            highlight = Highlight(keyword=keyword, translation=translation, matched=match.group(0))
            parked.append((_markup(keyword, translation, match.group(0)), highlight))
            return f'{_PLACEHOLDER_OPEN}{chr(_PLACEHOLDER_BASE + index)}{_PLACEHOLDER_CLOSE}'
        return replace

    processed = text
    for keyword, translation in entries:
        pattern = _keyword_pattern(keyword)
        processed = pattern.sub(park(keyword, translation), processed)

    escaped = html.escape(processed, quote=False)
    rendered = _PLACEHOLDER_RE.sub(
        lambda match: parked[ord(match.group(1)) - _PLACEHOLDER_BASE][0], escaped
    )

    # Report highlights in reading order
    order = [ord(match.group(1)) - _PLACEHOLDER_BASE for match in _PLACEHOLDER_RE.finditer(escaped)]
    return HighlightResult(html=rendered, highlights=[parked[i][1] for i in order])
