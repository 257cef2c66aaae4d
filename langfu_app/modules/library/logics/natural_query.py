"""Turns free-text library questions ("German A1 food words") into search options."""

import re
from dataclasses import dataclass
from typing import Optional

TOPIC_KEYWORDS = (
    'bicycle', 'bike', 'cycling', 'travel', 'traveling', 'transport',
    'transportation', 'food', 'drink', 'weather', 'family', 'work', 'school',
    'hobby', 'sport', 'house', 'home', 'city', 'nature', 'animal',
    'technology', 'computer', 'music', 'art', 'culture', 'holiday',
    'vacation', 'shopping', 'clothes',
)

_GERMAN_RE = re.compile(r'german|deutsch|\U0001F1E9\U0001F1EA', re.IGNORECASE)
_SPANISH_RE = re.compile(r'spanish|español|\U0001F1EA\U0001F1F8', re.IGNORECASE)
_LEVEL_RE = re.compile(r'\b(A1|A2|B1|B2|C1|C2)\b', re.IGNORECASE)
_TOPICS_QUESTION_RE = re.compile(
    r'\b(list|show|get|have|my)\s+(all\s+)?(german|spanish)?\s*(language\s+)?topics?\b', re.IGNORECASE
)
_STATS_QUESTION_RE = re.compile(r'\bhow many\b', re.IGNORECASE)
_LANGUAGE_LEVEL_WORDS_RE = re.compile(r'\b(german|spanish|deutsch|español|A1|A2|B1|B2|C1|C2)\b', re.IGNORECASE)
_FILLER_WORDS_RE = re.compile(
    r'\b(list|show|find|search|get|have|any|all|my|topics?|words?|stories?|related|about|language)\b',
    re.IGNORECASE,
)


@dataclass
class SearchOptions:
    query: Optional[str] = None
    language: Optional[str] = None
    level: Optional[str] = None
    topic: Optional[str] = None
    user_id: Optional[int] = None
    limit: int = 100
    include_examples: bool = False

    def to_dict(self) -> dict:
        return {
            'query': self.query,
            'language': self.language,
            'level': self.level,
            'topic': self.topic,
        }


def parse_natural_query(query: str) -> SearchOptions:
    """Detect language, CEFR level, a topic keyword and the remaining search terms."""
    options = SearchOptions()
    if not query:
        return options

    if _GERMAN_RE.search(query):
        options.language = 'GERMAN'
    elif _SPANISH_RE.search(query):
        options.language = 'SPANISH'

    level = _LEVEL_RE.search(query)
    if level:
        options.level = level.group(1).upper()

    # Questions about topics or counts are answered by the statistics alone
    if _TOPICS_QUESTION_RE.search(query) or _STATS_QUESTION_RE.search(query):
        return options

    lowered = query.lower()
    for keyword in TOPIC_KEYWORDS:
        if keyword in lowered:
            options.topic = keyword
            break

    residual = _FILLER_WORDS_RE.sub('', _LANGUAGE_LEVEL_WORDS_RE.sub('', query))
    residual = ' '.join(residual.split())
    if len(residual) > 2:
        options.query = residual
    return options
