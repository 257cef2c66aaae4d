# langfu_app/modules/vocabulary/logics/extractor.py
"""Stateless text processing for web page vocabulary extraction."""

import html
import math
import re
from collections import Counter
from typing import List, Optional

from langfu_app.models import CEFRLevel, Language

MAX_KEYWORDS = 30
MIN_WORD_LENGTH = 3
MIN_LANGUAGE_HITS = 5
CONTENT_LIMIT = 10000
CONTEXT_BEFORE = 50
CONTEXT_AFTER = 100

GERMAN_MARKERS = (
    'der', 'die', 'das', 'und', 'ist', 'ich', 'ein', 'eine', 'haben', 'werden',
    'nicht', 'mit', 'auf', 'für', 'aber', 'nach', 'bei', 'über', 'unter', 'zwischen',
)
SPANISH_MARKERS = (
    'el', 'la', 'los', 'las', 'y', 'es', 'un', 'una', 'que', 'de',
    'en', 'por', 'para', 'con', 'pero', 'como', 'más', 'muy', 'todo', 'esta',
)

GERMAN_STOP_WORDS = frozenset(GERMAN_MARKERS + (
    'auch', 'noch', 'wird', 'sich', 'aus', 'von', 'dem', 'den', 'des', 'zur',
    'zum', 'als', 'wenn', 'nur', 'schon', 'sehr', 'durch', 'kann', 'war', 'sind', 'hat',
))
SPANISH_STOP_WORDS = frozenset(SPANISH_MARKERS + (
    'su', 'al', 'del', 'se', 'ha', 'son', 'está', 'han', 'hay', 'sido',
    'ser', 'tiene', 'puede', 'este', 'ese', 'eso',
))

_GERMAN_RE = re.compile(r'\b(?:' + '|'.join(GERMAN_MARKERS) + r')\b', re.IGNORECASE)
_SPANISH_RE = re.compile(r'\b(?:' + '|'.join(SPANISH_MARKERS) + r')\b', re.IGNORECASE)
_SCRIPT_RE = re.compile(r'<script\b[^>]*>.*?</script\s*>', re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r'<style\b[^>]*>.*?</style\s*>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'<[^>]+>')
_TITLE_RE = re.compile(r'<title[^>]*>([^<]+)</title>', re.IGNORECASE)
_SPLIT_RE = re.compile(r'[\s.,;:!?()\[\]{}\'"–—\-]+')
_LETTERS_RE = re.compile(r'^[a-zäöüáéíóúñß]+$', re.IGNORECASE)

# Upper bounds of the mean keyword length for each level
_LEVEL_THRESHOLDS = (
    (5, CEFRLevel.A1),
    (6, CEFRLevel.A2),
    (7, CEFRLevel.B1),
    (8, CEFRLevel.B2),
    (9, CEFRLevel.C1),
)


def html_to_text(markup: str) -> str:
    """Drop scripts, styles and tags, then collapse whitespace."""
    text = _SCRIPT_RE.sub('', markup or '')
    text = _STYLE_RE.sub('', text)
    text = _TAG_RE.sub(' ', text)
    text = html.unescape(text)
    return ' '.join(text.split())


def extract_title(markup: str) -> str:
    match = _TITLE_RE.search(markup or '')
    if not match:
        return 'Untitled'
    return html.unescape(match.group(1)).strip() or 'Untitled'


def detect_language(text: str) -> Optional[Language]:
    """German or Spanish by marker-word hits; None when neither clearly wins."""
    german = len(_GERMAN_RE.findall(text))
    spanish = len(_SPANISH_RE.findall(text))
    if german > spanish and german > MIN_LANGUAGE_HITS:
        return Language.GERMAN
    if spanish > german and spanish > MIN_LANGUAGE_HITS:
        return Language.SPANISH
    return None


def extract_keywords(text: str, language: Language, limit: int = MAX_KEYWORDS) -> List[str]:
    """Most frequent non-stop-words, lower-cased, ties in order of first appearance."""
    stop_words = GERMAN_STOP_WORDS if language == Language.GERMAN else SPANISH_STOP_WORDS
    counts = Counter()
    for token in _SPLIT_RE.split(_TAG_RE.sub(' ', text)):
        if len(token) < MIN_WORD_LENGTH:
            continue
        word = token.lower()
        if word in stop_words or not _LETTERS_RE.match(word):
            continue
        counts[word] += 1
    return [word for word, _ in sorted(counts.items(), key=lambda item: -item[1])[:limit]]


def estimate_level(words: List[str]) -> str:
    if not words:
        return CEFRLevel.A1.value
    average = sum(len(word) for word in words) / len(words)
    for bound, level in _LEVEL_THRESHOLDS:
        if average < bound:
            return level.value
    return CEFRLevel.C2.value


def rank_difficulty(index: int) -> int:
    """1 for the ten most frequent words, 2 for the next ten, and so on."""
    return math.ceil((index + 1) / 10)


def context_snippet(text: str, word: str) -> str:
    position = text.lower().find(word.lower())
    if position < 0:
        position = 0
    return text[max(0, position - CONTEXT_BEFORE):position + CONTEXT_AFTER]
