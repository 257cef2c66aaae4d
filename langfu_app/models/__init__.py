"""Database models package for LangFu."""

from ..core.extensions import db

from .enums import CEFRLevel, Language, LEVEL_DIFFICULTY
from .user import User, Progress
from .vocabulary import Word, Example, WordHistory, VocabularySet, UserSentence
from .story import Story
from .extraction import WebExtraction, ExtractedWord

__all__ = [
    'db',
    'CEFRLevel',
    'Language',
    'LEVEL_DIFFICULTY',
    'User',
    'Progress',
    'Word',
    'Example',
    'WordHistory',
    'VocabularySet',
    'UserSentence',
    'Story',
    'WebExtraction',
    'ExtractedWord',
]
