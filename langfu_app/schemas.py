"""Request and JSON-column schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models.enums import Language


class ExampleSentence(BaseModel):
    sentence: str = ''
    translation: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class KeywordItem(BaseModel):
    """A vocabulary entry attached to a story."""

    l2: str = ''
    l1: Optional[str] = None
    pos: Optional[str] = None
    synonyms: List[str] = Field(default_factory=list)
    examples: List[ExampleSentence] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


# --- Auth ---

class CredentialsRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class RegisterRequest(CredentialsRequest):
    name: Optional[str] = None


# --- Words ---

class TrackWordRequest(BaseModel):
    wordId: int
    correct: bool = False


class BatchWordEntry(BaseModel):
    id: Optional[Union[int, str]] = None
    isExtracted: bool = False

    model_config = ConfigDict(extra="ignore")


class TrackBatchRequest(BaseModel):
    words: List[BatchWordEntry]
    correct: bool = False


class SaveSentenceRequest(BaseModel):
    wordId: int
    sentence: str

    @field_validator('sentence')
    @classmethod
    def sentence_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('sentence must not be empty')
        return value


# --- Progress & settings ---

class ProgressUpdateRequest(BaseModel):
    wordsLearned: int = 0
    score: int = 0

    @field_validator('wordsLearned', 'score', mode='before')
    @classmethod
    def none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class SettingsUpdateRequest(BaseModel):
    name: Optional[str] = None
    currentLanguage: Language
    dailyGoal: Optional[int] = Field(default=None, ge=1, le=500)

    @field_validator('currentLanguage', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


# --- Library ---

class CreateStoryRequest(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    language: Language
    topic: Optional[str] = None
    level: Optional[str] = None
    prompt: Optional[str] = None
    keywords: Optional[List[Union[str, KeywordItem]]] = None
    words: Optional[List[Union[str, KeywordItem]]] = None

    @field_validator('language', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class UpdateStoryRequest(BaseModel):
    title: Optional[str] = None
    topic: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    level: Optional[str] = None


class BulkDeleteStoriesRequest(BaseModel):
    storyIds: List[int] = Field(min_length=1)


class AddWordEntry(BaseModel):
    l2: str = Field(min_length=1)
    l1: str = Field(min_length=1)
    pos: Optional[str] = None
    examples: List[ExampleSentence] = Field(default_factory=list)


class AddWordsRequest(BaseModel):
    topic: Optional[str] = None
    level: str = 'A1'
    language: Language
    words: List[AddWordEntry] = Field(min_length=1)

    @field_validator('language', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


# --- Vocabulary ---

class LoadVocabularyRequest(BaseModel):
    # {level: {topic: [{de|es, en, pos?, gender?}]}}
    vocabulary: Dict[str, Any]


class ExtractRequest(BaseModel):
    url: str = Field(min_length=1)

    @field_validator('url')
    @classmethod
    def http_url(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(('http://', 'https://')):
            raise ValueError('url must start with http:// or https://')
        return value


class ExtractedWordEntry(BaseModel):
    l2: str = Field(min_length=1)
    l1: str = Field(min_length=1)
    level: Optional[str] = None
    pos: Optional[str] = None
    gender: Optional[str] = None
    context: Optional[str] = None
    frequency: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class SaveExtractedRequest(BaseModel):
    extractionId: Union[int, str]
    title: Optional[str] = None
    words: List[ExtractedWordEntry]


# --- AI ---

class ExamplesRequest(BaseModel):
    word: str = Field(min_length=1)
    translation: str = ''
    language: Language
    pos: Optional[str] = None

    @field_validator('language', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class TopicPackageRequest(BaseModel):
    topic: str = Field(min_length=1)
    level: str = Field(min_length=2)
    language: Language
    numKeywords: int = Field(default=10, ge=1, le=30)

    @field_validator('language', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class ValidateSentenceRequest(BaseModel):
    sentence: str
    word: str = Field(min_length=1)
    language: Language

    @field_validator('language', mode='before')
    @classmethod
    def normalize_language(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value
