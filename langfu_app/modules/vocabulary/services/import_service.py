"""
Import Service - bulk vocabulary loading and saving extracted words.
"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import select

from langfu_app.core.extensions import db
from langfu_app.core.signals import content_created
from langfu_app.models import LEVEL_DIFFICULTY, Example, Language, VocabularySet, Word
from langfu_app.modules.library.logics.natural_query import SearchOptions
from langfu_app.modules.library.services.library_search import LibrarySearchService
from langfu_app.modules.words.services.word_history_service import WordHistoryService
from langfu_app.schemas import ExtractedWordEntry

CUSTOM_TOPIC = 'Custom Vocabulary'
DEFAULT_EXTRACTED_LEVEL = 'B1'
MAX_REPORTED_ERRORS = 10

# Import field name -> language of the l2 text
LANGUAGE_FIELDS = (('de', Language.GERMAN), ('es', Language.SPANISH))


def _describe(entry: Any) -> str:
    try:
        return json.dumps(entry, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(entry)


def _parse_entry(entry: Any) -> Tuple[Optional[Language], Optional[str], Optional[str]]:
    if not isinstance(entry, dict):
        return None, None, None
    for field_name, language in LANGUAGE_FIELDS:
        if field_name in entry:
            return language, entry.get(field_name), entry.get('en')
    return None, None, None


class ImportService:

    @staticmethod
    def load_vocabulary(user_id: int, language: str, vocabulary: Dict[str, Any]) -> Tuple[int, List[str]]:
        """
        Create the words of a ``{level: {topic: [entries]}}`` payload.

        Words already present for (language, l2, level, topic) are skipped.
        Bad entries are reported, not fatal. The payload itself is kept as a
        private VocabularySet.

        Returns:
            (number of words created, error messages)
        """
        created = 0
        errors = []

        for level, topics in vocabulary.items():
            if not isinstance(topics, dict):
                continue
            for topic, entries in topics.items():
                if not isinstance(entries, list):
                    continue
                for position, entry in enumerate(entries):
                    language_of_entry, l2, l1 = _parse_entry(entry)
                    if language_of_entry is None:
                        errors.append(f'Word missing language field (de/es): {_describe(entry)}')
                        continue
                    if not isinstance(l2, str) or not isinstance(l1, str) or not l2.strip() or not l1.strip():
                        errors.append(f'Word missing required fields: {_describe(entry)}')
                        continue

                    exists = db.session.scalars(
                        select(Word.word_id).where(
                            Word.language == language_of_entry.value,
                            Word.l2 == l2,
                            Word.level == level,
                            Word.topic == topic,
                        )
                    ).first()
                    if exists is not None:
                        continue

                    db.session.add(Word(
                        language=language_of_entry.value,
                        level=level,
                        topic=topic,
                        l2=l2,
                        l1=l1,
                        pos=entry.get('pos') or None,
                        gender=entry.get('gender') or None,
                        difficulty=LEVEL_DIFFICULTY.get(level, 1),
                        # Earlier entries of a topic rank as more frequent
                        frequency=len(entries) - position,
                    ))
                    db.session.flush()
                    created += 1

        vocab_set = VocabularySet(
            user_id=user_id,
            name=f"Imported Vocabulary - {datetime.now(timezone.utc):%Y-%m-%d}",
            description=f'Imported {created} words',
            language=language,
            is_public=False,
            data=vocabulary,
        )
        db.session.add(vocab_set)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Vocabulary import by user {user_id}: {created} created, {len(errors)} errors")
        content_created.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='vocabulary_set',
            content_id=vocab_set.set_id,
            items_count=created,
        )
        return created, errors[:MAX_REPORTED_ERRORS]

    @staticmethod
    def save_extracted(user_id: int, language: str, extraction_id, title: Optional[str],
                       words: List[ExtractedWordEntry]) -> Tuple[VocabularySet, int]:
        """
        Keep extracted words as a vocabulary set and as learnable words.

        Each word is found by (language, l2) or created under the custom
        topic; its context sentence becomes an example. The learner's first
        review of each word is due tomorrow.
        """
        now = datetime.now(timezone.utc)
        vocab_set = VocabularySet(
            user_id=user_id,
            name=title or 'Extracted Vocabulary',
            description=f'Vocabulary extracted from web content on {now:%Y-%m-%d}',
            language=language,
            is_public=False,
            data={
                'extractionId': extraction_id,
                'words': [
                    {
                        'l2': word.l2,
                        'l1': word.l1,
                        'level': word.level or DEFAULT_EXTRACTED_LEVEL,
                        'pos': word.pos,
                        'gender': word.gender,
                        'context': word.context,
                        'frequency': word.frequency,
                    }
                    for word in words
                ],
            },
        )
        due = now + timedelta(days=1)
        try:
            db.session.add(vocab_set)
            for entry in words:
                word = db.session.scalars(
                    select(Word).where(Word.language == language, Word.l2 == entry.l2)
                ).first()
                if word is None:
                    word = Word(
                        language=language,
                        level=entry.level or DEFAULT_EXTRACTED_LEVEL,
                        topic=CUSTOM_TOPIC,
                        l2=entry.l2,
                        l1=entry.l1,
                        pos=entry.pos,
                        gender=entry.gender,
                        frequency=entry.frequency or 1,
                    )
                    if entry.context:
                        word.examples.append(Example(sentence=entry.context))
                    db.session.add(word)
                    db.session.flush()
                WordHistoryService.ensure_membership(user_id, word.word_id, next_review=due)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        content_created.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='vocabulary_set',
            content_id=vocab_set.set_id,
            items_count=len(words),
        )
        return vocab_set, len(words)

    @staticmethod
    def list_sets(user_id: int, language: Optional[str] = None) -> List[dict]:
        """Public sets plus the learner's own."""
        return LibrarySearchService.search_vocabulary_sets(SearchOptions(user_id=user_id, language=language))
