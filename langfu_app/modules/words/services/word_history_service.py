"""
Word History Ledger - persists the per-user, per-word review record.

All counters are written as storage-level increments inside a single
upsert statement, so concurrent reviews of the same word never lose an
update.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from flask import current_app
from sqlalchemy import select

from langfu_app.core.error_handlers import ReferentialIntegrityError, ValidationError
from langfu_app.core.extensions import db
from langfu_app.core.signals import word_reviewed
from langfu_app.models import Word, WordHistory
from langfu_app.utils.db_upsert import upsert
from ..logics.review_scheduler import compute_next_review

EXTRACTED_ID_PREFIX = 'extracted-'


def is_trackable(entry) -> bool:
    """False for entries that point at a word not persisted in the ledger."""
    word_id = getattr(entry, 'id', None)
    if word_id is None or str(word_id).strip() in ('', '0'):
        return False
    if getattr(entry, 'isExtracted', False):
        return False
    return not str(word_id).startswith(EXTRACTED_ID_PREFIX)


class WordHistoryService:
    """Service for ledger reads and writes."""

    @staticmethod
    def _ensure_words_exist(word_ids: Sequence[int]) -> None:
        wanted = set(word_ids)
        if not wanted:
            return
        found = set(db.session.scalars(select(Word.word_id).where(Word.word_id.in_(wanted))))
        missing = wanted - found
        if missing:
            raise ReferentialIntegrityError(
                f"Word(s) {sorted(missing)} do not exist", resource='word'
            )

    @staticmethod
    def _apply_review(user_id: int, word_id: int, correct: bool, now: datetime) -> None:
        """Single-statement upsert of one review; does not commit."""
        next_review = compute_next_review(correct, now)
        increment = 1 if correct else 0
        upsert(
            WordHistory,
            conflict_columns=('user_id', 'word_id'),
            insert_values={
                'user_id': user_id,
                'word_id': word_id,
                'review_count': 1,
                'correct_count': increment,
                'mastery_level': increment,
                'last_review': now,
                'next_review': next_review,
                'created_at': now,
            },
            update_values={
                'review_count': WordHistory.review_count + 1,
                'correct_count': WordHistory.correct_count + increment,
                'mastery_level': WordHistory.mastery_level + increment,
                'last_review': now,
                'next_review': next_review,
            },
        )

    @staticmethod
    def get_entry(user_id: int, word_id: int) -> Optional[WordHistory]:
        """Fresh read of a ledger entry, bypassing the identity map."""
        stmt = (
            select(WordHistory)
            .where(WordHistory.user_id == user_id, WordHistory.word_id == word_id)
            .execution_options(populate_existing=True)
        )
        return db.session.scalars(stmt).first()

    @staticmethod
    def record_review(user_id: int, word_id: int, correct: bool, now: Optional[datetime] = None) -> WordHistory:
        """
        Record one review outcome for (user, word).

        Raises:
            ReferentialIntegrityError: the word does not exist.
        """
        now = now or datetime.now(timezone.utc)
        try:
            WordHistoryService._ensure_words_exist([word_id])
            WordHistoryService._apply_review(user_id, word_id, correct, now)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        entry = WordHistoryService.get_entry(user_id, word_id)
        word_reviewed.send(
            current_app._get_current_object(),
            user_id=user_id,
            word_id=word_id,
            correct=correct,
            review_count=entry.review_count,
            mastery_level=entry.mastery_level,
        )
        return entry

    @staticmethod
    def normalize_batch(items: Iterable) -> List[int]:
        """Drop transient entries and return the remaining ids as integers."""
        word_ids = []
        for item in items:
            if not is_trackable(item):
                continue
            try:
                word_ids.append(int(item.id))
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid word id: {item.id!r}", errors={'words': 'invalid id'})
        return word_ids

    @staticmethod
    def record_review_batch(user_id: int, items: Iterable, correct: bool, now: Optional[datetime] = None) -> int:
        """
        Record the same outcome for several words in one transaction.

        Transient entries (``extracted-`` ids or ``isExtracted``) are
        skipped and not counted. Either every remaining review is written or
        none is.
        """
        word_ids = WordHistoryService.normalize_batch(items)
        if not word_ids:
            return 0

        now = now or datetime.now(timezone.utc)
        try:
            WordHistoryService._ensure_words_exist(word_ids)
            for word_id in word_ids:
                WordHistoryService._apply_review(user_id, word_id, correct, now)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            "Tracked %s word review(s) for user %s (correct=%s)", len(word_ids), user_id, correct
        )
        for word_id in word_ids:
            word_reviewed.send(
                current_app._get_current_object(),
                user_id=user_id,
                word_id=word_id,
                correct=correct,
                review_count=None,
                mastery_level=None,
            )
        return len(word_ids)

    @staticmethod
    def ensure_membership(user_id: int, word_id: int, next_review: Optional[datetime] = None) -> None:
        """Add a word to the learner's collection without recording a review. Does not commit."""
        now = datetime.now(timezone.utc)
        upsert(
            WordHistory,
            conflict_columns=('user_id', 'word_id'),
            insert_values={
                'user_id': user_id,
                'word_id': word_id,
                'review_count': 0,
                'correct_count': 0,
                'mastery_level': 0,
                'next_review': next_review or now,
                'created_at': now,
            },
        )

    @staticmethod
    def due_words(user_id: int, language: str, limit: int = 20, now: Optional[datetime] = None) -> List[dict]:
        """Words of ``language`` whose next review is due, oldest due date first."""
        now = now or datetime.now(timezone.utc)
        rows = db.session.execute(
            select(Word, WordHistory)
            .join(WordHistory, WordHistory.word_id == Word.word_id)
            .where(
                WordHistory.user_id == user_id,
                Word.language == language,
                WordHistory.next_review <= now,
            )
            .order_by(WordHistory.next_review.asc(), Word.word_id.asc())
            .limit(limit)
        ).all()
        return [
            {**word.to_dict(include_examples=True), 'history': history.to_dict()}
            for word, history in rows
        ]
