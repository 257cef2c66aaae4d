"""
Progress Aggregator - per-(user, language) learning statistics.

Totals are only ever changed through ``UPDATE ... SET col = col + n`` so
simultaneous session results for the same learner are all counted.
"""
from datetime import datetime, timezone
from typing import Optional

from flask import current_app
from sqlalchemy import select, update

from langfu_app.core.extensions import db
from langfu_app.core.signals import session_completed
from langfu_app.models import Progress
from langfu_app.utils.db_upsert import upsert


class ProgressService:
    """Service for reading and incrementing Progress rows."""

    @staticmethod
    def ensure_progress(user_id: int, language: str, commit: bool = True) -> None:
        """Create a zeroed Progress row for (user, language) if none exists."""
        now = datetime.now(timezone.utc)
        upsert(
            Progress,
            conflict_columns=('user_id', 'language'),
            insert_values={
                'user_id': user_id,
                'language': language,
                'words_learned': 0,
                'total_score': 0,
                'current_streak': 0,
                'last_practice': now,
                'created_at': now,
            },
        )
        if commit:
            db.session.commit()

    @staticmethod
    def get_progress(user_id: int, language: str) -> Optional[Progress]:
        stmt = (
            select(Progress)
            .where(Progress.user_id == user_id, Progress.language == language)
            .execution_options(populate_existing=True)
        )
        return db.session.scalars(stmt).first()

    @staticmethod
    def apply_session_result(
        user_id: int,
        language: str,
        words_learned_delta: int = 0,
        score_delta: int = 0,
        now: Optional[datetime] = None,
    ) -> Progress:
        """
        Add a finished practice session to the rollup.

        The streak grows by one per session regardless of the calendar gap
        since the previous one.
        """
        now = now or datetime.now(timezone.utc)
        words_learned_delta = words_learned_delta or 0
        score_delta = score_delta or 0
        try:
            ProgressService.ensure_progress(user_id, language, commit=False)
            db.session.execute(
                update(Progress)
                .where(Progress.user_id == user_id, Progress.language == language)
                .values(
                    words_learned=Progress.words_learned + words_learned_delta,
                    total_score=Progress.total_score + score_delta,
                    current_streak=Progress.current_streak + 1,
                    last_practice=now,
                )
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        progress = ProgressService.get_progress(user_id, language)
        current_app.logger.info(
            f"Session applied for user {user_id} ({language}): +{words_learned_delta} words, +{score_delta} score"
        )
        session_completed.send(
            current_app._get_current_object(),
            user_id=user_id,
            language=language,
            words_learned=words_learned_delta,
            score=score_delta,
        )
        return progress
