"""User and per-language progress models."""

from __future__ import annotations

from datetime import datetime, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.extensions import db
from .enums import Language


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    """Application user model."""

    __tablename__ = 'users'

    DEFAULT_DAILY_GOAL = 10

    user_id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(120), nullable=True)
    current_language = db.Column(db.String(20), default=Language.GERMAN.value, nullable=False)
    daily_goal = db.Column(db.Integer, default=DEFAULT_DAILY_GOAL, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    progress_records = db.relationship(
        'Progress', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )
    word_histories = db.relationship(
        'WordHistory', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )
    stories = db.relationship(
        'Story', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )
    sentences = db.relationship(
        'UserSentence', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )
    extractions = db.relationship(
        'WebExtraction', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            'id': self.user_id,
            'email': self.email,
            'name': self.name,
            'currentLanguage': self.current_language,
            'dailyGoal': self.daily_goal,
        }


class Progress(db.Model):
    """Cumulative learning statistics of one user in one language."""

    __tablename__ = 'progress'

    progress_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    language = db.Column(db.String(20), nullable=False)

    words_learned = db.Column(db.Integer, default=0, nullable=False)
    total_score = db.Column(db.Integer, default=0, nullable=False)
    current_streak = db.Column(db.Integer, default=0, nullable=False)
    last_practice = db.Column(db.DateTime(timezone=True), default=_utcnow)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    __table_args__ = (db.UniqueConstraint('user_id', 'language', name='uq_progress_user_language'),)

    def to_dict(self) -> dict:
        return {
            'id': self.progress_id,
            'userId': self.user_id,
            'language': self.language,
            'wordsLearned': self.words_learned,
            'totalScore': self.total_score,
            'currentStreak': self.current_streak,
            'lastPractice': _iso(self.last_practice),
        }
