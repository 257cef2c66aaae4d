"""Vocabulary, example sentence and review-ledger models."""

from __future__ import annotations

from sqlalchemy.types import JSON

from ..core.extensions import db
from .user import _iso, _utcnow


class Word(db.Model):
    """A vocabulary item in one target language."""

    __tablename__ = 'words'

    word_id = db.Column(db.Integer, primary_key=True)
    language = db.Column(db.String(20), nullable=False, index=True)
    level = db.Column(db.String(5), nullable=False, default='A1')
    topic = db.Column(db.String(120), nullable=True, index=True)
    l2 = db.Column(db.String(255), nullable=False)  # target language
    l1 = db.Column(db.String(255), nullable=False)  # native language
    pos = db.Column(db.String(50), nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    frequency = db.Column(db.Integer, default=0)
    difficulty = db.Column(db.Integer, default=1)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    examples = db.relationship(
        'Example', backref='word', lazy=True, cascade='all, delete-orphan',
        order_by='Example.example_id',
    )
    histories = db.relationship(
        'WordHistory', backref='word', lazy='dynamic', cascade='all, delete-orphan'
    )

    __table_args__ = (
        db.Index('ix_words_language_l2', 'language', 'l2'),
    )

    def to_dict(self, include_examples: bool = False) -> dict:
        data = {
            'id': self.word_id,
            'language': self.language,
            'level': self.level,
            'topic': self.topic,
            'l2': self.l2,
            'l1': self.l1,
            'pos': self.pos,
            'gender': self.gender,
            'frequency': self.frequency,
            'difficulty': self.difficulty,
        }
        if include_examples:
            data['examples'] = [example.to_dict() for example in self.examples]
        return data


class Example(db.Model):
    """An example sentence for a word."""

    __tablename__ = 'examples'

    example_id = db.Column(db.Integer, primary_key=True)
    word_id = db.Column(db.Integer, db.ForeignKey('words.word_id', ondelete='CASCADE'), nullable=False)
    sentence = db.Column(db.Text, nullable=False)
    translation = db.Column(db.Text, nullable=True)

    def to_dict(self) -> dict:
        return {'sentence': self.sentence, 'translation': self.translation}


class WordHistory(db.Model):
    """Per-user, per-word spaced repetition ledger entry."""

    __tablename__ = 'word_history'

    history_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    word_id = db.Column(db.Integer, db.ForeignKey('words.word_id', ondelete='CASCADE'), nullable=False)

    review_count = db.Column(db.Integer, default=0, nullable=False)
    correct_count = db.Column(db.Integer, default=0, nullable=False)
    mastery_level = db.Column(db.Integer, default=0, nullable=False)
    last_review = db.Column(db.DateTime(timezone=True), nullable=True)
    next_review = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'word_id', name='uq_word_history_user_word'),
        db.Index('ix_word_history_due', 'user_id', 'next_review'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.history_id,
            'userId': self.user_id,
            'wordId': self.word_id,
            'reviewCount': self.review_count,
            'correctCount': self.correct_count,
            'masteryLevel': self.mastery_level,
            'lastReview': _iso(self.last_review),
            'nextReview': _iso(self.next_review),
        }


class VocabularySet(db.Model):
    """A named, importable bundle of vocabulary data."""

    __tablename__ = 'vocabulary_sets'

    set_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    language = db.Column(db.String(20), nullable=False)
    is_public = db.Column(db.Boolean, default=False, nullable=False)
    data = db.Column(JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self, include_data: bool = False) -> dict:
        from ..utils.json_columns import read_json_column, count_entries

        payload = read_json_column(self.data).resolve()
        result = {
            'id': self.set_id,
            'name': self.name,
            'description': self.description,
            'language': self.language,
            'isPublic': self.is_public,
            'wordCount': count_entries(payload),
            'createdAt': _iso(self.created_at),
        }
        if include_data:
            result['data'] = payload
        return result


class UserSentence(db.Model):
    """A sentence written by a learner for a word."""

    __tablename__ = 'user_sentences'

    sentence_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    word_id = db.Column(db.Integer, db.ForeignKey('words.word_id', ondelete='CASCADE'), nullable=False)
    sentence = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.sentence_id,
            'userId': self.user_id,
            'wordId': self.word_id,
            'sentence': self.sentence,
            'isCorrect': self.is_correct,
            'createdAt': _iso(self.created_at),
        }
