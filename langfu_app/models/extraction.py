"""Web page vocabulary extraction models."""

from __future__ import annotations

from ..core.extensions import db
from .user import _iso, _utcnow


class WebExtraction(db.Model):
    """A fetched web page and the vocabulary extracted from it."""

    __tablename__ = 'web_extractions'

    extraction_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    url = db.Column(db.String(2048), nullable=False)
    title = db.Column(db.String(512), nullable=True)
    content = db.Column(db.Text, nullable=True)
    language = db.Column(db.String(20), nullable=False)
    level = db.Column(db.String(5), nullable=True)
    word_count = db.Column(db.Integer, default=0)
    custom_topic = db.Column(db.String(120), default='Web Extract')
    extracted_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    words = db.relationship(
        'ExtractedWord', backref='extraction', lazy=True, cascade='all, delete-orphan',
        order_by='ExtractedWord.extracted_word_id',
    )

    def to_dict(self) -> dict:
        return {
            'id': self.extraction_id,
            'title': self.title,
            'url': self.url,
            'language': self.language,
            'wordCount': self.word_count,
            'level': self.level,
            'extractedAt': _iso(self.extracted_at),
            'words': [word.to_dict() for word in self.words],
        }


class ExtractedWord(db.Model):
    """A candidate vocabulary item found in a web page."""

    __tablename__ = 'extracted_words'

    extracted_word_id = db.Column(db.Integer, primary_key=True)
    extraction_id = db.Column(
        db.Integer, db.ForeignKey('web_extractions.extraction_id', ondelete='CASCADE'), nullable=False
    )
    l2 = db.Column(db.String(255), nullable=False)
    l1 = db.Column(db.String(255), nullable=False)
    frequency = db.Column(db.Integer, default=0)
    difficulty = db.Column(db.Integer, default=1)
    level = db.Column(db.String(5), nullable=True)
    context = db.Column(db.Text, nullable=True)

    def to_dict(self) -> dict:
        # Prefixed id marks the word as not yet persisted in the vocabulary ledger
        return {
            'id': f'extracted-{self.extracted_word_id}',
            'l2': self.l2,
            'l1': self.l1,
            'frequency': self.frequency,
            'difficulty': self.difficulty,
            'level': self.level,
            'context': self.context,
            'isExtracted': True,
        }
