"""Story library model."""

from __future__ import annotations

from flask import current_app
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.types import JSON

from ..core.extensions import db
from .user import _iso, _utcnow


class Story(db.Model):
    """A generated or imported short narrative with its vocabulary."""

    __tablename__ = 'stories'

    story_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    topic = db.Column(db.String(255), nullable=True)
    content = db.Column(db.Text, nullable=False)
    language = db.Column(db.String(20), nullable=False)
    level = db.Column(db.String(5), nullable=True)
    word_count = db.Column(db.Integer, default=0)
    summary = db.Column(db.Text, nullable=True)
    prompt = db.Column(db.Text, nullable=True)
    # List of keyword items: {l2, l1, pos, examples, synonyms}
    keywords = db.Column(JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def keyword_items(self):
        """Return the stored vocabulary as KeywordItem objects; unreadable entries are skipped."""
        from ..schemas import KeywordItem
        from ..utils.json_columns import read_json_column

        items = read_json_column(self.keywords).resolve()
        if not isinstance(items, list):
            return []
        result = []
        for raw in items:
            if isinstance(raw, str):
                raw = {'l2': raw}
            if not isinstance(raw, dict):
                continue
            raw = dict(raw)
            if raw.get('l2') is None:
                raw['l2'] = ''
            if isinstance(raw.get('examples'), list):
                raw['examples'] = [
                    {'sentence': example} if isinstance(example, str) else example
                    for example in raw['examples']
                ]
            try:
                result.append(KeywordItem.model_validate(raw))
            except PydanticValidationError as exc:
                current_app.logger.warning(
                    f"Story {self.story_id}: skipping unreadable keyword entry ({exc.error_count()} errors)"
                )
        return result

    def to_dict(self) -> dict:
        return {
            'id': self.story_id,
            'userId': self.user_id,
            'title': self.title,
            'topic': self.topic,
            'content': self.content,
            'language': self.language,
            'level': self.level,
            'wordCount': self.word_count,
            'summary': self.summary,
            'prompt': self.prompt,
            'keywords': [item.model_dump(exclude_none=True) for item in self.keyword_items()],
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def to_summary_dict(self) -> dict:
        return {
            'id': self.story_id,
            'title': self.title,
            'topic': self.topic,
            'language': self.language,
            'level': self.level,
            'wordCount': self.word_count,
            'summary': self.summary,
            'createdAt': _iso(self.created_at),
        }
