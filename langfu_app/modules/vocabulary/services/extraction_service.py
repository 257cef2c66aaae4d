"""
Extraction Service - turns a web page into candidate vocabulary.

Fetching uses ``requests``; everything after the download is pure text
processing from ``logics.extractor``.
"""
from typing import List

import requests
from flask import current_app
from sqlalchemy import select

from langfu_app.core.error_handlers import NotFoundError, ValidationError
from langfu_app.core.extensions import db
from langfu_app.core.signals import content_created, content_deleted
from langfu_app.models import ExtractedWord, WebExtraction
from ..extraction_store import ExtractedVocabularyStore
from ..logics.extractor import (
    CONTENT_LIMIT,
    MAX_KEYWORDS,
    context_snippet,
    detect_language,
    estimate_level,
    extract_keywords,
    extract_title,
    html_to_text,
    rank_difficulty,
)

DEFAULT_TOPIC = 'Web Extract'


class ExtractionService:

    @staticmethod
    def fetch_page(url: str) -> str:
        headers = {'User-Agent': current_app.config.get('EXTRACT_USER_AGENT', 'Mozilla/5.0')}
        try:
            response = requests.get(url, headers=headers, timeout=current_app.config.get('EXTRACT_FETCH_TIMEOUT', 15))
            response.raise_for_status()
        except requests.RequestException as exc:
            current_app.logger.warning(f"Failed to fetch {url}: {exc}")
            raise ValidationError('Failed to fetch webpage')
        return response.text

    @staticmethod
    def extract_from_url(user_id: int, url: str) -> WebExtraction:
        """
        Fetch ``url``, detect its language and store the top keywords.

        Raises:
            ValidationError: the page could not be fetched or is neither
                German nor Spanish.
        """
        markup = ExtractionService.fetch_page(url)
        text = html_to_text(markup)
        language = detect_language(text)
        if language is None:
            raise ValidationError('Could not detect German or Spanish language in the content')

        keywords = extract_keywords(text, language)
        level = estimate_level(keywords)

        extraction = WebExtraction(
            user_id=user_id,
            url=url,
            title=extract_title(markup),
            content=text[:CONTENT_LIMIT],
            language=language.value,
            level=level,
            word_count=len(keywords),
            custom_topic=DEFAULT_TOPIC,
        )
        for index, word in enumerate(keywords):
            extraction.words.append(ExtractedWord(
                l2=word,
                l1=f'[Translation of {word}]',
                frequency=MAX_KEYWORDS - index,
                difficulty=rank_difficulty(index),
                level=level,
                context=context_snippet(text, word),
            ))

        db.session.add(extraction)
        db.session.commit()

        current_app.logger.info(
            f"Extraction {extraction.extraction_id}: {len(keywords)} {language.value} words from {url}"
        )
        content_created.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='extraction',
            content_id=extraction.extraction_id,
            items_count=len(keywords),
        )
        return extraction

    @staticmethod
    def list_extractions(user_id: int) -> List[WebExtraction]:
        stmt = (
            select(WebExtraction)
            .where(WebExtraction.user_id == user_id)
            .order_by(WebExtraction.extracted_at.desc(), WebExtraction.extraction_id.desc())
        )
        return list(db.session.scalars(stmt))

    @staticmethod
    def delete_extraction(user_id: int, extraction_id: int) -> None:
        extraction = db.session.get(WebExtraction, extraction_id)
        if extraction is None or extraction.user_id != user_id:
            raise NotFoundError('Extraction not found', resource='extraction')
        db.session.delete(extraction)
        db.session.commit()
        content_deleted.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='extraction',
            content_id=extraction_id,
        )

    @staticmethod
    def delete_optimistically(store: ExtractedVocabularyStore, user_id: int, extraction_id: int) -> None:
        """Drop the entry from ``store`` first and put it back if the delete fails."""
        removed = store.remove_tentatively(extraction_id)
        try:
            ExtractionService.delete_extraction(user_id, extraction_id)
        except Exception:
            db.session.rollback()
            store.rollback(removed)
            raise
