"""
Story Service - the learner's story library.

Every lookup is scoped to the owner: a story that does not exist and a
story owned by someone else both raise NotFoundError.
"""
from typing import Dict, Iterable, List, Optional

from flask import current_app
from sqlalchemy import delete, func, or_, select

from langfu_app.core.error_handlers import NotFoundError
from langfu_app.core.extensions import db
from langfu_app.core.signals import content_created, content_deleted
from langfu_app.models import Example, Story, Word
from langfu_app.modules.words.services.word_history_service import WordHistoryService
from langfu_app.schemas import AddWordsRequest, CreateStoryRequest, KeywordItem, UpdateStoryRequest
from ..logics.keyword_highlighter import highlight_keywords
from ..logics.text_stats import count_words, summarize

MAX_EXAMPLES_PER_WORD = 2


def _keyword_text(item) -> str:
    if isinstance(item, str):
        return item.strip()
    return (item.l2 or '').strip()


class StoryService:
    """Service for story CRUD and vocabulary resolution."""

    @staticmethod
    def get_owned_story(user_id: int, story_id: int) -> Story:
        story = db.session.get(Story, story_id)
        if story is None or story.user_id != user_id:
            raise NotFoundError('Story not found', resource='story')
        return story

    @staticmethod
    def lookup_words(language: str, keywords: Iterable[str]) -> Dict[str, Word]:
        """Existing Word rows for ``keywords`` keyed by lower-cased ``l2``."""
        keywords = [keyword for keyword in keywords if keyword]
        if not keywords:
            return {}
        lowered = {keyword.lower() for keyword in keywords}
        # SQLite lower() only folds ASCII, so also try the literal spellings
        variants = set(keywords) | lowered | {keyword.capitalize() for keyword in keywords}
        stmt = (
            select(Word)
            .where(Word.language == language, or_(Word.l2.in_(variants), func.lower(Word.l2).in_(lowered)))
            .order_by(Word.word_id.asc())
        )
        found = {}
        for word in db.session.scalars(stmt):
            key = word.l2.lower()
            if key in lowered and key not in found:
                found[key] = word
        return found

    @staticmethod
    def resolve_keywords(language: str, keyword_list) -> List[dict]:
        """Turn strings or keyword objects into stored keyword items with translations."""
        texts = [_keyword_text(item) for item in keyword_list or []]
        texts = [text for text in texts if text]
        known = StoryService.lookup_words(language, texts)

        items = []
        for text in texts:
            word = known.get(text.lower())
            item = KeywordItem(
                l2=text,
                l1=word.l1 if word else f'[Translation for {text} needed]',
                pos=word.pos if word else None,
            )
            items.append(item.model_dump(exclude_none=True))
        return items

    @staticmethod
    def create_story(user_id: int, payload: CreateStoryRequest) -> Story:
        keyword_list = payload.words or payload.keywords or []
        story = Story(
            user_id=user_id,
            title=payload.title,
            topic=payload.topic,
            content=payload.content,
            language=payload.language.value,
            level=payload.level,
            prompt=payload.prompt,
            word_count=count_words(payload.content),
            summary=summarize(payload.content),
            keywords=StoryService.resolve_keywords(payload.language.value, keyword_list),
        )
        db.session.add(story)
        db.session.commit()

        current_app.logger.info(f"Story {story.story_id} created for user {user_id}")
        content_created.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='story',
            content_id=story.story_id,
            items_count=len(story.keywords or []),
        )
        return story

    @staticmethod
    def render_story(user_id: int, story_id: int) -> dict:
        """Story data with the keywords highlighted in its content."""
        story = StoryService.get_owned_story(user_id, story_id)
        highlighted = highlight_keywords(story.content, story.keyword_items())
        data = story.to_dict()
        data['highlightedContent'] = highlighted.html
        data['highlightCount'] = highlighted.count
        return data

    @staticmethod
    def update_story(user_id: int, story_id: int, payload: UpdateStoryRequest) -> Story:
        story = StoryService.get_owned_story(user_id, story_id)
        changes = payload.model_dump(exclude_unset=True)
        for field_name in ('title', 'topic', 'summary', 'content', 'level'):
            if field_name in changes:
                setattr(story, field_name, changes[field_name])
        if changes.get('content') is not None:
            story.word_count = count_words(story.content)
        db.session.commit()
        return story

    @staticmethod
    def delete_story(user_id: int, story_id: int) -> None:
        story = StoryService.get_owned_story(user_id, story_id)
        db.session.delete(story)
        db.session.commit()
        content_deleted.send(
            current_app._get_current_object(), user_id=user_id, content_type='story', content_id=story_id
        )

    @staticmethod
    def duplicate_story(user_id: int, story_id: int) -> Story:
        original = StoryService.get_owned_story(user_id, story_id)
        copy = Story(
            user_id=user_id,
            title=f'{original.title} (Copy)',
            topic=original.topic,
            content=original.content,
            language=original.language,
            level=original.level,
            word_count=original.word_count,
            summary=original.summary,
            prompt=original.prompt,
            keywords=[item.model_dump(exclude_none=True) for item in original.keyword_items()],
        )
        try:
            db.session.add(copy)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        content_created.send(
            current_app._get_current_object(),
            user_id=user_id,
            content_type='story',
            content_id=copy.story_id,
            items_count=len(copy.keywords or []),
        )
        return copy

    @staticmethod
    def translate_story(user_id: int, story_id: int) -> List[dict]:
        """Refresh keyword translations and examples from the Word table."""
        story = StoryService.get_owned_story(user_id, story_id)
        items = story.keyword_items()
        if not items:
            return []

        known = StoryService.lookup_words(story.language, [item.l2 for item in items if item.l2])
        translated = []
        for item in items:
            if not item.l2:
                continue
            word = known.get(item.l2.lower())
            entry = {'l2': item.l2, 'l1': word.l1 if word else '[Translation needed]'}
            if word and word.pos:
                entry['pos'] = word.pos
            if word and word.examples:
                entry['examples'] = [
                    example.to_dict() for example in word.examples[:MAX_EXAMPLES_PER_WORD]
                ]
            if item.synonyms:
                entry['synonyms'] = item.synonyms
            translated.append(entry)

        story.keywords = translated
        db.session.commit()
        return translated

    @staticmethod
    def bulk_delete(user_id: int, story_ids: Iterable[int]) -> int:
        """Delete several stories at once; nothing is deleted unless all are owned."""
        wanted = set(story_ids)
        owned = set(db.session.scalars(
            select(Story.story_id).where(Story.story_id.in_(wanted), Story.user_id == user_id)
        ))
        if owned != wanted:
            raise NotFoundError('Some stories not found or unauthorized', resource='story')

        try:
            db.session.execute(
                delete(Story)
                .where(Story.story_id.in_(wanted), Story.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Bulk deleted {len(wanted)} stories for user {user_id}")
        for story_id in wanted:
            content_deleted.send(
                current_app._get_current_object(), user_id=user_id, content_type='story', content_id=story_id
            )
        return len(wanted)

    @staticmethod
    def find_or_create_word(language: str, l2: str, l1: str, topic: Optional[str], level: str,
                            pos: Optional[str] = None, **extra) -> Word:
        """Find a word by (language, l2, topic) or add it. Does not commit."""
        word = db.session.scalars(
            select(Word).where(Word.language == language, Word.l2 == l2, Word.topic == topic)
        ).first()
        if word is None:
            word = Word(language=language, level=level, topic=topic, l2=l2, l1=l1, pos=pos, **extra)
            db.session.add(word)
            db.session.flush()
        return word

    @staticmethod
    def add_example(word: Word, sentence: str, translation: Optional[str] = None) -> bool:
        """Attach an example sentence unless the word already has it. Does not commit."""
        sentence = (sentence or '').strip()
        if not sentence:
            return False
        if any(example.sentence == sentence for example in word.examples):
            return False
        word.examples.append(Example(sentence=sentence, translation=translation))
        return True

    @staticmethod
    def add_words(user_id: int, payload: AddWordsRequest) -> int:
        """Add words to the library and to the learner's collection in one transaction."""
        language = payload.language.value
        try:
            for entry in payload.words:
                word = StoryService.find_or_create_word(
                    language, entry.l2.strip(), entry.l1.strip(), payload.topic, payload.level, pos=entry.pos
                )
                for example in entry.examples[:MAX_EXAMPLES_PER_WORD]:
                    StoryService.add_example(word, example.sentence, example.translation)
                WordHistoryService.ensure_membership(user_id, word.word_id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Added {len(payload.words)} words to library of user {user_id}")
        return len(payload.words)
