"""
Library search across words, stories and vocabulary sets, plus the
statistics shown on the library overview.
"""
from typing import List

from sqlalchemy import func, or_, select

from langfu_app.core.extensions import db
from langfu_app.models import Example, Story, VocabularySet, Word
from ..logics.natural_query import SearchOptions

QUICK_WORD_LIMIT = 20
QUICK_STORY_LIMIT = 10
TOP_TOPICS = 10


class LibrarySearchService:

    # ---------------------------------------------------------------
    # Quick search (search box)
    # ---------------------------------------------------------------
    @staticmethod
    def quick_search_words(language: str, query: str) -> List[dict]:
        stmt = (
            select(Word)
            .where(
                Word.language == language,
                or_(
                    Word.l1.icontains(query, autoescape=True),
                    Word.l2.icontains(query, autoescape=True),
                    Word.topic.icontains(query, autoescape=True),
                    Word.pos.icontains(query, autoescape=True),
                ),
            )
            .order_by(Word.frequency.desc(), Word.l2.asc())
            .limit(QUICK_WORD_LIMIT)
        )
        return [word.to_dict() for word in db.session.scalars(stmt)]

    @staticmethod
    def quick_search_stories(user_id: int, language: str, query: str) -> List[dict]:
        stmt = (
            select(Story)
            .where(
                Story.user_id == user_id,
                Story.language == language,
                or_(
                    Story.title.icontains(query, autoescape=True),
                    Story.topic.icontains(query, autoescape=True),
                    Story.summary.icontains(query, autoescape=True),
                ),
            )
            .order_by(Story.created_at.desc(), Story.story_id.desc())
            .limit(QUICK_STORY_LIMIT)
        )
        return [story.to_summary_dict() for story in db.session.scalars(stmt)]

    # ---------------------------------------------------------------
    # Option-driven search (overview)
    # ---------------------------------------------------------------
    @staticmethod
    def search_words(options: SearchOptions) -> List[dict]:
        example_count = (
            select(func.count(Example.example_id))
            .where(Example.word_id == Word.word_id)
            .correlate(Word)
            .scalar_subquery()
        )
        stmt = select(Word, example_count.label('example_count'))
        if options.language:
            stmt = stmt.where(Word.language == options.language)
        if options.level:
            stmt = stmt.where(Word.level == options.level.upper())
        if options.topic:
            stmt = stmt.where(Word.topic.icontains(options.topic, autoescape=True))
        if options.query:
            stmt = stmt.where(or_(
                Word.l2.icontains(options.query, autoescape=True),
                Word.l1.icontains(options.query, autoescape=True),
                Word.topic.icontains(options.query, autoescape=True),
            ))
        stmt = stmt.order_by(Word.topic.asc(), Word.level.asc(), Word.l2.asc()).limit(options.limit)

        results = []
        for word, count in db.session.execute(stmt):
            item = word.to_dict(include_examples=options.include_examples)
            item['exampleCount'] = count
            results.append(item)
        return results

    @staticmethod
    def search_stories(options: SearchOptions) -> List[dict]:
        stmt = select(Story)
        if options.user_id is not None:
            stmt = stmt.where(Story.user_id == options.user_id)
        if options.language:
            stmt = stmt.where(Story.language == options.language)
        if options.level:
            stmt = stmt.where(Story.level == options.level.upper())
        if options.topic:
            stmt = stmt.where(Story.topic.icontains(options.topic, autoescape=True))
        if options.query:
            stmt = stmt.where(or_(
                Story.title.icontains(options.query, autoescape=True),
                Story.topic.icontains(options.query, autoescape=True),
                Story.summary.icontains(options.query, autoescape=True),
            ))
        stmt = stmt.order_by(Story.created_at.desc(), Story.story_id.desc()).limit(options.limit)
        return [story.to_summary_dict() for story in db.session.scalars(stmt)]

    @staticmethod
    def search_vocabulary_sets(options: SearchOptions) -> List[dict]:
        """Public sets, plus the caller's own private ones."""
        stmt = select(VocabularySet)
        if options.language:
            stmt = stmt.where(VocabularySet.language == options.language)
        if options.query:
            stmt = stmt.where(or_(
                VocabularySet.name.icontains(options.query, autoescape=True),
                VocabularySet.description.icontains(options.query, autoescape=True),
            ))
        if options.user_id is not None:
            stmt = stmt.where(or_(VocabularySet.is_public.is_(True), VocabularySet.user_id == options.user_id))
        else:
            stmt = stmt.where(VocabularySet.is_public.is_(True))
        stmt = stmt.order_by(VocabularySet.created_at.desc(), VocabularySet.set_id.desc()).limit(options.limit)
        return [vocab_set.to_dict() for vocab_set in db.session.scalars(stmt)]

    @staticmethod
    def get_statistics(options: SearchOptions) -> dict:
        word_filters = []
        story_filters = []
        set_filters = []
        if options.user_id is not None:
            story_filters.append(Story.user_id == options.user_id)
        if options.language:
            word_filters.append(Word.language == options.language)
            story_filters.append(Story.language == options.language)
            set_filters.append(VocabularySet.language == options.language)
        if options.level:
            word_filters.append(Word.level == options.level.upper())
            story_filters.append(Story.level == options.level.upper())

        total_words = db.session.scalar(select(func.count(Word.word_id)).where(*word_filters))
        total_stories = db.session.scalar(select(func.count(Story.story_id)).where(*story_filters))
        total_sets = db.session.scalar(select(func.count(VocabularySet.set_id)).where(*set_filters))

        by_language = db.session.execute(
            select(Word.language, func.count(Word.word_id)).where(*word_filters).group_by(Word.language)
        ).all()
        by_level = db.session.execute(
            select(Word.level, func.count(Word.word_id)).where(*word_filters).group_by(Word.level)
        ).all()
        topic_count = func.count(Word.word_id).label('topic_count')
        by_topic = db.session.execute(
            select(Word.topic, topic_count)
            .where(Word.topic.is_not(None), *word_filters)
            .group_by(Word.topic)
            .order_by(topic_count.desc(), Word.topic.asc())
            .limit(TOP_TOPICS)
        ).all()

        return {
            'totalWords': total_words or 0,
            'totalStories': total_stories or 0,
            'totalSets': total_sets or 0,
            'byLanguage': {language: count for language, count in by_language},
            'byLevel': {level: count for level, count in by_level},
            'byTopic': {topic: count for topic, count in by_topic},
        }

    @staticmethod
    def search(options: SearchOptions) -> dict:
        """Unified search; empty result groups are left out."""
        results = {}
        words = LibrarySearchService.search_words(options)
        stories = LibrarySearchService.search_stories(options)
        vocabulary_sets = LibrarySearchService.search_vocabulary_sets(options)
        if words:
            results['words'] = words
        if stories:
            results['stories'] = stories
        if vocabulary_sets:
            results['vocabularySets'] = vocabulary_sets
        results['statistics'] = LibrarySearchService.get_statistics(options)
        return results
