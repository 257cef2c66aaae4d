# File: langfu_app/modules/library/routes.py
from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from langfu_app.core.error_handlers import storage_error_response
from langfu_app.modules.auth.gate import current_user
from langfu_app.schemas import (
    AddWordsRequest,
    BulkDeleteStoriesRequest,
    CreateStoryRequest,
    UpdateStoryRequest,
)
from langfu_app.utils.request_parsing import parse_json_body
from . import library_bp
from .logics.natural_query import parse_natural_query
from .services.library_search import LibrarySearchService
from .services.story_service import StoryService

SEARCH_TYPES = ('all', 'words', 'stories')


@library_bp.route('/story', methods=['POST'])
def create_story():
    payload = parse_json_body(CreateStoryRequest, 'Missing required fields')
    story = StoryService.create_story(current_user.user_id, payload)
    return jsonify({'success': True, 'story': story.to_dict()})


@library_bp.route('/story/<int:story_id>', methods=['GET'])
def get_story(story_id):
    return jsonify({'success': True, 'story': StoryService.render_story(current_user.user_id, story_id)})


@library_bp.route('/story/<int:story_id>', methods=['PATCH'])
def update_story(story_id):
    payload = parse_json_body(UpdateStoryRequest, 'Invalid story update')
    story = StoryService.update_story(current_user.user_id, story_id, payload)
    return jsonify({'success': True, 'story': story.to_dict()})


@library_bp.route('/story/<int:story_id>', methods=['DELETE'])
def delete_story(story_id):
    StoryService.delete_story(current_user.user_id, story_id)
    return jsonify({'success': True})


@library_bp.route('/story/<int:story_id>/duplicate', methods=['POST'])
def duplicate_story(story_id):
    try:
        story = StoryService.duplicate_story(current_user.user_id, story_id)
    except SQLAlchemyError:
        return storage_error_response('Failed to duplicate story', 'DUPLICATE_FAILED')
    return jsonify({'success': True, 'story': story.to_dict()})


@library_bp.route('/story/<int:story_id>/translate', methods=['POST'])
def translate_story(story_id):
    words = StoryService.translate_story(current_user.user_id, story_id)
    return jsonify({'success': True, 'words': words})


@library_bp.route('/story/bulk-delete', methods=['POST'])
def bulk_delete_stories():
    payload = parse_json_body(BulkDeleteStoriesRequest, 'Invalid story IDs')
    try:
        deleted = StoryService.bulk_delete(current_user.user_id, payload.storyIds)
    except SQLAlchemyError:
        return storage_error_response('Failed to delete stories', 'DELETE_FAILED')
    return jsonify({'success': True, 'deleted': deleted})


@library_bp.route('/add-words', methods=['POST'])
def add_words():
    payload = parse_json_body(AddWordsRequest, 'No words provided')
    try:
        count = StoryService.add_words(current_user.user_id, payload)
    except SQLAlchemyError:
        return storage_error_response('Failed to add words', 'ADD_WORDS_FAILED')
    return jsonify({'success': True, 'ok': True, 'count': count})


@library_bp.route('/search', methods=['GET'])
def search():
    """Search box: words of the current language and the learner's stories."""
    query = (request.args.get('q') or '').strip()
    search_type = request.args.get('type', 'all')
    if search_type not in SEARCH_TYPES:
        search_type = 'all'

    if not query:
        return jsonify({'success': True, 'words': [], 'stories': []})

    language = current_user.current_language
    results = {'success': True}
    if search_type in ('all', 'words'):
        results['words'] = LibrarySearchService.quick_search_words(language, query)
    if search_type in ('all', 'stories'):
        results['stories'] = LibrarySearchService.quick_search_stories(current_user.user_id, language, query)
    return jsonify(results)


@library_bp.route('/overview', methods=['GET'])
def overview():
    """Answer a natural-language library question with matches and statistics."""
    options = parse_natural_query(request.args.get('q') or '')
    options.user_id = current_user.user_id
    results = LibrarySearchService.search(options)
    return jsonify({'success': True, 'parsedQuery': options.to_dict(), **results})
