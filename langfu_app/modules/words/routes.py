# File: langfu_app/modules/words/routes.py
from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from langfu_app.core.error_handlers import ReferentialIntegrityError, storage_error_response
from langfu_app.core.extensions import db
from langfu_app.models import UserSentence
from langfu_app.modules.auth.gate import current_user
from langfu_app.schemas import SaveSentenceRequest, TrackBatchRequest, TrackWordRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import words_bp
from .services.word_history_service import WordHistoryService

DEFAULT_DUE_LIMIT = 20
MAX_DUE_LIMIT = 100


@words_bp.route('/words/track', methods=['POST'])
def track_word():
    """Record a single review outcome."""
    payload = parse_json_body(TrackWordRequest, 'Word ID is required')
    try:
        entry = WordHistoryService.record_review(current_user.user_id, payload.wordId, payload.correct)
    except (ReferentialIntegrityError, SQLAlchemyError):
        return storage_error_response('Failed to track word', 'TRACK_FAILED')
    return jsonify({'success': True, 'wordHistory': entry.to_dict()})


@words_bp.route('/words/track-batch', methods=['POST'])
def track_words_batch():
    """Record one outcome for a list of words, skipping extracted ones."""
    payload = parse_json_body(TrackBatchRequest, 'Words list is required')
    try:
        tracked = WordHistoryService.record_review_batch(current_user.user_id, payload.words, payload.correct)
    except (ReferentialIntegrityError, SQLAlchemyError):
        return storage_error_response('Failed to track words', 'TRACK_FAILED')

    if tracked == 0:
        return jsonify({'success': True, 'message': 'No trackable words', 'tracked': 0})
    return jsonify({'success': True, 'message': 'Words tracked successfully', 'tracked': tracked})


@words_bp.route('/words/due', methods=['GET'])
def due_words():
    limit = request.args.get('limit', DEFAULT_DUE_LIMIT, type=int)
    limit = max(1, min(limit or DEFAULT_DUE_LIMIT, MAX_DUE_LIMIT))
    words = WordHistoryService.due_words(current_user.user_id, current_user.current_language, limit=limit)
    return jsonify({'success': True, 'words': words, 'count': len(words)})


@words_bp.route('/sentences/save', methods=['POST'])
def save_sentence():
    payload = parse_json_body(SaveSentenceRequest, 'Word ID and sentence are required')
    sentence = UserSentence(
        user_id=current_user.user_id,
        word_id=payload.wordId,
        sentence=payload.sentence.strip(),
        is_correct=True,
    )
    try:
        db.session.add(sentence)
        db.session.commit()
    except SQLAlchemyError:
        return storage_error_response('Failed to save sentence', 'SAVE_FAILED')
    return jsonify({'success': True, 'userSentence': sentence.to_dict()})
