# File: langfu_app/modules/progress/routes.py
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from langfu_app.core.error_handlers import storage_error_response
from langfu_app.modules.auth.gate import current_user
from langfu_app.schemas import ProgressUpdateRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import progress_bp
from .services.progress_service import ProgressService


@progress_bp.route('/update', methods=['POST'])
def update_progress():
    """Apply a finished session to the current language's progress."""
    payload = parse_json_body(ProgressUpdateRequest, 'Invalid progress payload')
    try:
        progress = ProgressService.apply_session_result(
            current_user.user_id,
            current_user.current_language,
            payload.wordsLearned,
            payload.score,
        )
    except SQLAlchemyError:
        return storage_error_response('Failed to update progress', 'PROGRESS_FAILED')
    return jsonify({'success': True, 'progress': progress.to_dict()})


@progress_bp.route('', methods=['GET'])
def get_progress():
    language = current_user.current_language
    progress = ProgressService.get_progress(current_user.user_id, language)
    if progress is None:
        ProgressService.ensure_progress(current_user.user_id, language)
        progress = ProgressService.get_progress(current_user.user_id, language)
    return jsonify({'success': True, 'progress': progress.to_dict()})
