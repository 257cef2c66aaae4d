# File: langfu_app/modules/settings/routes.py
from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from langfu_app.core.error_handlers import storage_error_response
from langfu_app.core.extensions import db
from langfu_app.modules.auth.gate import current_user
from langfu_app.modules.progress.services.progress_service import ProgressService
from langfu_app.schemas import SettingsUpdateRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import settings_bp


@settings_bp.route('/update', methods=['POST'])
def update_settings():
    """Update profile preferences; switching language prepares its Progress row."""
    payload = parse_json_body(SettingsUpdateRequest, 'Invalid settings')
    user = current_user._get_current_object()

    if payload.name is not None:
        user.name = payload.name.strip() or None
    user.current_language = payload.currentLanguage.value
    if payload.dailyGoal is not None:
        user.daily_goal = payload.dailyGoal

    try:
        ProgressService.ensure_progress(user.user_id, user.current_language, commit=False)
        db.session.commit()
    except SQLAlchemyError:
        return storage_error_response('Failed to update settings', 'SETTINGS_FAILED')

    current_app.logger.info(f"Settings updated for user {user.user_id} (language={user.current_language})")
    return jsonify({'success': True, 'user': user.to_dict()})
