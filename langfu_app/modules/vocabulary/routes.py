# File: langfu_app/modules/vocabulary/routes.py
from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from langfu_app.core.error_handlers import error_response, storage_error_response
from langfu_app.models import Language
from langfu_app.modules.auth.gate import current_user
from langfu_app.schemas import ExtractRequest, LoadVocabularyRequest, SaveExtractedRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import vocabulary_bp
from .extraction_store import ExtractedVocabularyStore
from .services.extraction_service import ExtractionService
from .services.import_service import ImportService


@vocabulary_bp.route('/vocabulary/load', methods=['POST'])
def load_vocabulary():
    payload = parse_json_body(LoadVocabularyRequest, 'Invalid vocabulary format')
    try:
        total, errors = ImportService.load_vocabulary(
            current_user.user_id, current_user.current_language, payload.vocabulary
        )
    except SQLAlchemyError:
        return storage_error_response('Failed to load vocabulary', 'IMPORT_FAILED')
    return jsonify({'success': True, 'totalWords': total, 'errors': errors})


@vocabulary_bp.route('/vocabulary/save-extracted', methods=['POST'])
def save_extracted():
    payload = parse_json_body(SaveExtractedRequest, 'Invalid request data')
    try:
        vocab_set, count = ImportService.save_extracted(
            current_user.user_id,
            current_user.current_language,
            payload.extractionId,
            payload.title,
            payload.words,
        )
    except SQLAlchemyError:
        return storage_error_response('Failed to save vocabulary set', 'SAVE_FAILED')
    return jsonify({'success': True, 'vocabularySetId': vocab_set.set_id, 'wordsCreated': count})


@vocabulary_bp.route('/vocabulary/sets', methods=['GET'])
def list_sets():
    language = request.args.get('language')
    if language:
        try:
            language = Language.parse(language).value
        except ValueError:
            return error_response('Unsupported language', 'VALIDATION_ERROR', 400)
    return jsonify({'success': True, 'sets': ImportService.list_sets(current_user.user_id, language)})


@vocabulary_bp.route('/extract', methods=['POST'])
def extract():
    payload = parse_json_body(ExtractRequest, 'URL is required')
    try:
        extraction = ExtractionService.extract_from_url(current_user.user_id, payload.url)
    except SQLAlchemyError:
        return storage_error_response('Failed to extract vocabulary', 'EXTRACT_FAILED')
    return jsonify({'success': True, 'extraction': extraction.to_dict()})


@vocabulary_bp.route('/extraction', methods=['GET'])
def list_extractions():
    extractions = ExtractionService.list_extractions(current_user.user_id)
    return jsonify({'success': True, 'extractions': [item.to_dict() for item in extractions]})


@vocabulary_bp.route('/extraction/<int:extraction_id>', methods=['DELETE'])
def delete_extraction(extraction_id):
    user_id = current_user.user_id
    store = ExtractedVocabularyStore(
        [item.to_dict() for item in ExtractionService.list_extractions(user_id)]
    )
    ExtractionService.delete_optimistically(store, user_id, extraction_id)
    return jsonify({'success': True, 'extractions': store.extractions})
