# File: langfu_app/modules/ai_services/routes.py
# Generation endpoints; every one answers with fallback content when the model is unavailable.

from flask import jsonify

from langfu_app.schemas import ExamplesRequest, TopicPackageRequest, ValidateSentenceRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import ai_services_bp
from .services.ai_gateway import AIGateway


@ai_services_bp.route('/examples', methods=['POST'])
def generate_examples():
    payload = parse_json_body(ExamplesRequest, 'Missing required fields: word, language')
    result = AIGateway.generate_examples(payload.word, payload.translation, payload.language, payload.pos)
    return jsonify({'success': True, **result})


@ai_services_bp.route('/topic-package', methods=['POST'])
def generate_topic_package():
    payload = parse_json_body(TopicPackageRequest, 'Missing required fields: topic, level, language')
    result = AIGateway.generate_topic_package(payload.topic, payload.level, payload.language, payload.numKeywords)
    return jsonify({'success': True, **result})


@ai_services_bp.route('/validate-sentence', methods=['POST'])
def validate_sentence():
    payload = parse_json_body(ValidateSentenceRequest, 'Missing required fields: sentence, word, language')
    result = AIGateway.validate_sentence(payload.sentence, payload.word, payload.language)
    return jsonify({'success': True, **result})
