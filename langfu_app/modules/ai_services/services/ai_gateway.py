"""
AI Gateway - Unified entry point for all AI interactions.

Without an API key, or when Gemini gives no usable JSON, every operation
returns deterministic fallback content. Failures are logged, never raised.
"""
from typing import Any, Dict, List, Optional

from flask import current_app

from langfu_app.models import Language
from ..gemini_client import GeminiClient
from ..logics import fallbacks
from ..logics.prompts import (
    build_examples_prompt,
    build_topic_package_prompt,
    build_validate_sentence_prompt,
)
from ..logics.response_parser import ResponseParser

PLACEHOLDER_API_KEY = 'test-key'
EXAMPLE_COUNT = 5


class AIGateway:
    """
    Responsibilities:
    1. Build prompts
    2. Dispatch to the Gemini client
    3. Parse and validate the response
    4. Fall back to local content
    """

    @staticmethod
    def get_client() -> Optional[GeminiClient]:
        """Configured client, or None when AI generation is switched off."""
        api_key = current_app.config.get('GEMINI_API_KEY')
        if not api_key or api_key == PLACEHOLDER_API_KEY:
            return None
        return GeminiClient(api_key, current_app.config.get('GEMINI_MODEL', 'gemini-2.0-flash-lite-001'))

    @staticmethod
    def _ask_json(prompt: str, feature: str) -> Optional[Any]:
        client = AIGateway.get_client()
        if client is None:
            current_app.logger.info(f"AIGateway[{feature}]: no API key configured, using fallback")
            return None
        try:
            success, raw = client.generate_content(prompt)
        except Exception as exc:
            current_app.logger.error(f"AIGateway[{feature}]: client error: {exc}", exc_info=True)
            return None
        if not success:
            current_app.logger.warning(f"AIGateway[{feature}]: generation failed: {raw}")
            return None
        parsed = ResponseParser.extract_json(raw)
        if parsed is None:
            current_app.logger.warning(f"AIGateway[{feature}]: response was not JSON")
        return parsed

    @staticmethod
    def generate_examples(word: str, translation: str, language: Language, pos: Optional[str] = None) -> Dict[str, List[str]]:
        """Five example sentences with English translations."""
        prompt = build_examples_prompt(word, translation, language.display_name, pos)
        parsed = AIGateway._ask_json(prompt, 'examples')
        if isinstance(parsed, dict):
            parsed = parsed.get('examples')

        if isinstance(parsed, list):
            pairs = ResponseParser.sentence_pairs(parsed)[:EXAMPLE_COUNT]
            if pairs:
                return {
                    'examples': [pair['sentence'] for pair in pairs],
                    'translations': [pair['translation'] for pair in pairs],
                }
            current_app.logger.warning("AIGateway[examples]: unexpected response shape")

        return fallbacks.fallback_examples(word, translation, language)

    @staticmethod
    def generate_topic_package(topic: str, level: str, language: Language, num_keywords: int = 10) -> dict:
        """A short story on ``topic`` plus its key vocabulary."""
        prompt = build_topic_package_prompt(topic, level, language.display_name, num_keywords)
        parsed = AIGateway._ask_json(prompt, 'topic-package')

        if not isinstance(parsed, dict) or not isinstance(parsed.get('story'), str) \
                or not isinstance(parsed.get('keywords'), list):
            if parsed is not None:
                current_app.logger.warning("AIGateway[topic-package]: unexpected response shape")
            return fallbacks.fallback_topic_package(topic, level, language, num_keywords)

        keywords = [ResponseParser.normalize_keyword(raw) for raw in parsed['keywords'][:num_keywords]]
        keywords = [item for item in keywords if item is not None]

        return {'story': parsed['story'], 'keywords': keywords}

    @staticmethod
    def validate_sentence(sentence: str, word: str, language: Language) -> dict:
        """Judge a learner sentence; one that lacks the word is rejected without asking the model."""
        if word.lower() not in sentence.lower():
            return {'valid': False, 'feedback': fallbacks.MISSING_WORD_FEEDBACK.format(word=word)}

        if AIGateway.get_client() is None:
            return {'valid': True, 'feedback': fallbacks.OFFLINE_VALID_FEEDBACK}

        prompt = build_validate_sentence_prompt(sentence, word, language.display_name)
        parsed = AIGateway._ask_json(prompt, 'validate-sentence')
        if isinstance(parsed, dict) and isinstance(parsed.get('valid'), bool) \
                and isinstance(parsed.get('feedback'), str):
            return {'valid': parsed['valid'], 'feedback': parsed['feedback']}

        return {'valid': True, 'feedback': fallbacks.FAILED_VALID_FEEDBACK}
