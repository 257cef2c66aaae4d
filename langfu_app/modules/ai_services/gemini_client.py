# File: langfu_app/modules/ai_services/gemini_client.py
# Thin client over google-generativeai with an ordered model fallback list.

import time
from typing import List, Tuple

import google.generativeai as genai
from flask import current_app
from google.api_core import exceptions as google_exceptions


class GeminiClient:
    """
    Sends prompts to the Gemini API.

    ``model_name`` may hold several comma separated models; when one fails
    (quota, outage, empty answer) the next one is tried.
    """

    MAX_RETRIES = 2
    RETRY_DELAY_SECONDS = 2

    def __init__(self, api_key: str, model_name: str = 'gemini-2.0-flash-lite-001'):
        self.api_key = api_key
        self.model_name = model_name

    @property
    def models(self) -> List[str]:
        return [name.strip() for name in self.model_name.split(',') if name.strip()]

    def generate_content(self, prompt: str) -> Tuple[bool, str]:
        """
        Returns:
            (True, text) on success, (False, error message) when every model failed.
        """
        models_to_try = self.models
        final_error_msg = None

        for index, model_name in enumerate(models_to_try):
            current_app.logger.info(f"GeminiClient: [Model {index + 1}/{len(models_to_try)}] trying '{model_name}'")
            success, result = self._generate_with_single_model(model_name, prompt)
            if success:
                if index > 0:
                    current_app.logger.info(f"GeminiClient: fell back to model '{model_name}'")
                return True, result

            final_error_msg = result
            current_app.logger.warning(f"GeminiClient: model '{model_name}' failed: {result}")

        return False, f"All models failed ({', '.join(models_to_try)}). Last error: {final_error_msg}"

    def _generate_with_single_model(self, model_name: str, prompt: str) -> Tuple[bool, str]:
        last_error_msg = None

        for attempt in range(self.MAX_RETRIES):
            try:
                genai.configure(api_key=self.api_key)
                model = genai.GenerativeModel(model_name)
                response = model.generate_content(prompt)

                if response.parts:
                    return True, response.text

                last_error_msg = f"Empty response. Feedback: {response.prompt_feedback}"

            except google_exceptions.PermissionDenied as exc:
                return False, f"API key rejected: {exc}"

            except google_exceptions.ResourceExhausted as exc:
                # 429: quota for this model is gone, move on to the next one
                return False, f"Quota exhausted: {exc}"

            except google_exceptions.ServiceUnavailable as exc:
                last_error_msg = f"Service unavailable: {exc}"
                current_app.logger.warning(f"GeminiClient: 503 on attempt {attempt + 1}, retrying")
                time.sleep(self.RETRY_DELAY_SECONDS)
                continue

            except Exception as exc:
                current_app.logger.error(f"GeminiClient: API call failed: {exc}", exc_info=True)
                return False, f"Unexpected error: {exc}"

        return False, last_error_msg or "Failed after retries."
