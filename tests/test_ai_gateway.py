"""
Tests for the AI Gateway

Tests cover:
- Fallback content when no API key is configured
- Parsing and validation of model answers
- Fallback on failed or malformed answers
- Gemini client model fallback
"""

import pytest
from google.api_core import exceptions as google_exceptions

from langfu_app.models import Language
from langfu_app.modules.ai_services import gemini_client
from langfu_app.modules.ai_services.gemini_client import GeminiClient
from langfu_app.modules.ai_services.logics import fallbacks
from langfu_app.modules.ai_services.logics.response_parser import ResponseParser
from langfu_app.modules.ai_services.services.ai_gateway import AIGateway


class FakeClient:

    def __init__(self, answer=None, success=True, error=None):
        self.answer = answer
        self.success = success
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.success, self.answer


@pytest.fixture
def fake_client(monkeypatch):
    def install(**kwargs):
        client = FakeClient(**kwargs)
        monkeypatch.setattr(AIGateway, 'get_client', staticmethod(lambda: client))
        return client
    return install


class TestFallbacks:

    def test_examples_without_api_key(self, app):
        result = AIGateway.generate_examples('Haus', 'house', Language.GERMAN)

        assert len(result['examples']) == 5
        assert result['examples'][0] == 'Ich verwende Haus jeden Tag.'
        assert result['translations'][0] == 'I use house every day.'

    def test_spanish_examples(self, app):
        result = AIGateway.generate_examples('casa', 'house', Language.SPANISH)

        assert result['examples'][1] == 'casa es muy importante.'

    def test_topic_package_without_api_key(self, app):
        result = AIGateway.generate_topic_package('Reisen', 'A2', Language.GERMAN, 3)

        assert 'Reisen' in result['story']
        assert [item['l2'] for item in result['keywords']] == ['Geschichte', 'lernen', 'einfach']
        assert all(len(item['examples']) == 2 for item in result['keywords'])

    def test_placeholder_key_disables_client(self, app):
        app.config['GEMINI_API_KEY'] = 'test-key'

        assert AIGateway.get_client() is None

    def test_configured_key_builds_client(self, app):
        app.config['GEMINI_API_KEY'] = 'real-key'
        app.config['GEMINI_MODEL'] = 'model-a, model-b'

        client = AIGateway.get_client()

        assert isinstance(client, GeminiClient)
        assert client.models == ['model-a', 'model-b']


class TestModelAnswers:

    def test_examples_from_fenced_json(self, app, fake_client):
        fake_client(answer='```json\n[{"sentence": "Das Haus ist alt.", "translation": "The house is old."}]\n```')

        result = AIGateway.generate_examples('Haus', 'house', Language.GERMAN)

        assert result == {'examples': ['Das Haus ist alt.'], 'translations': ['The house is old.']}

    def test_examples_are_capped(self, app, fake_client):
        items = ','.join('{"sentence": "Satz %d", "translation": "t"}' % i for i in range(8))
        fake_client(answer=f'Here you go: [{items}]')

        result = AIGateway.generate_examples('Satz', 'sentence', Language.GERMAN)

        assert len(result['examples']) == 5

    @pytest.mark.parametrize('client_kwargs', [
        {'answer': 'not json at all'},
        {'answer': '{"unexpected": true}'},
        {'answer': 'quota', 'success': False},
        {'error': RuntimeError('boom')},
    ])
    def test_examples_fall_back(self, app, fake_client, client_kwargs):
        fake_client(**client_kwargs)

        result = AIGateway.generate_examples('Haus', 'house', Language.GERMAN)

        assert result == fallbacks.fallback_examples('Haus', 'house', Language.GERMAN)

    def test_topic_package_normalizes_keywords(self, app, fake_client):
        client = fake_client(answer='''{
            "story": "Eine Geschichte.",
            "keywords": [
                {"l2": "Zug", "l1": "train", "pos": "noun", "synonyms": ["Bahn", 3, "a", "b", "c", "d", "e", "f"],
                 "examples": [{"sentence": "Der Zug fährt.", "translation": "The train leaves."}, "junk"]},
                {"l2": "ohne"},
                "junk"
            ]
        }''')

        result = AIGateway.generate_topic_package('Reisen', 'A2', Language.GERMAN, 5)

        assert result['story'] == 'Eine Geschichte.'
        assert result['keywords'] == [{
            'l2': 'Zug',
            'l1': 'train',
            'pos': 'noun',
            'synonyms': ['Bahn', 'a', 'b', 'c', 'd', 'e'],
            'examples': [{'sentence': 'Der Zug fährt.', 'translation': 'The train leaves.'}],
        }]
        assert 'Reisen' in client.prompts[0]

    def test_topic_package_with_bad_shape_falls_back(self, app, fake_client):
        fake_client(answer='{"story": 42, "keywords": []}')

        result = AIGateway.generate_topic_package('Reisen', 'A2', Language.SPANISH, 2)

        assert result == fallbacks.fallback_topic_package('Reisen', 'A2', Language.SPANISH, 2)


class TestValidateSentence:

    def test_missing_word_is_rejected_without_model(self, app, fake_client):
        client = fake_client(answer='{"valid": true, "feedback": "ok"}')

        result = AIGateway.validate_sentence('Ich gehe nach Hause.', 'Zug', Language.GERMAN)

        assert result == {'valid': False, 'feedback': 'Your sentence must include the word "Zug".'}
        assert client.prompts == []

    def test_offline_accepts_sentence_with_word(self, app):
        result = AIGateway.validate_sentence('Der zug kommt.', 'Zug', Language.GERMAN)

        assert result == {'valid': True, 'feedback': fallbacks.OFFLINE_VALID_FEEDBACK}

    def test_model_verdict_is_returned(self, app, fake_client):
        fake_client(answer='{"valid": false, "feedback": "Use the article \\"der\\"."}')

        result = AIGateway.validate_sentence('Zug kommt.', 'Zug', Language.GERMAN)

        assert result == {'valid': False, 'feedback': 'Use the article "der".'}

    def test_unusable_verdict(self, app, fake_client):
        fake_client(answer='{"valid": "maybe"}')

        result = AIGateway.validate_sentence('Der Zug kommt.', 'Zug', Language.GERMAN)

        assert result == {'valid': True, 'feedback': fallbacks.FAILED_VALID_FEEDBACK}


class TestResponseParser:

    def test_clean_markdown(self):
        assert ResponseParser.clean_markdown('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_extract_json_from_prose(self):
        assert ResponseParser.extract_json('Sure! {"a": [1, 2]} Hope this helps.') == {'a': [1, 2]}

    def test_extract_json_array(self):
        assert ResponseParser.extract_json('Result: [1, 2, 3]') == [1, 2, 3]

    def test_extract_json_failure(self):
        assert ResponseParser.extract_json('nothing here') is None
        assert ResponseParser.extract_json('') is None

    def test_sentence_pairs(self):
        pairs = ResponseParser.sentence_pairs([
            {'sentence': 'Hallo.', 'translation': 'Hello.'},
            {'sentence': '', 'translation': 'x'},
            {'sentence': 'Tschüss.'},
            'junk',
        ])

        assert pairs == [
            {'sentence': 'Hallo.', 'translation': 'Hello.'},
            {'sentence': 'Tschüss.', 'translation': ''},
        ]
        assert ResponseParser.sentence_pairs({'sentence': 'Hallo.'}) == []

    def test_keyword_without_translation_is_dropped(self):
        assert ResponseParser.normalize_keyword({'l2': 'Zug'}) is None
        assert ResponseParser.normalize_keyword('Zug') is None


class TestGeminiClient:

    def test_falls_back_to_next_model(self, app, monkeypatch):
        tried = []

        class FakeModel:
            def __init__(self, name):
                self.name = name

            def generate_content(self, prompt):
                tried.append(self.name)
                if self.name == 'first':
                    raise google_exceptions.ResourceExhausted('quota')
                return type('Response', (), {'parts': ['x'], 'text': 'hallo'})()

        monkeypatch.setattr(gemini_client.genai, 'configure', lambda **kwargs: None)
        monkeypatch.setattr(gemini_client.genai, 'GenerativeModel', FakeModel)

        success, text = GeminiClient('key', 'first,second').generate_content('prompt')

        assert (success, text) == (True, 'hallo')
        assert tried == ['first', 'second']

    def test_all_models_failing(self, app, monkeypatch):
        class BrokenModel:
            def __init__(self, name):
                pass

            def generate_content(self, prompt):
                raise google_exceptions.PermissionDenied('bad key')

        monkeypatch.setattr(gemini_client.genai, 'configure', lambda **kwargs: None)
        monkeypatch.setattr(gemini_client.genai, 'GenerativeModel', BrokenModel)

        success, message = GeminiClient('key', 'one,two').generate_content('prompt')

        assert success is False
        assert message.startswith('All models failed (one, two)')


class TestAiApi:

    def test_examples_endpoint(self, auth_client):
        response = auth_client.post('/api/ai/examples', json={'word': 'Haus', 'translation': 'house', 'language': 'german'})

        data = response.get_json()
        assert data['success'] is True
        assert len(data['examples']) == 5

    def test_topic_package_validation(self, auth_client):
        response = auth_client.post('/api/ai/topic-package', json={'topic': 'Reisen'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Missing required fields: topic, level, language'

    def test_validate_sentence_endpoint(self, auth_client):
        response = auth_client.post('/api/ai/validate-sentence', json={
            'sentence': 'Hola amigo', 'word': 'casa', 'language': 'SPANISH',
        })

        assert response.get_json() == {
            'success': True,
            'valid': False,
            'feedback': 'Your sentence must include the word "casa".',
        }
