import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from langfu_app import create_app, db
from langfu_app.core.config import Config
from langfu_app.models import Example, Word
from langfu_app.modules.auth.services.auth_service import AuthService


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    JWT_SECRET = 'test-secret-key-that-is-long-enough-for-hs256'
    GEMINI_API_KEY = None
    AUTH_COOKIE_SECURE = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_app(tmp_path):
    """App backed by an on-disk SQLite file, for tests that need real connections per thread."""
    config = type('FileTestConfig', (TestConfig,), {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'langfu-test.db'}",
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'connect_args': {'check_same_thread': False, 'timeout': 30}
        },
    })
    app = create_app(config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    return AuthService.register_user('learner@example.com', 'secret123', name='Lena')


@pytest.fixture
def auth_client(client, user):
    response = client.post('/api/auth/login', json={
        'email': 'learner@example.com',
        'password': 'secret123',
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def german_words(app):
    words = [
        Word(language='GERMAN', level='A1', topic='Food', l2='Brot', l1='bread', pos='noun', frequency=90),
        Word(language='GERMAN', level='A1', topic='Food', l2='Wasser', l1='water', pos='noun', frequency=80),
        Word(language='GERMAN', level='A2', topic='Travel', l2='Bahnhof', l1='train station', pos='noun', frequency=40),
    ]
    db.session.add_all(words)
    db.session.flush()
    db.session.add(Example(word_id=words[0].word_id, sentence='Ich esse Brot.', translation='I eat bread.'))
    db.session.commit()
    return words
