"""
Tests for the Library API

Tests cover:
- Story CRUD scoped to the owner
- Keyword resolution and highlighting
- Bulk delete, duplicate, translate
- Adding words and searching the library
"""

import pytest

from langfu_app import db
from langfu_app.models import Story, Word, WordHistory
from langfu_app.modules.auth.services.auth_service import AuthService


STORY_PAYLOAD = {
    'title': 'Beim Bäcker',
    'content': 'Ich kaufe Brot und Wasser beim Bäcker.',
    'language': 'german',
    'topic': 'Food',
    'level': 'A1',
    'words': ['Brot', 'Wasser', 'Unbekannt'],
}


@pytest.fixture
def other_client(app):
    AuthService.register_user('other@example.com', 'secret123')
    other = app.test_client()
    other.post('/api/auth/login', json={'email': 'other@example.com', 'password': 'secret123'})
    return other


def _create_story(client, **overrides):
    response = client.post('/api/library/story', json={**STORY_PAYLOAD, **overrides})
    assert response.status_code == 200
    return response.get_json()['story']


class TestStoryCrud:

    def test_create_story_resolves_keywords(self, auth_client, german_words):
        story = _create_story(auth_client)

        assert story['wordCount'] == 7
        assert story['summary'] == 'Ich kaufe Brot und Wasser beim Bäcker.'
        assert story['language'] == 'GERMAN'
        translations = {item['l2']: item['l1'] for item in story['keywords']}
        assert translations == {
            'Brot': 'bread',
            'Wasser': 'water',
            'Unbekannt': '[Translation for Unbekannt needed]',
        }

    def test_create_story_requires_fields(self, auth_client):
        response = auth_client.post('/api/library/story', json={'title': 'Only a title'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Missing required fields'

    def test_get_story_highlights_keywords(self, auth_client, german_words):
        story = _create_story(auth_client)

        response = auth_client.get(f"/api/library/story/{story['id']}")

        data = response.get_json()['story']
        assert data['highlightCount'] == 2
        assert 'data-keyword="Brot" data-translation="bread">Brot</span>' in data['highlightedContent']

    @pytest.mark.parametrize('stored', [
        '5',
        '[{"l2": null, "l1": "x"}, {"l2": "Brot", "l1": "bread"}]',
        '[{"l2": "Brot", "l1": "bread", "examples": ["Ich esse Brot."]}]',
    ])
    def test_story_with_malformed_stored_keywords_still_loads(self, auth_client, german_words, stored):
        created = _create_story(auth_client)
        story = db.session.get(Story, created['id'])
        story.keywords = stored
        db.session.commit()

        response = auth_client.get(f"/api/library/story/{created['id']}")

        assert response.status_code == 200
        assert response.get_json()['story']['title'] == STORY_PAYLOAD['title']
        assert auth_client.post(f"/api/library/story/{created['id']}/duplicate").status_code == 200

    def test_story_of_another_user_is_not_found(self, auth_client, other_client, german_words):
        story = _create_story(auth_client)

        assert other_client.get(f"/api/library/story/{story['id']}").status_code == 404
        assert other_client.delete(f"/api/library/story/{story['id']}").status_code == 404
        assert db.session.get(Story, story['id']) is not None

    def test_update_story_recomputes_word_count(self, auth_client):
        story = _create_story(auth_client)

        response = auth_client.patch(f"/api/library/story/{story['id']}", json={'content': 'Kurzer Text.'})

        updated = response.get_json()['story']
        assert updated['content'] == 'Kurzer Text.'
        assert updated['wordCount'] == 2
        assert updated['title'] == STORY_PAYLOAD['title']

    def test_delete_story(self, auth_client):
        story = _create_story(auth_client)

        assert auth_client.delete(f"/api/library/story/{story['id']}").get_json() == {'success': True}
        assert auth_client.get(f"/api/library/story/{story['id']}").status_code == 404

    def test_duplicate_story(self, auth_client, german_words):
        story = _create_story(auth_client)

        copy = auth_client.post(f"/api/library/story/{story['id']}/duplicate").get_json()['story']

        assert copy['id'] != story['id']
        assert copy['title'] == 'Beim Bäcker (Copy)'
        assert copy['keywords'] == story['keywords']

    def test_translate_story_uses_word_table(self, auth_client, german_words):
        story = _create_story(auth_client)

        words = auth_client.post(f"/api/library/story/{story['id']}/translate").get_json()['words']

        by_l2 = {item['l2']: item for item in words}
        assert by_l2['Brot']['examples'] == [{'sentence': 'Ich esse Brot.', 'translation': 'I eat bread.'}]
        assert by_l2['Unbekannt']['l1'] == '[Translation needed]'


class TestBulkDelete:

    def test_bulk_delete_own_stories(self, auth_client):
        ids = [_create_story(auth_client)['id'], _create_story(auth_client, title='Zweite')['id']]

        response = auth_client.post('/api/library/story/bulk-delete', json={'storyIds': ids})

        assert response.get_json()['deleted'] == 2
        assert Story.query.count() == 0

    def test_bulk_delete_with_foreign_story_deletes_nothing(self, auth_client, other_client):
        own = _create_story(auth_client)['id']
        foreign = _create_story(other_client)['id']

        response = auth_client.post('/api/library/story/bulk-delete', json={'storyIds': [own, foreign]})

        assert response.status_code == 404
        assert Story.query.count() == 2

    def test_bulk_delete_requires_ids(self, auth_client):
        response = auth_client.post('/api/library/story/bulk-delete', json={'storyIds': []})

        assert response.status_code == 400


class TestAddWords:

    def test_add_words_creates_words_and_membership(self, auth_client, user):
        response = auth_client.post('/api/library/add-words', json={
            'language': 'GERMAN',
            'topic': 'Weather',
            'level': 'A2',
            'words': [
                {'l2': 'Regen', 'l1': 'rain', 'examples': [{'sentence': 'Es gibt Regen.', 'translation': 'There is rain.'}]},
                {'l2': 'Sonne', 'l1': 'sun'},
            ],
        })

        assert response.get_json() == {'success': True, 'ok': True, 'count': 2}
        regen = Word.query.filter_by(l2='Regen').one()
        assert regen.level == 'A2'
        assert [example.sentence for example in regen.examples] == ['Es gibt Regen.']
        entries = WordHistory.query.filter_by(user_id=user.user_id).all()
        assert len(entries) == 2
        assert all(entry.review_count == 0 for entry in entries)

    def test_add_existing_word_reuses_row(self, auth_client):
        payload = {'language': 'GERMAN', 'topic': 'Weather', 'words': [{'l2': 'Regen', 'l1': 'rain'}]}
        auth_client.post('/api/library/add-words', json=payload)
        auth_client.post('/api/library/add-words', json=payload)

        assert Word.query.filter_by(l2='Regen').count() == 1
        assert WordHistory.query.count() == 1

    def test_add_words_requires_words(self, auth_client):
        response = auth_client.post('/api/library/add-words', json={'language': 'GERMAN', 'words': []})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'No words provided'


class TestLibrarySearch:

    def test_quick_search(self, auth_client, german_words):
        _create_story(auth_client, title='Brot backen')

        data = auth_client.get('/api/library/search?q=brot').get_json()

        assert [word['l2'] for word in data['words']] == ['Brot']
        assert [story['title'] for story in data['stories']] == ['Brot backen']

    def test_quick_search_by_type(self, auth_client, german_words):
        data = auth_client.get('/api/library/search?q=food&type=words').get_json()

        assert [word['l2'] for word in data['words']] == ['Brot', 'Wasser']
        assert 'stories' not in data

    def test_empty_query(self, auth_client):
        assert auth_client.get('/api/library/search').get_json() == {'success': True, 'words': [], 'stories': []}

    def test_overview_parses_question(self, auth_client, german_words):
        data = auth_client.get('/api/library/overview', query_string={'q': 'German A1 food words'}).get_json()

        assert data['parsedQuery'] == {'query': 'food', 'language': 'GERMAN', 'level': 'A1', 'topic': 'food'}
        assert [word['l2'] for word in data['words']] == ['Brot', 'Wasser']
        assert [word['exampleCount'] for word in data['words']] == [1, 0]
        assert data['statistics']['totalWords'] == 2
        assert data['statistics']['byLevel'] == {'A1': 2}

    def test_overview_statistics_question(self, auth_client, german_words):
        data = auth_client.get('/api/library/overview', query_string={'q': 'How many German words'}).get_json()

        assert data['parsedQuery']['query'] is None
        assert data['statistics']['byLanguage'] == {'GERMAN': 3}
        assert data['statistics']['byTopic'] == {'Food': 2, 'Travel': 1}
