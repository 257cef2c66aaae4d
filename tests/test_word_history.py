"""
Tests for the Word History ledger

Tests cover:
- Counter and due-date updates per review
- Batch tracking with transient (extracted) entries
- Referential integrity failures
- Membership without a review
- Due-word selection
"""

from datetime import datetime, timedelta, timezone

import pytest

from langfu_app import db
from langfu_app.core.error_handlers import ReferentialIntegrityError, ValidationError
from langfu_app.core.signals import word_reviewed
from langfu_app.models import WordHistory
from langfu_app.schemas import BatchWordEntry
from langfu_app.modules.words.services.word_history_service import WordHistoryService, is_trackable


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _naive(value):
    # SQLite hands datetimes back without tzinfo
    return value.replace(tzinfo=None) if value is not None else None


class TestRecordReview:

    def test_first_correct_review_creates_entry(self, user, german_words):
        entry = WordHistoryService.record_review(user.user_id, german_words[0].word_id, True, now=NOW)

        assert entry.review_count == 1
        assert entry.correct_count == 1
        assert entry.mastery_level == 1
        assert _naive(entry.last_review) == _naive(NOW)
        assert _naive(entry.next_review) == _naive(NOW + timedelta(days=3))

    def test_incorrect_review_keeps_mastery(self, user, german_words):
        word_id = german_words[0].word_id
        WordHistoryService.record_review(user.user_id, word_id, True, now=NOW)
        later = NOW + timedelta(days=3)
        entry = WordHistoryService.record_review(user.user_id, word_id, False, now=later)

        assert entry.review_count == 2
        assert entry.correct_count == 1
        assert entry.mastery_level == 1
        assert _naive(entry.next_review) == _naive(later + timedelta(days=1))

    def test_counters_never_decrease(self, user, german_words):
        word_id = german_words[1].word_id
        previous = (0, 0, 0)
        for index, correct in enumerate([True, False, False, True, True]):
            entry = WordHistoryService.record_review(
                user.user_id, word_id, correct, now=NOW + timedelta(hours=index)
            )
            current = (entry.review_count, entry.correct_count, entry.mastery_level)
            assert all(new >= old for new, old in zip(current, previous))
            assert entry.correct_count <= entry.review_count
            previous = current

        assert previous == (5, 3, 3)

    def test_single_entry_per_user_and_word(self, user, german_words):
        word_id = german_words[0].word_id
        for _ in range(3):
            WordHistoryService.record_review(user.user_id, word_id, True, now=NOW)

        assert WordHistory.query.filter_by(user_id=user.user_id, word_id=word_id).count() == 1

    def test_unknown_word_raises_and_writes_nothing(self, user):
        with pytest.raises(ReferentialIntegrityError):
            WordHistoryService.record_review(user.user_id, 9999, True, now=NOW)

        assert WordHistory.query.count() == 0

    def test_emits_word_reviewed_signal(self, user, german_words):
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        with word_reviewed.connected_to(receiver):
            WordHistoryService.record_review(user.user_id, german_words[0].word_id, True, now=NOW)

        assert received[0]['word_id'] == german_words[0].word_id
        assert received[0]['correct'] is True
        assert received[0]['review_count'] == 1


class TestBatchReview:

    def test_extracted_entries_are_skipped(self, user, german_words):
        items = [
            BatchWordEntry(id=german_words[0].word_id),
            BatchWordEntry(id='extracted-12'),
            BatchWordEntry(id=german_words[1].word_id, isExtracted=True),
        ]

        tracked = WordHistoryService.record_review_batch(user.user_id, items, True, now=NOW)

        assert tracked == 1
        assert WordHistory.query.count() == 1

    def test_only_transient_entries_write_nothing(self, user):
        items = [BatchWordEntry(id='extracted-1'), BatchWordEntry(id='extracted-2', isExtracted=True)]

        assert WordHistoryService.record_review_batch(user.user_id, items, True) == 0
        assert WordHistory.query.count() == 0

    def test_batch_is_all_or_nothing(self, user, german_words):
        items = [BatchWordEntry(id=german_words[0].word_id), BatchWordEntry(id=4242)]

        with pytest.raises(ReferentialIntegrityError):
            WordHistoryService.record_review_batch(user.user_id, items, True, now=NOW)

        assert WordHistory.query.count() == 0

    def test_non_numeric_id_is_rejected(self, user):
        with pytest.raises(ValidationError):
            WordHistoryService.record_review_batch(user.user_id, [BatchWordEntry(id='abc')], True)

    def test_is_trackable(self):
        assert is_trackable(BatchWordEntry(id=3))
        assert is_trackable(BatchWordEntry(id='3'))
        assert not is_trackable(BatchWordEntry(id=None))
        assert not is_trackable(BatchWordEntry(id='extracted-3'))
        assert not is_trackable(BatchWordEntry(id=3, isExtracted=True))
        assert not is_trackable(BatchWordEntry(id=0))
        assert not is_trackable(BatchWordEntry(id='0'))

    def test_zero_ids_are_dropped_from_batch(self):
        entries = [BatchWordEntry(id=0), BatchWordEntry(id='0'), BatchWordEntry(id=5)]

        assert WordHistoryService.normalize_batch(entries) == [5]


class TestMembershipAndDueWords:

    def test_membership_does_not_count_as_review(self, user, german_words):
        word_id = german_words[2].word_id
        WordHistoryService.ensure_membership(user.user_id, word_id, next_review=NOW)
        db.session.commit()

        entry = WordHistoryService.get_entry(user.user_id, word_id)
        assert entry.review_count == 0

        entry = WordHistoryService.record_review(user.user_id, word_id, True, now=NOW)
        assert entry.review_count == 1

    def test_membership_keeps_existing_entry(self, user, german_words):
        word_id = german_words[0].word_id
        WordHistoryService.record_review(user.user_id, word_id, True, now=NOW)
        WordHistoryService.ensure_membership(user.user_id, word_id, next_review=NOW - timedelta(days=9))
        db.session.commit()

        entry = WordHistoryService.get_entry(user.user_id, word_id)
        assert entry.review_count == 1
        assert _naive(entry.next_review) == _naive(NOW + timedelta(days=3))

    def test_due_words_excludes_future_reviews(self, user, german_words):
        WordHistoryService.record_review(user.user_id, german_words[0].word_id, False, now=NOW)
        WordHistoryService.record_review(user.user_id, german_words[1].word_id, True, now=NOW)

        due = WordHistoryService.due_words(user.user_id, 'GERMAN', now=NOW + timedelta(days=2))

        assert [word['l2'] for word in due] == ['Brot']
        assert due[0]['examples'][0]['sentence'] == 'Ich esse Brot.'
        assert due[0]['history']['reviewCount'] == 1

    def test_due_words_filters_language(self, user, german_words):
        WordHistoryService.record_review(user.user_id, german_words[0].word_id, False, now=NOW)

        assert WordHistoryService.due_words(user.user_id, 'SPANISH', now=NOW + timedelta(days=5)) == []


class TestWordsApi:

    def test_track_word(self, auth_client, german_words):
        response = auth_client.post('/api/words/track', json={'wordId': german_words[0].word_id, 'correct': True})

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['wordHistory']['reviewCount'] == 1
        assert data['wordHistory']['masteryLevel'] == 1

    def test_track_word_requires_id(self, auth_client):
        response = auth_client.post('/api/words/track', json={'correct': True})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Word ID is required'

    def test_track_unknown_word_is_server_error(self, auth_client):
        response = auth_client.post('/api/words/track', json={'wordId': 777, 'correct': True})

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Failed to track word'

    def test_track_batch_with_only_extracted_words(self, auth_client):
        response = auth_client.post('/api/words/track-batch', json={
            'words': [{'id': 'extracted-1'}, {'id': 5, 'isExtracted': True}],
            'correct': True,
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'No trackable words'
        assert data['tracked'] == 0
        assert WordHistory.query.count() == 0

    def test_track_batch(self, auth_client, german_words):
        response = auth_client.post('/api/words/track-batch', json={
            'words': [{'id': word.word_id} for word in german_words] + [{'id': 'extracted-9'}],
            'correct': False,
        })

        data = response.get_json()
        assert data['message'] == 'Words tracked successfully'
        assert data['tracked'] == 3

    def test_due_words_endpoint(self, auth_client, user, german_words):
        WordHistoryService.record_review(
            user.user_id, german_words[0].word_id, False, now=datetime.now(timezone.utc) - timedelta(days=2)
        )

        response = auth_client.get('/api/words/due?limit=5')

        data = response.get_json()
        assert data['count'] == 1
        assert data['words'][0]['l2'] == 'Brot'

    def test_save_sentence(self, auth_client, german_words):
        response = auth_client.post('/api/sentences/save', json={
            'wordId': german_words[0].word_id,
            'sentence': '  Das Brot ist frisch.  ',
        })

        assert response.status_code == 200
        assert response.get_json()['userSentence']['sentence'] == 'Das Brot ist frisch.'

    def test_requires_authentication(self, client):
        response = client.post('/api/words/track', json={'wordId': 1})

        assert response.status_code == 401
