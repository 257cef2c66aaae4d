"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker namespaces so modules can react to each other's events
without importing each other.

Usage:
    # Publisher (sender)
    from langfu_app.core.signals import word_reviewed
    word_reviewed.send(None, user_id=1, word_id=42, correct=True)

    # Subscriber (receiver)
    @word_reviewed.connect
    def on_word_reviewed(sender, **kwargs):
        ...
"""
from blinker import Namespace

learning_signals = Namespace()

# Fired after a word review is written to the ledger
# Payload: user_id, word_id, correct, review_count, mastery_level
word_reviewed = learning_signals.signal('word_reviewed')

# Fired after a practice session result is applied to Progress
# Payload: user_id, language, words_learned, score
session_completed = learning_signals.signal('session_completed')

# ============================================
# Account Signals
# ============================================
account_signals = Namespace()

# Payload: user
user_registered = account_signals.signal('user_registered')

# Payload: user
user_logged_in = account_signals.signal('user_logged_in')

# ============================================
# Content Signals
# ============================================
content_signals = Namespace()

# Payload: user_id, content_type ('story', 'vocabulary_set', 'extraction'), content_id, items_count
content_created = content_signals.signal('content_created')

# Payload: user_id, content_type, content_id
content_deleted = content_signals.signal('content_deleted')
