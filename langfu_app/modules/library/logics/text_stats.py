"""Word count and summary helpers for story text."""

SUMMARY_WORDS = 10


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def summarize(text: str, max_words: int = SUMMARY_WORDS) -> str:
    """First ``max_words`` whitespace-separated words, joined by single spaces."""
    if not text:
        return ''
    return ' '.join(text.split()[:max_words])
