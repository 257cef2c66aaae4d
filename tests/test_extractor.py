"""
Tests for the web page text processing used by vocabulary extraction.
"""

import pytest

from langfu_app.models import Language
from langfu_app.modules.vocabulary.logics.extractor import (
    context_snippet,
    detect_language,
    estimate_level,
    extract_keywords,
    extract_title,
    html_to_text,
    rank_difficulty,
)


GERMAN_TEXT = (
    'Der Hund und die Katze sind im Garten. Der Hund ist groß und die Katze ist klein. '
    'Das Wetter ist schön.'
)
SPANISH_TEXT = (
    'El perro y la gata están en el jardín. El perro es grande y la gata es pequeña. '
    'La casa de mi familia es muy bonita.'
)


class TestHtmlProcessing:

    def test_html_to_text_drops_scripts_styles_and_tags(self):
        markup = (
            '<html><head><style>p { color: red; }</style><script>var x = "<b>";</script></head>'
            '<body><p>Guten&nbsp;Tag</p>\n<div>Welt</div></body></html>'
        )

        assert html_to_text(markup) == 'Guten Tag Welt'

    def test_extract_title(self):
        assert extract_title('<title> Nachrichten &amp; Wetter </title>') == 'Nachrichten & Wetter'

    def test_missing_title(self):
        assert extract_title('<p>no title</p>') == 'Untitled'


class TestDetectLanguage:

    def test_german(self):
        assert detect_language(GERMAN_TEXT) is Language.GERMAN

    def test_spanish(self):
        assert detect_language(SPANISH_TEXT) is Language.SPANISH

    def test_too_few_markers(self):
        assert detect_language('Der Hund.') is None

    def test_english_is_not_detected(self):
        assert detect_language('The quick brown fox jumps over the lazy dog ' * 5) is None


class TestExtractKeywords:

    def test_ranks_by_frequency_then_first_appearance(self):
        keywords = extract_keywords(GERMAN_TEXT, Language.GERMAN)

        assert keywords == ['hund', 'katze', 'garten', 'groß', 'klein', 'wetter', 'schön']

    def test_skips_stop_words_short_words_and_numbers(self):
        keywords = extract_keywords('und die im 2024 abc123 Berlin Berlin', Language.GERMAN)

        assert keywords == ['berlin']

    def test_limit(self):
        text = 'haus baum katze vogel fisch'

        assert extract_keywords(text, Language.GERMAN, limit=2) == ['haus', 'baum']


class TestLevelAndDifficulty:

    @pytest.mark.parametrize('words, level', [
        ([], 'A1'),
        (['haus'], 'A1'),
        (['garten'], 'B1'),
        (['zeitung', 'zeitungs'], 'B2'),
        (['zeitung', 'kartoffel'], 'C1'),
        (['verantwortung'], 'C2'),
    ])
    def test_estimate_level(self, words, level):
        assert estimate_level(words) == level

    def test_rank_difficulty(self):
        assert [rank_difficulty(i) for i in (0, 9, 10, 19, 20, 29)] == [1, 1, 2, 2, 3, 3]

    def test_context_snippet(self):
        text = 'x' * 80 + ' Zeitung ' + 'y' * 150

        snippet = context_snippet(text, 'zeitung')

        assert snippet.startswith('x' * 49 + ' ')
        assert 'Zeitung' in snippet
        assert len(snippet) == 150
