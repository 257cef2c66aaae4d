"""Deterministic content returned when the AI service is unavailable."""

from typing import Dict, List

from langfu_app.models import Language

GERMAN_EXAMPLES = (
    'Ich verwende {word} jeden Tag.',
    '{word} ist sehr wichtig.',
    'Kannst du {word} verstehen?',
    'Wir lernen {word} zusammen.',
    'Das {word} ist interessant.',
)
SPANISH_EXAMPLES = (
    'Yo uso {word} cada día.',
    '{word} es muy importante.',
    '¿Puedes entender {word}?',
    'Aprendemos {word} juntos.',
    'El {word} es interesante.',
)
ENGLISH_TRANSLATIONS = (
    'I use {word} every day.',
    '{word} is very important.',
    'Can you understand {word}?',
    'We learn {word} together.',
    'The {word} is interesting.',
)

SAMPLE_KEYWORDS = {
    Language.GERMAN: (
        {'l2': 'Geschichte', 'l1': 'story', 'pos': 'noun'},
        {'l2': 'lernen', 'l1': 'to learn', 'pos': 'verb'},
        {'l2': 'einfach', 'l1': 'simple', 'pos': 'adjective'},
        {'l2': 'Wortschatz', 'l1': 'vocabulary', 'pos': 'noun'},
        {'l2': 'Thema', 'l1': 'topic', 'pos': 'noun'},
    ),
    Language.SPANISH: (
        {'l2': 'historia', 'l1': 'story', 'pos': 'noun'},
        {'l2': 'aprender', 'l1': 'to learn', 'pos': 'verb'},
        {'l2': 'simple', 'l1': 'simple', 'pos': 'adjective'},
        {'l2': 'vocabulario', 'l1': 'vocabulary', 'pos': 'noun'},
        {'l2': 'tema', 'l1': 'topic', 'pos': 'noun'},
    ),
}

MISSING_WORD_FEEDBACK = 'Your sentence must include the word "{word}".'
OFFLINE_VALID_FEEDBACK = 'Good! Your sentence includes the target word.'
FAILED_VALID_FEEDBACK = 'Your sentence includes the target word. Keep practicing!'


def fallback_examples(word: str, translation: str, language: Language) -> Dict[str, List[str]]:
    templates = GERMAN_EXAMPLES if language == Language.GERMAN else SPANISH_EXAMPLES
    return {
        'examples': [template.format(word=word) for template in templates],
        'translations': [template.format(word=translation) for template in ENGLISH_TRANSLATIONS],
    }


def _story(topic: str, level: str, language: Language) -> str:
    if language == Language.GERMAN:
        return (
            f'Dies ist eine kurze {level}-Geschichte über {topic}. Sie verwendet einfache Sätze und '
            'häufige Wörter, damit Lernende den Text leicht verstehen können. Die Geschichte hilft '
            'dabei, wichtige Vokabeln im Kontext zu lernen.'
        )
    return (
        f'Esta es una breve historia de nivel {level} sobre {topic}. Usa oraciones simples y palabras '
        'comunes para que los estudiantes puedan entender el texto fácilmente. La historia ayuda a '
        'aprender vocabulario importante en contexto.'
    )


def _keyword_examples(word: str, translation: str, topic: str, language: Language) -> List[dict]:
    if language == Language.GERMAN:
        return [
            {'sentence': f'Dies ist eine {word} für {topic}.', 'translation': f'This is a {translation} for {topic}.'},
            {'sentence': f'Mit einer {word} lerne ich schneller.', 'translation': f'With a {translation} I learn faster.'},
        ]
    return [
        {'sentence': f'Esta es una {word} sobre {topic}.', 'translation': f'This is a {translation} about {topic}.'},
        {'sentence': f'Con una {word} aprendo más rápido.', 'translation': f'With a {translation} I learn faster.'},
    ]


def fallback_topic_package(topic: str, level: str, language: Language, num_keywords: int) -> dict:
    keywords = [
        {**sample, 'synonyms': [], 'examples': _keyword_examples(sample['l2'], sample['l1'], topic, language)}
        for sample in SAMPLE_KEYWORDS[language][:num_keywords]
    ]
    return {'story': _story(topic, level, language), 'keywords': keywords}
