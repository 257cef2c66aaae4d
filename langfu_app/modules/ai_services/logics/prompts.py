# File: langfu_app/modules/ai_services/logics/prompts.py
# Prompt templates for the generation endpoints.

EXAMPLES_PROMPT = (
    'Generate 5 example sentences in {language} using the word "{word}" ({translation}). '
    'The word is a {pos}. Make the sentences varied in difficulty but appropriate for language learners. '
    'Format your response as a JSON array with objects containing "sentence" and "translation" fields.'
)

TOPIC_PACKAGE_PROMPT = """You are a language tutor creating study material for a learner at CEFR level {level} learning {language}.

Create a vivid short story about the topic: "{topic}" in {language}. Length target: 800-1200 characters. The story must be suitable for level {level} but rich enough for learning.

Then select {num_keywords} important vocabulary items from the story that are most educational for a learner at this level. For each keyword, provide:
- the word/phrase in {language}
- a concise English translation
- part of speech (pos)
- 2 example sentences in {language} with English translations
- 3-6 synonyms in {language}

Output strictly as minified JSON with the following schema and nothing else:
{{
  "story": "string ({language})",
  "keywords": [
    {{
      "l2": "string ({language})",
      "l1": "string (English)",
      "pos": "noun|verb|adj|adv|phrase|...",
      "synonyms": ["string", "string", "string"],
      "examples": [
        {{ "sentence": "string ({language})", "translation": "English" }},
        {{ "sentence": "string ({language})", "translation": "English" }}
      ]
    }}
  ]
}}"""

VALIDATE_SENTENCE_PROMPT = (
    'Evaluate this {language} sentence: "{sentence}"\n'
    'The sentence should correctly use the word "{word}".\n\n'
    'Respond with a JSON object containing:\n'
    '- "valid": boolean (true if grammatically correct and word is used properly)\n'
    '- "feedback": string (brief encouraging feedback or correction suggestion)'
)


def build_examples_prompt(word: str, translation: str, language: str, pos: str = None) -> str:
    return EXAMPLES_PROMPT.format(word=word, translation=translation, language=language, pos=pos or 'word')


def build_topic_package_prompt(topic: str, level: str, language: str, num_keywords: int) -> str:
    return TOPIC_PACKAGE_PROMPT.format(topic=topic, level=level, language=language, num_keywords=num_keywords)


def build_validate_sentence_prompt(sentence: str, word: str, language: str) -> str:
    return VALIDATE_SENTENCE_PROMPT.format(sentence=sentence, word=word, language=language)
