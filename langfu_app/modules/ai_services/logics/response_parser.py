"""
Response Parser - Pure functions that turn Gemini output into LangFu shapes.
"""
import json
import re
from typing import Any, Dict, List, Optional

MAX_SYNONYMS = 6

_FENCE_START = re.compile(r'^```\w*\s*')
_FENCE_END = re.compile(r'\s*```$')


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ''


class ResponseParser:

    @staticmethod
    def clean_markdown(text: str) -> str:
        """Strip a surrounding ```lang ... ``` fence."""
        if not text:
            return ""
        return _FENCE_END.sub('', _FENCE_START.sub('', text.strip())).strip()

    @staticmethod
    def extract_json(text: str) -> Optional[Any]:
        """
        Parse a JSON object or array out of model output.

        Tries the raw text, then the unfenced text, then the outermost
        ``{...}`` and ``[...]`` spans (models like to add prose around it).
        """
        if not text:
            return None

        candidates = [text, ResponseParser.clean_markdown(text)]
        for opener, closer in (('{', '}'), ('[', ']')):
            start, end = text.find(opener), text.rfind(closer)
            if start != -1 and end > start:
                candidates.append(text[start:end + 1])

        for candidate in candidates:
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                continue
        return None

    @staticmethod
    def sentence_pairs(items: Any) -> List[Dict[str, str]]:
        """Keep ``{"sentence", "translation"}`` dicts that have a sentence."""
        if not isinstance(items, list):
            return []
        return [
            {'sentence': item['sentence'], 'translation': _as_str(item.get('translation'))}
            for item in items
            if isinstance(item, dict) and _as_str(item.get('sentence'))
        ]

    @staticmethod
    def normalize_keyword(raw: Any) -> Optional[dict]:
        """Coerce one generated keyword into the story keyword shape; None if unusable."""
        if not isinstance(raw, dict):
            return None
        l2, l1 = _as_str(raw.get('l2')), _as_str(raw.get('l1'))
        if not (l2 and l1):
            return None

        synonyms = raw.get('synonyms')
        examples = raw.get('examples')
        item = {
            'l2': l2,
            'l1': l1,
            'synonyms': [s for s in synonyms if isinstance(s, str)][:MAX_SYNONYMS] if isinstance(synonyms, list) else [],
            'examples': [
                {'sentence': _as_str(e.get('sentence')), 'translation': _as_str(e.get('translation'))}
                for e in examples if isinstance(e, dict)
            ] if isinstance(examples, list) else [],
        }
        if isinstance(raw.get('pos'), str):
            item['pos'] = raw['pos']
        return item
