"""
State container for the list of extractions shown to a learner.

Deletions are applied to the list before the server confirms them; if the
server call fails the removed entry is put back. Instances are created and
passed around by the caller, there is no shared module-level store.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional


def _sort_key(entry: Dict[str, Any]):
    extracted_at = entry.get('extractedAt')
    if isinstance(extracted_at, str):
        try:
            extracted_at = datetime.fromisoformat(extracted_at.replace('Z', '+00:00'))
        except ValueError:
            extracted_at = None
    timestamp = extracted_at.timestamp() if isinstance(extracted_at, datetime) else float('-inf')
    return timestamp


class ExtractedVocabularyStore:
    """Newest-first list of extraction dicts with tentative removal and rollback."""

    def __init__(self, extractions: Optional[List[Dict[str, Any]]] = None):
        self._extractions: List[Dict[str, Any]] = []
        self.is_loading = False
        if extractions:
            self.set_extractions(extractions)

    @property
    def extractions(self) -> List[Dict[str, Any]]:
        return list(self._extractions)

    def __len__(self):
        return len(self._extractions)

    def set_extractions(self, extractions: List[Dict[str, Any]]) -> None:
        self._extractions = sorted(extractions, key=_sort_key, reverse=True)

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def remove_tentatively(self, extraction_id) -> Optional[Dict[str, Any]]:
        """Remove an entry and return it so a failed delete can be rolled back."""
        for index, entry in enumerate(self._extractions):
            if entry.get('id') == extraction_id:
                return self._extractions.pop(index)
        return None

    def rollback(self, entry: Optional[Dict[str, Any]]) -> None:
        """Restore a tentatively removed entry at its newest-first position."""
        if entry is None:
            return
        if any(existing.get('id') == entry.get('id') for existing in self._extractions):
            return
        self.set_extractions(self._extractions + [entry])
