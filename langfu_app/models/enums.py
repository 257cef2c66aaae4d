"""Enumerations shared by the models and the API layer."""

from enum import Enum


class Language(str, Enum):
    GERMAN = "GERMAN"
    SPANISH = "SPANISH"

    @property
    def display_name(self) -> str:
        return "German" if self is Language.GERMAN else "Spanish"

    @classmethod
    def parse(cls, value) -> "Language":
        """Accept enum members, 'GERMAN'/'german', raising ValueError otherwise."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class CEFRLevel(str, Enum):
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


# Numeric difficulty used when importing vocabulary
LEVEL_DIFFICULTY = {
    CEFRLevel.A1.value: 1,
    CEFRLevel.A2.value: 2,
    CEFRLevel.B1.value: 3,
    CEFRLevel.B2.value: 4,
    CEFRLevel.C1.value: 5,
    CEFRLevel.C2.value: 6,
}
