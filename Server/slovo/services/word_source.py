"""
Word Source

Vocabulary lookup and random secret selection per (language, word length).
"""

import random
import unicodedata
from typing import Dict, Iterable, List, Optional

from ..config.game_settings import ALPHABETS, LETTER_FOLDS, load_vocabularies


def split_letters(word: str) -> List[str]:
    """
    Split a word into letters.

    Input is NFC-normalized first so a letter typed as base + combining mark
    (for example ``и`` + breve) counts as the single letter ``й``.
    """
    return list(unicodedata.normalize('NFC', word))


class WordSource:
    """
    In-memory vocabulary per language and word length.

    Entries are normalized on load (lowercase, letter variants folded),
    filtered to the length they are filed under, and de-duplicated while
    keeping their order so random picks are uniform over distinct words.
    """

    def __init__(self, vocabularies: Dict[str, Dict[int, Iterable[str]]], rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._words: Dict[str, Dict[int, List[str]]] = {}
        self._lookup: Dict[str, Dict[int, frozenset]] = {}

        for language, by_length in vocabularies.items():
            if language not in ALPHABETS:
                raise ValueError(f"Unsupported language: '{language}'")
            self._words[language] = {}
            self._lookup[language] = {}
            for length, words in by_length.items():
                unique = list(dict.fromkeys(
                    normalized for normalized in (self.normalize(word, language) for word in words)
                    if len(normalized) == int(length)
                ))
                self._words[language][int(length)] = unique
                self._lookup[language][int(length)] = frozenset(unique)

    @classmethod
    def from_file(cls, path: Optional[str] = None, rng: Optional[random.Random] = None) -> 'WordSource':
        return cls(load_vocabularies(path), rng=rng)

    @property
    def languages(self) -> List[str]:
        return sorted(self._words)

    def supports(self, language: str) -> bool:
        return language in ALPHABETS

    def word_lengths(self, language: str) -> List[int]:
        return sorted(length for length, words in self._words.get(language, {}).items() if words)

    def normalize(self, word: str, language: str) -> str:
        """Strip, NFC-normalize, lowercase and fold letter variants."""
        normalized = unicodedata.normalize('NFC', word.strip()).lower()
        folds = LETTER_FOLDS.get(language, {})
        if folds:
            normalized = ''.join(folds.get(char, char) for char in normalized)
        return normalized

    def is_in_alphabet(self, word: str, language: str) -> bool:
        """True if every letter of the normalized ``word`` is in the language alphabet."""
        alphabet = ALPHABETS.get(language)
        if not alphabet:
            return False
        return all(char in alphabet for char in split_letters(self.normalize(word, language)))

    def is_valid(self, word: str, language: str, length: int) -> bool:
        """True iff ``word`` has exactly ``length`` letters and is a known word."""
        if not isinstance(word, str):
            return False
        normalized = self.normalize(word, language)
        if len(split_letters(normalized)) != length:
            return False
        return normalized in self._lookup.get(language, {}).get(length, frozenset())

    def pick_random(self, language: str, length: int) -> Optional[str]:
        """A uniformly chosen word of ``length`` letters, or None if there is none."""
        words = self._words.get(language, {}).get(length)
        if not words:
            return None
        return self._rng.choice(words)
