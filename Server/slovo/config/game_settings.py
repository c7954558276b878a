"""
Game Configuration Constants Module

This module defines the game constants: supported languages with their
alphabets and letter folds, word length bounds, and the bundled vocabulary.
"""

import json
import os
from typing import Dict, Final, FrozenSet, List, Optional

# Room Configuration Constants
MAX_PLAYERS_PER_ROOM: Final[int] = 5
"""Default room capacity; overridden by ``ROOM_CAPACITY``."""

MIN_WORD_LENGTH: Final[int] = 2
MAX_WORD_LENGTH: Final[int] = 15

# Letters accepted in guesses, after case and variant folding
ALPHABETS: Final[Dict[str, FrozenSet[str]]] = {
    'ru': frozenset('абвгдежзийклмнопрстуфхцчшщъыьэюя'),
    'en': frozenset('abcdefghijklmnopqrstuvwxyz'),
}

# Letter variants folded to their base letter before lookup
LETTER_FOLDS: Final[Dict[str, Dict[str, str]]] = {
    'ru': {'ё': 'е'},
    'en': {},
}

DEFAULT_WORD_LIST_PATH: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'words.json'
)


def load_vocabularies(path: Optional[str] = None) -> Dict[str, Dict[int, List[str]]]:
    """
    Load vocabularies from a JSON file.

    The file maps language -> word length -> list of words, for example
    ``{"ru": {"6": ["яблоко", "молоко"]}}``. Lengths are JSON object keys and
    therefore strings in the file; they are returned as ints.

    Args:
        path: JSON file to read, defaults to the bundled ``words.json``

    Returns:
        Dict[str, Dict[int, List[str]]]: raw word lists per (language, length)

    Raises:
        FileNotFoundError: If the word list file is missing
        ValueError: If the file is malformed or names an unknown language
    """
    json_file_path = path or DEFAULT_WORD_LIST_PATH

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {json_file_path}: {e}")

    if not isinstance(raw, dict):
        raise ValueError("Word list file must contain an object keyed by language")

    vocabularies: Dict[str, Dict[int, List[str]]] = {}
    for language, by_length in raw.items():
        if language not in ALPHABETS:
            raise ValueError(f"Unsupported language in word list: '{language}'")
        if not isinstance(by_length, dict):
            raise ValueError(f"Words for '{language}' must be keyed by word length")

        vocabularies[language] = {}
        for length, words in by_length.items():
            try:
                length_value = int(length)
            except ValueError:
                raise ValueError(f"Invalid word length '{length}' for '{language}'")
            if not isinstance(words, list):
                raise ValueError(f"Words for '{language}'/{length} must be an array")
            vocabularies[language][length_value] = [str(word) for word in words]

    return vocabularies


def validate_vocabulary_integrity(vocabularies: Dict[str, Dict[int, List[str]]]) -> bool:
    """
    Validates a loaded vocabulary.

    Checks that every entry has the length it is filed under, is lowercase,
    and uses only the language's alphabet (letter variants allowed).

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    for language, by_length in vocabularies.items():
        allowed = ALPHABETS[language] | set(LETTER_FOLDS[language])
        for length, words in by_length.items():
            if not MIN_WORD_LENGTH <= length <= MAX_WORD_LENGTH:
                raise ValueError(f"Word length {length} for '{language}' is out of bounds")
            for index, word in enumerate(words):
                if len(word) != length:
                    raise ValueError(
                        f"Word at {language}/{length}[{index}] '{word}' is not {length} characters long"
                    )
                if word != word.lower():
                    raise ValueError(f"Word at {language}/{length}[{index}] '{word}' is not lowercase")
                if not set(word) <= allowed:
                    raise ValueError(
                        f"Word at {language}/{length}[{index}] '{word}' contains letters outside the alphabet"
                    )
    return True


def get_word_statistics(vocabularies: Dict[str, Dict[int, List[str]]]) -> dict:
    """Word counts per language and length, plus the most common letters."""
    stats = {}
    for language, by_length in vocabularies.items():
        letter_frequency: Dict[str, int] = {}
        for words in by_length.values():
            for word in words:
                for char in word:
                    letter_frequency[char] = letter_frequency.get(char, 0) + 1
        stats[language] = {
            'words_by_length': {length: len(set(words)) for length, words in sorted(by_length.items())},
            'most_common_letters': sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5],
        }
    return stats


if __name__ == "__main__":

    try:
        loaded = load_vocabularies()
        validate_vocabulary_integrity(loaded)
        print(" Word list validation passed")
        print(f" Word statistics: {get_word_statistics(loaded)}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
