"""
Scoring Engine

Implements guess evaluation in two conventions:

- positional (Wordle-style): each position is ``exact``, ``present`` or
  ``absent``;
- bulls and cows: only the counts of right-place and wrong-place letters.

Every secret letter satisfies at most one guessed letter, and exact matches
are resolved before any ``present`` match consumes the remaining letters.
Both functions are pure.
"""

from collections import Counter
from typing import List, Optional, Tuple

from ..exceptions import InvalidLengthError
from ..models.game import Feedback, FeedbackMark, FeedbackMode
from .word_source import split_letters


def _letters_of_equal_length(secret: str, guess: str) -> Tuple[List[str], List[str]]:
    secret_letters = split_letters(secret)
    guess_letters = split_letters(guess)
    if len(secret_letters) != len(guess_letters):
        raise InvalidLengthError(
            f"Guess must be exactly {len(secret_letters)} letters, got {len(guess_letters)}"
        )
    return secret_letters, guess_letters


def score_positional(secret: str, guess: str) -> Tuple[FeedbackMark, ...]:
    """
    Per-position feedback for ``guess`` against ``secret``.

    First pass marks exact matches and consumes those secret letters. Second
    pass walks the remaining guess letters left to right; each takes the
    first unconsumed equal secret letter (``present``) or is ``absent``.

    Example:
        score_positional("молоко", "колмоо") ->
        (present, exact, exact, present, present, exact)
    """
    secret_letters, guess_letters = _letters_of_equal_length(secret, guess)

    remaining: List[Optional[str]] = list(secret_letters)
    result: List[Optional[FeedbackMark]] = [None] * len(guess_letters)

    # First pass: exact position matches
    for i, letter in enumerate(guess_letters):
        if letter == secret_letters[i]:
            result[i] = FeedbackMark.EXACT
            remaining[i] = None

    # Second pass: present letters take the first unconsumed occurrence
    for i, letter in enumerate(guess_letters):
        if result[i] is not None:
            continue
        if letter in remaining:
            result[i] = FeedbackMark.PRESENT
            remaining[remaining.index(letter)] = None
        else:
            result[i] = FeedbackMark.ABSENT

    return tuple(result)


def score_bulls_and_cows(secret: str, guess: str) -> Tuple[int, int]:
    """
    Aggregate feedback as ``(bulls, cows)``.

    Bulls are equal positions. Cows are the size of the multiset
    intersection of the letters left over on each side.
    """
    secret_letters, guess_letters = _letters_of_equal_length(secret, guess)

    bulls = 0
    secret_rest: Counter = Counter()
    guess_rest: Counter = Counter()
    for secret_letter, guess_letter in zip(secret_letters, guess_letters):
        if secret_letter == guess_letter:
            bulls += 1
        else:
            secret_rest[secret_letter] += 1
            guess_rest[guess_letter] += 1

    cows = sum((secret_rest & guess_rest).values())
    return bulls, cows


def evaluate_guess(secret: str, guess: str, mode: FeedbackMode = FeedbackMode.POSITIONAL) -> Feedback:
    """Score ``guess`` in the given mode."""
    if mode == FeedbackMode.POSITIONAL:
        marks = score_positional(secret, guess)
        return Feedback(
            mode=mode,
            length=len(marks),
            bulls=marks.count(FeedbackMark.EXACT),
            cows=marks.count(FeedbackMark.PRESENT),
            marks=marks,
        )

    bulls, cows = score_bulls_and_cows(secret, guess)
    return Feedback(mode=mode, length=len(split_letters(secret)), bulls=bulls, cows=cows)
