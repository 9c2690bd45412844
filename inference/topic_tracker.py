"""
Topic Tracker: decides whether a candidate question repeats ground already covered.

A candidate is redundant when any of these holds against the asked questions:
- it is the same question after normalization
- lexical overlap: two or more shared content words (synonyms folded together),
  or the shared words cover at least 80% of either question
- it uses the vocabulary of a trait key that is already settled
- it falls in a topic realm already touched without being strictly more
  specific than what was asked there ("blonde hair" then "distinctive hair")

Forbidden phrasings are a separate hard filter, see `is_forbidden`.
"""

import re

from inference.rules import (
    FORBIDDEN_QUESTION_PATTERNS,
    NORMALIZATION_REPLACEMENTS,
    STOP_WORDS,
    SYNONYM_GROUPS,
    TOPIC_REALMS,
    TRAIT_KEY_VOCABULARY,
)
from inference.text_match import contains_any


MIN_SHARED_WORDS = 2
COVERAGE_THRESHOLD = 0.8

SYNONYM_INDEX = {word: group[0] for group in SYNONYM_GROUPS for word in group}
_FORBIDDEN = tuple(re.compile(pattern, flags=re.IGNORECASE) for pattern in FORBIDDEN_QUESTION_PATTERNS)
_NORMALIZERS = tuple((re.compile(pattern), replacement) for pattern, replacement in NORMALIZATION_REPLACEMENTS)


def _singularize_token(token):
    if len(token) > 4 and token.endswith("ies"):
        return token[:-3] + "y"
    if len(token) > 4 and token.endswith("es"):
        return token[:-2]
    if len(token) > 3 and token.endswith("s") and not token.endswith("ss"):
        return token[:-1]
    return token


def canonical_word(word):
    if word in SYNONYM_INDEX:
        return SYNONYM_INDEX[word]
    singular = _singularize_token(word)
    return SYNONYM_INDEX.get(singular, singular)


def normalize_question(question):
    text = str(question or "").lower()
    for pattern, replacement in _NORMALIZERS:
        text = pattern.sub(replacement, text)
    text = re.sub(r"[^a-z0-9\s]", "", text)
    return " ".join(text.split())


def content_words(question):
    text = re.sub(r"[^a-z0-9\s]", " ", str(question or "").lower().replace(".", ""))
    words = set()
    for token in text.split():
        if len(token) < 2 or token in STOP_WORDS:
            continue
        words.add(canonical_word(token))
    return words


_KEY_VOCABULARY = {
    key: {canonical_word(word) for word in words} for key, words in TRAIT_KEY_VOCABULARY.items()
}


def classify_realms(question):
    """Map each topic realm the question touches to its specificity (1 broad .. 3 named value)."""
    realms = {}
    for realm, levels in TOPIC_REALMS.items():
        best = 0
        for level, terms in levels.items():
            if level > best and contains_any(question, terms):
                best = level
        if best:
            realms[realm] = best
    return realms


def is_forbidden(question):
    return any(pattern.search(question or "") for pattern in _FORBIDDEN)


def lexical_overlap(candidate_words, asked_words):
    if not candidate_words or not asked_words:
        return False
    shared = candidate_words & asked_words
    if len(shared) >= MIN_SHARED_WORDS:
        return True
    if not shared:
        return False
    return (
        len(shared) / len(candidate_words) >= COVERAGE_THRESHOLD
        or len(shared) / len(asked_words) >= COVERAGE_THRESHOLD
    )


def settled_key_for(candidate_words, confirmed_keys):
    for key in sorted(confirmed_keys):
        vocabulary = _KEY_VOCABULARY.get(key)
        if vocabulary and candidate_words & vocabulary:
            return key
    return None


def find_redundancy(candidate, asked_questions, confirmed_keys=()):
    """Return a short reason when the candidate is redundant, else None."""
    normalized = normalize_question(candidate)
    candidate_words = content_words(candidate)
    candidate_realms = classify_realms(candidate)

    settled = settled_key_for(candidate_words, confirmed_keys)
    if settled:
        return f"trait key '{settled}' already settled"

    touched = {}
    for asked in asked_questions:
        if normalize_question(asked) == normalized:
            return f"duplicate of '{asked}'"
        if lexical_overlap(candidate_words, content_words(asked)):
            return f"overlaps '{asked}'"
        for realm, level in classify_realms(asked).items():
            touched[realm] = max(level, touched.get(realm, 0))

    for realm, level in candidate_realms.items():
        if realm in touched and level <= touched[realm]:
            return f"realm '{realm}' already covered at specificity {touched[realm]}"
    return None


def is_redundant(candidate, asked_questions, confirmed_keys=()):
    return find_redundancy(candidate, asked_questions, confirmed_keys) is not None


__all__ = [
    "canonical_word",
    "classify_realms",
    "content_words",
    "find_redundancy",
    "is_forbidden",
    "is_redundant",
    "lexical_overlap",
    "normalize_question",
    "settled_key_for",
]
