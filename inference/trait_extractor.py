"""
Trait Extractor: (question, answer) -> at most one validated Trait.

The oracle proposes a trait; the proposal is only accepted when
- its key is in the trait vocabulary and its value is not a placeholder
- the question itself mentions that key (no gender from a question about glasses)
- its polarity agrees with the answer, corrected through POLARITY_CORRECTIONS

A rule-based pass reads strict binary question shapes on its own and is used
only when the oracle produced nothing usable. "dont_know" never yields a trait.
"""

import re

from inference.config import DEDUCED_TRAIT_CONFIDENCE, DEFAULT_TRAIT_CONFIDENCE, RULE_TRAIT_CONFIDENCE
from inference.rules import (
    BLACKLISTED_VALUES,
    BLACKLISTED_VALUE_PREFIXES,
    BOOLEAN_TRAIT_KEYS,
    CATEGORY_VALUE_ALIASES,
    FANTASY_TERMS,
    FICTIONAL_CATEGORIES,
    FICTIONAL_ORIGIN_MEDIA,
    KEY_ALIASES,
    POLARITY_CORRECTIONS,
    REAL_PERSON_CATEGORIES,
    RULE_BASED_PATTERNS,
    TRAIT_KEYS,
    TRAIT_QUESTION_KEYWORDS,
)
from inference.text_match import contains_any, contains_term
from inference.topic_tracker import normalize_question
from knowledge.predicates import as_bool, canonical_medium, canonical_nationality
from observability.console import debug_log
from oracle.parsing import EmptyReply, TraitProposal
from session_state import ANSWER_VALUES, Trait, answer_polarity


MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.99
HEDGED_CONFIDENCE_CAP = 0.8

_POLARITY_RULES = tuple(
    (key, re.compile(pattern, flags=re.IGNORECASE), positive, negative)
    for key, pattern, positive, negative in POLARITY_CORRECTIONS
)
_RULE_PATTERNS = tuple(
    (key, re.compile(pattern, flags=re.IGNORECASE), positive, negative)
    for key, pattern, positive, negative in RULE_BASED_PATTERNS
)


def clamp_confidence(value):
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, float(value)))


def normalize_key(raw_key):
    key = re.sub(r"[^a-z0-9]+", "_", str(raw_key or "").strip().lower()).strip("_")
    return KEY_ALIASES.get(key, key)


def is_blacklisted_value(value):
    token = str(value or "").strip().lower()
    return token in BLACKLISTED_VALUES or token.startswith(BLACKLISTED_VALUE_PREFIXES)


def normalize_value(key, raw_value):
    value = " ".join(str(raw_value).strip().lower().split())
    if key in BOOLEAN_TRAIT_KEYS:
        parsed = as_bool(value)
        return None if parsed is None else ("true" if parsed else "false")
    if key == "category":
        return CATEGORY_VALUE_ALIASES.get(value, value)
    if key == "origin_medium":
        return canonical_medium(value)
    if key == "nationality":
        return canonical_nationality(value)
    return value


def question_mentions_key(question, key):
    keywords = TRAIT_QUESTION_KEYWORDS.get(key)
    if not keywords:
        return False
    return contains_any(question, keywords) or contains_any(normalize_question(question), keywords)


def _question_names_value(question, value):
    return contains_term(question, value) or (value.endswith("s") and contains_term(question, value[:-1]))


def correct_polarity(key, value, question, answer):
    """Return the value implied by (key, question wording, answer), or None when it must be dropped."""
    polarity = answer_polarity(answer)
    for rule_key, pattern, positive, negative in _POLARITY_RULES:
        if rule_key != key or not pattern.search(question):
            continue
        expected = positive if polarity == "positive" else negative
        if expected is None:
            # denied, and the key has no single opposite value
            return None if value == positive else value
        return expected
    if polarity == "negative" and _question_names_value(question, value):
        return None
    return value


def references_fantasy(trait):
    if trait.key == "has_powers" and trait.value == "true":
        return True
    return contains_any(trait.value.replace("-", " "), FANTASY_TERMS)


def rule_based_trait(question, answer, turn):
    polarity = answer_polarity(answer)
    if polarity is None:
        return None
    cleaned = " ".join(str(question).strip().lower().split())
    for key, pattern, positive, negative in _RULE_PATTERNS:
        if not pattern.search(cleaned):
            continue
        value = positive if polarity == "positive" else negative
        if value is None:
            continue
        confidence = RULE_TRAIT_CONFIDENCE
        if answer in {"probably", "probably_not"}:
            confidence = min(confidence, HEDGED_CONFIDENCE_CAP)
        return Trait(key=key, value=value, confidence=clamp_confidence(confidence), turn_added=turn)
    return None


def deduce_implied_traits(session, trait):
    """Traits that follow logically from a newly accepted one and are not yet in the ledger."""
    implied = []
    fictional_known = session.trait("fictional") is not None
    if not fictional_known:
        if trait.key == "origin_medium" and trait.value in FICTIONAL_ORIGIN_MEDIA:
            implied.append(("fictional", "true"))
        elif trait.key == "category" and trait.value in FICTIONAL_CATEGORIES:
            implied.append(("fictional", "true"))
        elif trait.key == "category" and trait.value in REAL_PERSON_CATEGORIES:
            implied.append(("fictional", "false"))
    if trait.key == "fictional" and trait.value == "false" and session.trait("species") is None:
        implied.append(("species", "human"))
    return [
        Trait(key=key, value=value, confidence=DEDUCED_TRAIT_CONFIDENCE, turn_added=trait.turn_added)
        for key, value in implied
        if key != trait.key
    ]


class TraitExtractor:
    def __init__(self, propose_fn=None, log_fn=None):
        # propose_fn(question, answer, existing_traits) -> TraitProposal | MalformedReply | EmptyReply
        self.propose_fn = propose_fn
        self.log_fn = log_fn or (lambda message: debug_log("EXTRACTOR", message))

    def _validate_proposal(self, proposal, question, answer, turn):
        if not isinstance(proposal, TraitProposal):
            self.log_fn(f"no usable oracle proposal for '{question}': {proposal!r}")
            return None

        key = normalize_key(proposal.key)
        if key not in TRAIT_KEYS:
            self.log_fn(f"rejected unknown trait key '{proposal.key}'")
            return None
        if is_blacklisted_value(proposal.value):
            self.log_fn(f"rejected placeholder value '{proposal.value}' for key '{key}'")
            return None
        if not question_mentions_key(question, key):
            self.log_fn(f"rejected key '{key}': question does not mention it ('{question}')")
            return None

        value = normalize_value(key, proposal.value)
        if value is None or is_blacklisted_value(value):
            self.log_fn(f"rejected value '{proposal.value}' for key '{key}'")
            return None

        corrected = correct_polarity(key, value, question, answer)
        if corrected is None:
            self.log_fn(f"dropped '{key}={value}': contradicts a negative answer")
            return None
        if corrected != value:
            self.log_fn(f"polarity corrected '{key}': {value} -> {corrected}")

        confidence = proposal.confidence if proposal.confidence is not None else DEFAULT_TRAIT_CONFIDENCE
        if answer in {"probably", "probably_not"}:
            confidence = min(confidence, HEDGED_CONFIDENCE_CAP)
        return Trait(key=key, value=corrected, confidence=clamp_confidence(confidence), turn_added=turn)

    def extract(self, question, answer, session=None):
        if answer not in ANSWER_VALUES:
            raise ValueError(f"unsupported answer '{answer}'")
        if answer == "dont_know":
            return None

        turn = session.turn_number if session is not None else 0
        existing = session.live_traits() if session is not None else []

        proposal = self.propose_fn(question, answer, existing) if self.propose_fn else EmptyReply()
        trait = self._validate_proposal(proposal, question, answer, turn)
        if trait is None:
            trait = rule_based_trait(question, answer, turn)
            if trait is not None:
                self.log_fn(f"rule-based trait {trait.key}={trait.value} from '{question}'")

        if trait is not None and session is not None and session.trait_value("fictional") == "false":
            if references_fantasy(trait):
                self.log_fn(f"rejected '{trait.key}={trait.value}' for a real person")
                return None
        return trait


__all__ = [
    "TraitExtractor",
    "clamp_confidence",
    "correct_polarity",
    "deduce_implied_traits",
    "is_blacklisted_value",
    "normalize_key",
    "normalize_value",
    "question_mentions_key",
    "references_fantasy",
    "rule_based_trait",
]
