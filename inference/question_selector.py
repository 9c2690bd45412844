"""
Question Selector: picks the next question, or decides it is time to guess.

Order of attempts each turn:
1. unique-role shortcut (a yes to "current <one-of-a-kind office>" names one person)
2. entropy question from the catalogue, while the candidate pool is large
3. direct guess of the top-ranked candidate, when the pool is small enough
4. the oracle's proposed question, if it survives every filter
5. fallback catalogue, then the extended list (never comes back empty)

Out of knowledge (no candidates even after relaxing) skips 1-4: broad questions
first, and from OUT_OF_KB_GUESS_TURN on the oracle may guess outside the store.
"""

import random
import re
from dataclasses import dataclass, field

from inference.config import (
    DIRECT_GUESS_CONFIDENCE,
    DIRECT_GUESS_CONFIDENT_POOL,
    DIRECT_GUESS_LATE_TURN,
    DIRECT_GUESS_MIN_TRAITS,
    DIRECT_GUESS_MIN_TRAITS_WITH_CATEGORY,
    DIRECT_GUESS_POOL,
    DIRECT_GUESS_SMALL_POOL,
    DIRECT_GUESS_SMALL_POOL_TURN,
    ENTROPY_MIN_POOL,
    ENTROPY_SAMPLE_LIMIT,
    ENTROPY_SAMPLE_SIZE,
    MAX_QUESTION_WORDS,
    OBSCURE_AWARD_TURN,
    OUT_OF_KB_GUESS_TURN,
    TURNS_BETWEEN_GUESSES,
    UNIQUE_ROLE_CONFIDENCE,
)
from inference.question_bank import (
    BROAD_QUESTIONS,
    CATEGORY_PROBES,
    ENTROPY_CATALOGUE,
    EXTENDED_QUESTIONS,
    FALLBACK_QUESTIONS,
)
from inference.rules import (
    ALIVE_PHRASES,
    CATEGORY_QUESTION_TERMS,
    CURRENT_OFFICE_PATTERN,
    DEATH_PHRASES,
    FANTASY_TERMS,
    FICTIONAL_ORIGIN_PHRASES,
    GENERIC_AWARD_PATTERN,
    NON_HUMAN_TERMS,
    OBSCURE_AWARD_PATTERN,
    OSCAR_PATTERN,
    REAL_WORLD_PHRASES,
    SUB_CATEGORY_CONFLICTS,
    UNIQUE_ROLES,
)
from inference.text_match import contains_any, contains_term
from inference.topic_tracker import find_redundancy, is_forbidden, normalize_question
from knowledge.predicates import as_bool
from knowledge.ranking import rank_candidates, score_subject_match
from observability.console import debug_log
from oracle.parsing import ValidReply
from session_state import Guess, NEGATIVE_ANSWERS, POSITIVE_ANSWERS


POWER_TERMS = ("superpower", "superpowers", "super powers", "powers", "abilities", "supernatural", "superhuman")

_FICTION_PROBE = re.compile(r"\b(fictional|real person|real|made[- ]up|imaginary|exist)\b", flags=re.IGNORECASE)
_GENDER_PROBE = re.compile(r"\b(male|female|man|woman|boy|girl|gender)\b", flags=re.IGNORECASE)
_OBSCURE_AWARD = re.compile(OBSCURE_AWARD_PATTERN, flags=re.IGNORECASE)
_GENERIC_AWARD = re.compile(GENERIC_AWARD_PATTERN, flags=re.IGNORECASE)
_OSCAR = re.compile(OSCAR_PATTERN, flags=re.IGNORECASE)
_CURRENT_OFFICE = re.compile(CURRENT_OFFICE_PATTERN, flags=re.IGNORECASE)
_UNIQUE_ROLES = tuple((role, re.compile(pattern, flags=re.IGNORECASE)) for role, pattern in UNIQUE_ROLES)
_NAME_QUESTION = re.compile(
    r"^(?:is|was) (?:your|the) character (?:actually |really )?(?P<name>[A-Z][\w.'\-]*(?: [A-Z][\w.'\-]*)*)\s*\??$"
)
_CATEGORY_PROBE_INDEX = {normalize_question(text): category for text, category in CATEGORY_PROBES.items()}


@dataclass
class Selection:
    question: str = None
    guesses: list = field(default_factory=list)
    is_guess: bool = False
    path: str = "fallback"
    out_of_knowledge: bool = False
    gave_up: bool = False


# --- skip rules ---

def _answered(session, polarity_set):
    return [turn.question.lower() for turn in session.turns if turn.answer in polarity_set]


def known_alive_status(session):
    value = as_bool(session.trait_value("is_alive", ""))
    if value is not None:
        return value
    for turn in reversed(session.turns):
        question = turn.question.lower()
        if turn.answer in POSITIVE_ANSWERS:
            if contains_any(question, ALIVE_PHRASES):
                return True
            if contains_any(question, DEATH_PHRASES):
                return False
        elif turn.answer in NEGATIVE_ANSWERS:
            if contains_any(question, ALIVE_PHRASES):
                return False
            if contains_any(question, DEATH_PHRASES):
                return True
    return None


def ruled_out_categories(session):
    ruled_out = set()
    for turn in session.turns:
        if turn.answer not in NEGATIVE_ANSWERS:
            continue
        category = _CATEGORY_PROBE_INDEX.get(normalize_question(turn.question))
        if category:
            ruled_out.add(category)
    confirmed = session.trait_value("category")
    if confirmed:
        ruled_out.update(category for category in CATEGORY_QUESTION_TERMS if category != confirmed)
    return ruled_out


def confirmed_keywords(session):
    sources = _answered(session, POSITIVE_ANSWERS) + [str(trait.value).lower() for trait in session.live_traits()]
    return {keyword for keyword in SUB_CATEGORY_CONFLICTS if any(contains_term(text, keyword) for text in sources)}


def skip_reason(question, session, pool_size=None):
    """Why a question is pointless given what is already known, or None."""
    text = question.lower()
    fictional = session.trait_value("fictional")

    if fictional == "false" and (contains_any(text, FANTASY_TERMS) or contains_any(text, FICTIONAL_ORIGIN_PHRASES)):
        return "fantasy vocabulary for a real person"
    if fictional is not None and _FICTION_PROBE.search(text):
        return "fictional status already known"
    if session.trait("gender") is not None and _GENDER_PROBE.search(text):
        return "gender already known"

    alive = known_alive_status(session)
    if alive is False and contains_any(text, ALIVE_PHRASES):
        return "already known to be dead"
    if alive is True and contains_any(text, DEATH_PHRASES):
        return "already known to be alive"

    if session.trait_value("has_powers") == "false" and contains_any(text, POWER_TERMS):
        return "has no powers"
    if session.trait_value("species") == "human" and contains_any(text, NON_HUMAN_TERMS):
        return "already known to be human"
    if fictional == "true" and contains_any(text, REAL_WORLD_PHRASES):
        return "real-world question for a fictional character"

    if _OBSCURE_AWARD.search(text):
        if session.turn_number < OBSCURE_AWARD_TURN and (pool_size is None or pool_size > ENTROPY_MIN_POOL):
            return "obscure award deferred"
    if session.trait_value("has_oscar") == "true" and _GENERIC_AWARD.search(text) and not _OSCAR.search(text):
        return "implied by an oscar win"

    confirmed_category = session.trait_value("category")
    for category in sorted(ruled_out_categories(session)):
        if not contains_any(text, CATEGORY_QUESTION_TERMS.get(category, ())):
            continue
        if confirmed_category and contains_any(text, CATEGORY_QUESTION_TERMS.get(confirmed_category, ())):
            continue
        return f"category '{category}' ruled out"

    for keyword in sorted(confirmed_keywords(session)):
        if contains_term(text, keyword):
            continue
        for sibling in SUB_CATEGORY_CONFLICTS[keyword]:
            if contains_term(text, sibling):
                return f"conflicts with confirmed '{keyword}'"
    return None


class QuestionSelector:
    def __init__(self, store, validator=None, log_fn=None):
        self.store = store
        self.validator = validator
        self.log_fn = log_fn or (lambda message: debug_log("SELECTOR", message))

    # --- shared filters ---

    def rejection_reason(self, question, session, pool_size=None):
        if not question or not question.strip():
            return "empty"
        if len(question.split()) > MAX_QUESTION_WORDS:
            return "too long"
        if is_forbidden(question):
            return "forbidden phrasing"
        redundant = find_redundancy(question, session.asked_questions(), session.confirmed_keys())
        if redundant:
            return redundant
        return skip_reason(question, session, pool_size)

    def _screen_guesses(self, guesses, session, traits=None):
        guesses = [guess for guess in guesses if not session.is_rejected(guess.name)]
        if self.validator is None or not guesses:
            return guesses
        traits = session.live_traits() if traits is None else traits
        return self.validator.filter_compatible(guesses, traits, session)

    # --- step 1 ---

    def unique_role_guess(self, candidates, session):
        rejections = len(session.rejected_guesses)
        if rejections and rejections <= 3:
            return None
        confirmed = _answered(session, POSITIVE_ANSWERS)
        if not any(_CURRENT_OFFICE.search(question) for question in confirmed):
            return None
        roles = [pattern for _, pattern in _UNIQUE_ROLES if any(pattern.search(q) for q in confirmed)]
        if not roles:
            return None

        def holds_role(subject):
            office = str(subject.attribute("office", "") or "")
            return bool(subject.attribute("in_office")) and any(pattern.search(office) for pattern in roles)

        for pool in (candidates, self.store):
            holders = [subject for subject in pool if holds_role(subject) and not session.is_rejected(subject.name)]
            if holders:
                holders.sort(key=lambda subject: (-subject.sitelinks, subject.name))
                guesses = self._screen_guesses(
                    [Guess(name=holders[0].name, confidence=UNIQUE_ROLE_CONFIDENCE)], session
                )
                if guesses:
                    return guesses[0]
        return None

    # --- step 2 ---

    def entropy_question(self, candidates, session):
        pool = list(candidates)
        if len(pool) > ENTROPY_SAMPLE_LIMIT:
            rng = random.Random(session.seed * 1000 + session.turn_number)
            pool = rng.sample(pool, ENTROPY_SAMPLE_SIZE)
        total = len(pool)
        if not total:
            return None

        fictional = as_bool(session.trait_value("fictional", ""))
        ruled_out = ruled_out_categories(session)
        best = None
        for entry in ENTROPY_CATALOGUE:
            if not entry.applies_to(fictional):
                continue
            if entry.category and entry.category in ruled_out:
                continue
            if self.rejection_reason(entry.text, session, len(candidates)) is not None:
                continue
            yes = sum(1 for subject in pool if entry.test(subject))
            if yes == 0 or yes == total:
                continue
            score = abs(0.5 - yes / total)
            if best is None or score < best[0]:
                best = (score, entry.text, yes)
        if best is None:
            return None
        self.log_fn(f"entropy pick '{best[1]}' splits {best[2]}/{total} (score {best[0]:.3f})")
        return best[1]

    # --- step 3 ---

    def should_guess_directly(self, pool_size, ranked, session):
        if not ranked:
            return False
        if pool_size <= DIRECT_GUESS_POOL:
            return True
        min_traits = DIRECT_GUESS_MIN_TRAITS_WITH_CATEGORY if session.trait("category") else DIRECT_GUESS_MIN_TRAITS
        if len(session.traits) < min_traits or session.turns_since_rejection() < TURNS_BETWEEN_GUESSES:
            return False
        turn = session.turn_number
        if pool_size <= DIRECT_GUESS_SMALL_POOL and turn >= DIRECT_GUESS_SMALL_POOL_TURN:
            return True
        if pool_size <= DIRECT_GUESS_CONFIDENT_POOL and ranked[0].confidence >= DIRECT_GUESS_CONFIDENCE:
            return True
        return pool_size <= DIRECT_GUESS_CONFIDENT_POOL and turn >= DIRECT_GUESS_LATE_TURN

    # --- step 4 ---

    def named_subject(self, question):
        """The name a question like "Is your character Tony Stark?" is really guessing, if any."""
        match = _NAME_QUESTION.match(question.strip())
        if not match:
            return None
        name = match.group("name").strip()
        subject = self.store.get(name) if self.store is not None else None
        if subject is not None:
            return subject.name
        if len(name.split()) >= 2:
            return name
        return None

    def _merge_oracle_guesses(self, ranked, oracle_guesses, candidates):
        candidate_names = {subject.name.lower() for subject in candidates}
        merged = list(ranked)
        seen = {guess.name.lower() for guess in merged}
        for guess in oracle_guesses:
            known = self.store.get(guess.name) if self.store is not None else None
            if known is not None and known.name.lower() not in candidate_names:
                continue
            name = known.name if known is not None else guess.name
            if name.lower() in seen:
                continue
            seen.add(name.lower())
            merged.append(Guess(name=name, confidence=guess.confidence, source=guess.source))
        merged.sort(key=lambda guess: -guess.confidence)
        return merged[:5]

    def oracle_selection(self, reply, candidates, ranked, session):
        if not isinstance(reply, ValidReply):
            self.log_fn(f"oracle proposal unusable: {reply!r}")
            return None

        question = reply.question.strip()
        if not question.endswith("?"):
            question += "?"

        name = self.named_subject(question)
        if name:
            if session.is_rejected(name):
                self.log_fn(f"oracle re-proposed rejected guess '{name}'")
                return None
            subject = self.store.get(name) if self.store is not None else None
            confidence = 0.5
            if subject is not None:
                confidence = min(0.9, score_subject_match(subject, session.live_traits()))
            guesses = self._screen_guesses([Guess(name=name, confidence=confidence, source="oracle")], session)
            if guesses:
                return Selection(question=None, guesses=guesses[:1], is_guess=True, path="oracle_guess")
            self.log_fn(f"oracle name question '{question}' failed validation")
            return None

        reason = self.rejection_reason(question, session, len(candidates))
        if reason:
            self.log_fn(f"oracle question rejected ({reason}): '{question}'")
            return None
        guesses = self._merge_oracle_guesses(ranked, self._screen_guesses(list(reply.guesses), session), candidates)
        return Selection(question=question, guesses=guesses, path="oracle")

    # --- step 5 ---

    def _first_acceptable(self, questions, session, pool_size):
        for question in questions:
            if self.rejection_reason(question, session, pool_size) is None:
                return question
        return None

    def fallback_question(self, session, pool_size=None, prefer_broad=False):
        ordered = (BROAD_QUESTIONS, FALLBACK_QUESTIONS) if prefer_broad else (FALLBACK_QUESTIONS,)
        for questions in ordered:
            question = self._first_acceptable(questions, session, pool_size)
            if question:
                return question

        offset = session.turn_number % len(EXTENDED_QUESTIONS)
        rotated = EXTENDED_QUESTIONS[offset:] + EXTENDED_QUESTIONS[:offset]
        question = self._first_acceptable(rotated, session, pool_size)
        if question:
            return question
        if not prefer_broad:
            question = self._first_acceptable(BROAD_QUESTIONS, session, pool_size)
            if question:
                return question
        self.log_fn("question lists exhausted")
        return None

    # --- entry points ---

    def beyond_knowledge_selection(self, session, propose_beyond):
        if propose_beyond is None:
            return None
        proposed = [
            Guess(name=guess.name, confidence=max(0.1, min(0.8, guess.confidence)) / 2.0, source="oracle")
            for guess in propose_beyond()
        ]
        guesses = self._screen_guesses(proposed, session)
        if not guesses:
            return None
        guesses.sort(key=lambda guess: -guess.confidence)
        return Selection(guesses=guesses[:3], is_guess=True, path="beyond_knowledge", out_of_knowledge=True)

    def exhausted_selection(self, session, ranked=(), propose_beyond=None, out_of_knowledge=False):
        """Every question list is used up: guess what is left, otherwise give up rather than repeat."""
        if ranked:
            return Selection(guesses=list(ranked[:1]), is_guess=True, path="exhausted_guess",
                             out_of_knowledge=out_of_knowledge)
        selection = self.beyond_knowledge_selection(session, propose_beyond)
        if selection is not None:
            return selection
        self.log_fn("nothing left to ask or guess")
        return Selection(path="exhausted", out_of_knowledge=out_of_knowledge, gave_up=True)

    def out_of_knowledge_selection(self, session, propose_beyond=None):
        if session.turn_number >= OUT_OF_KB_GUESS_TURN:
            selection = self.beyond_knowledge_selection(session, propose_beyond)
            if selection is not None:
                return selection
            # already asked this turn
            propose_beyond = None
        question = self.fallback_question(session, 0, prefer_broad=True)
        if question is None:
            return self.exhausted_selection(session, propose_beyond=propose_beyond, out_of_knowledge=True)
        return Selection(question=question, path="broad", out_of_knowledge=True)

    def select_next(self, filter_result, session, propose_question=None, propose_beyond=None):
        traits = session.live_traits()
        candidates = [subject for subject in filter_result.candidates if not session.is_rejected(subject.name)]

        unique = self.unique_role_guess(candidates, session)
        if unique is not None:
            return Selection(guesses=[unique], is_guess=True, path="unique_role")

        if filter_result.out_of_knowledge or not candidates:
            return self.out_of_knowledge_selection(session, propose_beyond)

        ranked = rank_candidates(
            candidates,
            traits,
            rejected_names=session.rejected_names(),
            confidence_factor=filter_result.confidence_factor,
        )
        # store candidates from a relaxed pass are checked without the trait that pass dropped
        screen_traits = traits
        if filter_result.relaxed and filter_result.dropped_trait is not None:
            screen_traits = [trait for trait in traits if trait.key != filter_result.dropped_trait.key]
        ranked = self._screen_guesses(ranked, session, screen_traits)

        if len(candidates) > ENTROPY_MIN_POOL:
            question = self.entropy_question(candidates, session)
            if question:
                return Selection(question=question, guesses=ranked, path="entropy")

        if self.should_guess_directly(len(candidates), ranked, session):
            return Selection(guesses=ranked[:1], is_guess=True, path="direct_guess")

        if propose_question is not None:
            selection = self.oracle_selection(propose_question(candidates), candidates, ranked, session)
            if selection is not None:
                return selection

        question = self.fallback_question(session, len(candidates))
        if question is None:
            return self.exhausted_selection(session, ranked, propose_beyond)
        return Selection(question=question, guesses=ranked, path="fallback")


__all__ = [
    "POWER_TERMS",
    "QuestionSelector",
    "Selection",
    "confirmed_keywords",
    "known_alive_status",
    "ruled_out_categories",
    "skip_reason",
]
