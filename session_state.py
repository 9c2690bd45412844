"""
Session state for one guessing game.

The Session owns everything that changes while a game is played:
- the Trait Ledger (at most one live Trait per key, most recent last)
- the append-only Turn history
- rejected guesses, each with the Trait snapshot taken when it was rejected
- questions answered "don't know"
- per-session caches (external guess lookups) that die with the session

A new game means `reset()`, which clears all of the above and draws a fresh seed.
"""

import random
from dataclasses import dataclass, field


ANSWER_VALUES = ("yes", "no", "probably", "probably_not", "dont_know")
POSITIVE_ANSWERS = frozenset({"yes", "probably"})
NEGATIVE_ANSWERS = frozenset({"no", "probably_not"})


def answer_polarity(answer):
    if answer in POSITIVE_ANSWERS:
        return "positive"
    if answer in NEGATIVE_ANSWERS:
        return "negative"
    return None


@dataclass(frozen=True)
class Trait:
    key: str
    value: str
    confidence: float
    turn_added: int

    def __post_init__(self):
        if not 0.0 < float(self.confidence) <= 1.0:
            raise ValueError(f"trait confidence out of range: {self.confidence}")

    def to_dict(self):
        return {
            "key": self.key,
            "value": self.value,
            "confidence": round(float(self.confidence), 3),
            "turnAdded": self.turn_added,
        }


@dataclass(frozen=True)
class Turn:
    question: str
    answer: str

    def __post_init__(self):
        if self.answer not in ANSWER_VALUES:
            raise ValueError(f"unsupported answer '{self.answer}', expected one of {ANSWER_VALUES}")


@dataclass(frozen=True)
class Guess:
    name: str
    confidence: float
    source: str = "knowledge_base"

    def to_dict(self):
        return {"name": self.name, "confidence": round(float(self.confidence), 3), "source": self.source}


@dataclass(frozen=True)
class RejectedGuess:
    name: str
    turn: int
    traits_snapshot: tuple = ()


@dataclass
class TurnOutput:
    question: str = None
    traits: list = field(default_factory=list)
    guesses: list = field(default_factory=list)
    is_guess_phase: bool = False
    solved: bool = False
    out_of_knowledge: bool = False
    gave_up: bool = False

    def to_dict(self):
        return {
            "question": self.question,
            "traits": [trait.to_dict() for trait in self.traits],
            "guesses": [guess.to_dict() for guess in self.guesses],
            "isGuessPhase": bool(self.is_guess_phase),
        }


def _draw_seed():
    return random.SystemRandom().randrange(2 ** 31)


class Session:
    def __init__(self, seed=None):
        self.seed = seed if seed is not None else _draw_seed()
        self.traits = {}
        self.turns = []
        self.rejected_guesses = []
        self.ambiguous_questions = []
        self.lookup_cache = {}
        self.current_question = None
        self.pending_guess = None
        self.solved_name = None
        self.last_rejection_turn = None

    # --- Trait Ledger ---

    def add_trait(self, trait):
        # re-inserting moves the key to the end so "most recent" stays last
        self.traits.pop(trait.key, None)
        self.traits[trait.key] = trait
        return trait

    def remove_trait(self, key):
        return self.traits.pop(key, None)

    def trait(self, key):
        return self.traits.get(key)

    def trait_value(self, key, default=None):
        trait = self.traits.get(key)
        return trait.value if trait is not None else default

    def live_traits(self):
        return list(self.traits.values())

    def confirmed_keys(self):
        return set(self.traits.keys())

    def most_recent_trait(self):
        if not self.traits:
            return None
        return next(reversed(self.traits.values()))

    # --- Turn history ---

    @property
    def turn_number(self):
        return len(self.turns)

    def record_turn(self, question, answer):
        turn = Turn(question=question, answer=answer)
        self.turns.append(turn)
        if answer == "dont_know":
            self.ambiguous_questions.append(question)
        return turn

    def asked_questions(self):
        return [turn.question for turn in self.turns]

    def turns_since_rejection(self):
        if self.last_rejection_turn is None:
            return self.turn_number
        return self.turn_number - self.last_rejection_turn

    # --- Guesses ---

    def record_rejected_guess(self, name):
        rejected = RejectedGuess(
            name=name,
            turn=self.turn_number,
            traits_snapshot=tuple(self.traits.values()),
        )
        self.rejected_guesses.append(rejected)
        self.last_rejection_turn = self.turn_number
        return rejected

    def rejected_names(self):
        return {rejected.name.strip().lower() for rejected in self.rejected_guesses}

    def is_rejected(self, name):
        return str(name).strip().lower() in self.rejected_names()

    def reset(self, seed=None):
        self.traits = {}
        self.turns = []
        self.rejected_guesses = []
        self.ambiguous_questions = []
        self.lookup_cache = {}
        self.current_question = None
        self.pending_guess = None
        self.solved_name = None
        self.last_rejection_turn = None
        self.seed = seed if seed is not None else _draw_seed()
        return self


__all__ = [
    "ANSWER_VALUES",
    "Guess",
    "NEGATIVE_ANSWERS",
    "POSITIVE_ANSWERS",
    "RejectedGuess",
    "Session",
    "Trait",
    "Turn",
    "TurnOutput",
    "answer_polarity",
]
