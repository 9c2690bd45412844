"""
Tagged parsing of oracle replies.

Oracle output is untrusted, loosely shaped JSON. Every reply is turned into exactly
one of a few small frozen records and downstream code switches on the record type:

    ValidReply(question, guesses)      question proposal that passed shape checks
    TraitProposal(key, value, conf)    trait-extraction proposal (still unvalidated)
    MalformedReply(raw, reason)        something came back but it is unusable
    EmptyReply()                       nothing came back (timeout, offline, "null")
"""

import json
import re
from dataclasses import dataclass

from session_state import Guess


_THINK_BLOCK = re.compile(r"<think>.*?</think>", flags=re.DOTALL | re.IGNORECASE)
_CODE_FENCE = re.compile(r"```(?:json)?", flags=re.IGNORECASE)

MAX_ORACLE_GUESSES = 5


@dataclass(frozen=True)
class ValidReply:
    question: str
    guesses: tuple = ()


@dataclass(frozen=True)
class TraitProposal:
    key: str
    value: str
    confidence: float = None


@dataclass(frozen=True)
class MalformedReply:
    raw: str
    reason: str


@dataclass(frozen=True)
class EmptyReply:
    pass


def _strip_wrappers(text):
    text = _THINK_BLOCK.sub("", text or "")
    text = _CODE_FENCE.sub("", text)
    return text.strip()


def safe_parse_json(text):
    try:
        loaded = json.loads(text)
        return loaded if isinstance(loaded, dict) else {}
    except (TypeError, ValueError):
        match = re.search(r"\{.*\}", text or "", flags=re.DOTALL)
        if not match:
            return {}
        try:
            loaded = json.loads(match.group(0))
            return loaded if isinstance(loaded, dict) else {}
        except ValueError:
            return {}


def _load_payload(text):
    """Like safe_parse_json but keeps lists and null, which trait replies use."""
    try:
        return json.loads(text)
    except ValueError:
        return safe_parse_json(text) or None


def _clamp(value, low, high):
    return max(low, min(high, value))


def _coerce_confidence(value):
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_guess_list(items, source="oracle", floor=0.01, cap=0.99):
    guesses = []
    seen = set()
    if not isinstance(items, list):
        return guesses
    for item in items:
        if isinstance(item, str):
            name, confidence = item, None
        elif isinstance(item, dict):
            name, confidence = item.get("name"), _coerce_confidence(item.get("confidence"))
        else:
            continue
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        confidence = 0.5 if confidence is None else confidence
        guesses.append(Guess(name=name, confidence=_clamp(confidence, floor, cap), source=source))
        if len(guesses) >= MAX_ORACLE_GUESSES:
            break
    return guesses


def parse_question_reply(raw):
    text = _strip_wrappers(raw)
    if not text:
        return EmptyReply()

    parsed = safe_parse_json(text)
    if not parsed:
        return MalformedReply(raw=text[:200], reason="not a JSON object")

    question = parsed.get("question")
    if not isinstance(question, str) or not question.strip():
        return MalformedReply(raw=text[:200], reason="missing question")

    guesses = parse_guess_list(parsed.get("top_guesses", parsed.get("guesses")))
    return ValidReply(question=" ".join(question.split()), guesses=tuple(guesses))


def parse_trait_proposal(raw):
    text = _strip_wrappers(raw)
    if not text or text.lower() == "null":
        return EmptyReply()

    payload = _load_payload(text)
    if isinstance(payload, list):
        payload = next((entry for entry in payload if isinstance(entry, dict)), None)
    if payload is None or payload == {}:
        return EmptyReply()
    if not isinstance(payload, dict):
        return MalformedReply(raw=text[:200], reason="not a JSON object")

    key, value = payload.get("key"), payload.get("value")
    if not isinstance(key, str) or not key.strip():
        return MalformedReply(raw=text[:200], reason="missing key")
    if isinstance(value, bool):
        value = "true" if value else "false"
    if value is None or isinstance(value, (dict, list)):
        return MalformedReply(raw=text[:200], reason="missing value")

    return TraitProposal(
        key=key.strip(),
        value=str(value).strip(),
        confidence=_coerce_confidence(payload.get("confidence")),
    )


def parse_guess_reply(raw, floor=0.1, cap=0.8):
    """Guesses proposed for a subject outside the knowledge base."""
    text = _strip_wrappers(raw)
    if not text:
        return []
    payload = _load_payload(text)
    if isinstance(payload, dict):
        payload = payload.get("top_guesses", payload.get("guesses"))
    return parse_guess_list(payload, source="oracle", floor=floor, cap=cap)


__all__ = [
    "EmptyReply",
    "MAX_ORACLE_GUESSES",
    "MalformedReply",
    "TraitProposal",
    "ValidReply",
    "parse_guess_list",
    "parse_guess_reply",
    "parse_question_reply",
    "parse_trait_proposal",
    "safe_parse_json",
]
