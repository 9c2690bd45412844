"""
Guess Validator: screens named guesses against the confirmed traits.

Reference information for a name comes from, in order:
1. the Candidate Store subject with that name (or alias)
2. the static reference trait table (data/reference_traits.json)
3. an external encyclopedia summary, cached on the Session

A name nothing is known about passes: missing information is not a contradiction.
External lookups for one turn run concurrently and all finish before the
filtered list is returned; only the calling thread writes to the Session.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import lru_cache
from urllib.parse import quote

import requests

from inference.config import (
    LOOKUP_ENABLED,
    LOOKUP_MAX_WORKERS,
    LOOKUP_TIMEOUT_SEC,
    LOOKUP_URL_TEMPLATE,
    LOOKUP_USER_AGENT,
    REFERENCE_TRAITS_PATH,
)
from inference.rules import EQUIVALENT_MEDIA
from inference.text_match import contains_any
from knowledge.predicates import as_bool, canonical_medium, subject_alignment, subject_gender, subject_medium
from knowledge.store import infer_gender_from_text, normalize_name
from observability.console import debug_log


REFERENCE_KEYS = ("fictional", "gender", "species", "has_powers", "alignment", "origin_medium")

_REAL_OCCUPATIONS = (
    "actor", "actress", "singer", "rapper", "musician", "politician", "president", "footballer",
    "basketball player", "tennis player", "athlete", "businessman", "scientist", "physicist",
)


@lru_cache(maxsize=None)
def load_reference_traits(path=None):
    path = path or REFERENCE_TRAITS_PATH
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError:
        return {}
    entries = payload.get("characters", payload) if isinstance(payload, dict) else {}
    return {
        normalize_name(name): {key: str(value).lower() for key, value in traits.items() if key in REFERENCE_KEYS}
        for name, traits in entries.items()
        if isinstance(traits, dict)
    }


def traits_from_subject(subject):
    traits = {"fictional": "true" if subject.is_fictional else "false"}
    gender = subject_gender(subject)
    if gender:
        traits["gender"] = gender
    species = subject.attribute("species")
    if species:
        traits["species"] = str(species).lower()
    traits["has_powers"] = "true" if subject.attribute("has_powers") else "false"
    alignment = subject_alignment(subject)
    if alignment:
        traits["alignment"] = alignment
    medium = subject_medium(subject)
    if medium:
        traits["origin_medium"] = medium
    return traits


def traits_from_summary(body):
    """Best-effort traits from an encyclopedia page summary; only clear evidence is used."""
    description = str(body.get("description") or "").lower()
    extract = str(body.get("extract") or "").lower()
    text = f"{description} {extract}"
    traits = {}

    gender = infer_gender_from_text(extract)
    if gender:
        traits["gender"] = gender
    if "fictional" in description or "character" in description:
        traits["fictional"] = "true"
    elif contains_any(description, _REAL_OCCUPATIONS):
        traits["fictional"] = "false"
        traits["species"] = "human"
        traits["has_powers"] = "false"
    if contains_any(text, ("superhero", "superpowers", "supernatural", "superhuman", "magical powers")):
        traits["has_powers"] = "true"
    if contains_any(description, ("supervillain", "villain", "antagonist")):
        traits["alignment"] = "villain"
    elif contains_any(description, ("superhero", "protagonist")):
        traits["alignment"] = "hero"
    if contains_any(description, ("manga", "anime")):
        traits["origin_medium"] = "anime"
    elif contains_any(description, ("comic", "comics")):
        traits["origin_medium"] = "comic"
    elif contains_any(description, ("video game", "video games")):
        traits["origin_medium"] = "video game"
    elif contains_any(description, ("sitcom", "television series", "tv series")):
        traits["origin_medium"] = "tv"
    return traits or None


def fetch_summary_traits(name):
    url = LOOKUP_URL_TEMPLATE.format(title=quote(name.strip().replace(" ", "_")))
    headers = {"User-Agent": LOOKUP_USER_AGENT, "Accept": "application/json"}
    res = requests.get(url, headers=headers, timeout=LOOKUP_TIMEOUT_SEC)
    if res.status_code == 404:
        return None
    res.raise_for_status()
    return traits_from_summary(res.json())


def contradicts(trait, known):
    recorded = known.get(trait.key)
    if recorded is None:
        return False
    if trait.key in {"fictional", "has_powers"}:
        expected, actual = as_bool(trait.value), as_bool(recorded)
        return expected is not None and actual is not None and expected != actual
    if trait.key == "origin_medium":
        wanted = canonical_medium(trait.value)
        return canonical_medium(recorded) not in EQUIVALENT_MEDIA.get(wanted, frozenset({wanted}))
    return str(recorded).lower() != str(trait.value).lower()


class GuessValidator:
    def __init__(self, store=None, reference_table=None, lookup_fn=None, lookup_enabled=None,
                 max_workers=None, observability=None, log_fn=None):
        self.store = store
        self.reference_table = load_reference_traits() if reference_table is None else reference_table
        self.lookup_fn = lookup_fn or fetch_summary_traits
        self.lookup_enabled = LOOKUP_ENABLED if lookup_enabled is None else lookup_enabled
        self.max_workers = max_workers or LOOKUP_MAX_WORKERS
        self.observability = observability
        self.log_fn = log_fn or (lambda message: debug_log("VALIDATOR", message))

    def static_traits(self, name):
        if self.store is not None:
            subject = self.store.get(name)
            if subject is not None:
                return traits_from_subject(subject)
        return self.reference_table.get(normalize_name(name))

    def _timed_lookup(self, name):
        started = time.perf_counter()
        try:
            traits = self.lookup_fn(name)
            success = True
        except (requests.exceptions.RequestException, ValueError) as ex:
            self.log_fn(f"lookup failed for '{name}': {type(ex).__name__}: {ex}")
            traits, success = None, False
        return traits, success, (time.perf_counter() - started) * 1000.0

    def _record_lookup(self, name, success, latency_ms, cached):
        if self.observability is not None:
            self.observability.record_lookup(name=name, success=success, latency_ms=latency_ms, cached=cached)

    def _resolve_lookups(self, names, session):
        pending = []
        for name in names:
            cache_key = normalize_name(name)
            if cache_key in session.lookup_cache:
                self._record_lookup(name, True, 0.0, cached=True)
            elif cache_key not in {normalize_name(item) for item in pending}:
                pending.append(name)
        if not pending or not self.lookup_enabled:
            return

        results = {}
        workers = max(1, min(self.max_workers, len(pending)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self._timed_lookup, name): name for name in pending}
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        for name, (traits, success, latency_ms) in results.items():
            # failed lookups stay cached (as None) until the session resets
            session.lookup_cache[normalize_name(name)] = traits
            self._record_lookup(name, success, latency_ms, cached=False)

    def known_traits(self, name, session=None):
        known = self.static_traits(name)
        if known is None and session is not None:
            known = session.lookup_cache.get(normalize_name(name))
        return known

    def is_compatible(self, name, traits, session=None, resolve=True):
        if resolve and session is not None and self.static_traits(name) is None:
            self._resolve_lookups([name], session)
        known = self.known_traits(name, session)
        if not known:
            return True
        for trait in traits:
            if contradicts(trait, known):
                self.log_fn(f"'{name}' contradicts {trait.key}={trait.value} (known {known.get(trait.key)})")
                return False
        return True

    def filter_compatible(self, guesses, traits, session):
        traits = list(traits)
        unique = []
        seen = set()
        for guess in guesses:
            key = normalize_name(guess.name)
            if not key or key in seen or session.is_rejected(guess.name):
                continue
            seen.add(key)
            unique.append(guess)

        self._resolve_lookups([guess.name for guess in unique if self.static_traits(guess.name) is None], session)
        return [guess for guess in unique if self.is_compatible(guess.name, traits, session, resolve=False)]


__all__ = [
    "GuessValidator",
    "REFERENCE_KEYS",
    "contradicts",
    "fetch_summary_traits",
    "load_reference_traits",
    "traits_from_subject",
    "traits_from_summary",
]
