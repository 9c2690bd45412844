import zlib

from session_state import Guess
from .predicates import subject_matches_trait


MAX_RANK_CONFIDENCE = 0.90

# key -> weight used by the fuzzy match score
MATCH_WEIGHTS = {
    "fictional": 3.0,
    "category": 3.0,
    "gender": 2.0,
    "origin_medium": 2.0,
    "species": 1.5,
    "has_powers": 1.5,
    "nationality": 1.5,
    "alignment": 1.0,
    "is_alive": 1.0,
    "has_oscar": 1.0,
}


def _base_confidence(trait_count):
    if trait_count >= 8:
        return 0.55
    if trait_count >= 6:
        return 0.45
    if trait_count >= 4:
        return 0.35
    return 0.25


def _name_tiebreak(name):
    # stable across processes, unlike hash()
    return (zlib.crc32(name.lower().encode("utf-8")) % 1000) / 100000.0


def score_subject_match(subject, traits):
    """Weighted fraction of traits the subject satisfies, plus a small prominence bonus."""
    traits = list(traits)
    if not traits:
        return min(0.15, subject.sitelinks / 2000.0)
    total = 0.0
    matched = 0.0
    for trait in traits:
        weight = MATCH_WEIGHTS.get(trait.key, 1.0)
        total += weight
        if subject_matches_trait(subject, trait):
            matched += weight
    return matched / total + min(0.15, subject.sitelinks / 2000.0)


def rank_candidates(candidates, traits, rejected_names=(), top_n=5, confidence_factor=1.0):
    traits = list(traits)
    rejected = {str(name).strip().lower() for name in rejected_names}
    pool = [subject for subject in candidates if subject.name.strip().lower() not in rejected]
    if not pool:
        return []

    has_category = any(trait.key == "category" for trait in traits)
    base = _base_confidence(len(traits))
    if len(pool) <= 5:
        pool_bonus = 0.10
    elif len(pool) <= 10:
        pool_bonus = 0.05
    else:
        pool_bonus = 0.0

    scored = []
    for subject in pool:
        if traits:
            matched = sum(1 for trait in traits if subject_matches_trait(subject, trait))
            match_fraction = matched / len(traits)
        else:
            match_fraction = 0.0
        confidence = base + 0.3 * match_fraction + pool_bonus
        if has_category:
            confidence += 0.1
        confidence += min(0.05, subject.sitelinks / 2000.0)
        confidence += _name_tiebreak(subject.name)
        confidence = min(MAX_RANK_CONFIDENCE, confidence) * confidence_factor
        scored.append((confidence, subject.name))

    scored.sort(key=lambda item: (-item[0], item[1]))
    source = "relaxed" if confidence_factor < 1.0 else "knowledge_base"
    return [Guess(name=name, confidence=round(conf, 4), source=source) for conf, name in scored[:top_n]]


__all__ = ["MAX_RANK_CONFIDENCE", "MATCH_WEIGHTS", "rank_candidates", "score_subject_match"]
