from dataclasses import dataclass, field

from .predicates import subject_matches_all


RELAXED_CONFIDENCE_FACTOR = 0.5


@dataclass
class FilterResult:
    candidates: list = field(default_factory=list)
    relaxed: bool = False
    dropped_trait: object = None
    exhausted: bool = False

    @property
    def confidence_factor(self):
        return RELAXED_CONFIDENCE_FACTOR if self.relaxed else 1.0

    @property
    def out_of_knowledge(self):
        return self.exhausted

    def __len__(self):
        return len(self.candidates)


def filter_subjects(subjects, traits):
    """Conjunctive filter: a subject survives only if it satisfies every trait."""
    traits = list(traits)
    return [subject for subject in subjects if subject_matches_all(subject, traits)]


def filter_candidates(store, traits):
    """
    Project the store through the live traits.

    Exact first. If that leaves nothing, drop the most recently added trait and
    retry once (the latest extraction is the most likely mistake). If that also
    leaves nothing the result is marked exhausted.
    """
    traits = list(traits)
    exact = filter_subjects(store, traits)
    if exact or not traits:
        return FilterResult(candidates=exact)

    dropped = traits[-1]
    relaxed = filter_subjects(store, traits[:-1])
    if relaxed:
        return FilterResult(candidates=relaxed, relaxed=True, dropped_trait=dropped)
    return FilterResult(candidates=[], relaxed=True, dropped_trait=dropped, exhausted=True)


__all__ = ["FilterResult", "RELAXED_CONFIDENCE_FACTOR", "filter_candidates", "filter_subjects"]
