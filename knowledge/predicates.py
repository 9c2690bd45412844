from inference.rules import (
    ALIGNMENT_FACT_TERMS,
    CATEGORY_DEFAULT_MEDIUM,
    EQUIVALENT_MEDIA,
    EUROPEAN_NATIONALITIES,
    NATIONALITY_GROUPS,
    ORIGIN_MEDIUM_ALIASES,
    REAL_PERSON_CATEGORIES,
)
from inference.text_match import contains_any, contains_term
from .store import infer_gender_from_text


TRUE_VALUES = {"true", "yes", "1"}
FALSE_VALUES = {"false", "no", "0"}


def as_bool(value):
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in TRUE_VALUES:
        return True
    if token in FALSE_VALUES:
        return False
    return None


def canonical_medium(value):
    token = " ".join(str(value or "").lower().replace("-", " ").replace("_", " ").split())
    return ORIGIN_MEDIUM_ALIASES.get(token, token)


def canonical_nationality(value):
    token = " ".join(str(value or "").lower().replace("_", " ").split())
    for group, spellings in NATIONALITY_GROUPS.items():
        if token == group or token in spellings:
            return group
    return token


def subject_gender(subject):
    gender = subject.attribute("gender")
    if gender:
        return str(gender).lower()
    return infer_gender_from_text(subject.facts_text)


def subject_medium(subject):
    medium = subject.attribute("origin_medium")
    if medium:
        return canonical_medium(medium)
    return CATEGORY_DEFAULT_MEDIUM.get(subject.category)


def subject_alignment(subject):
    alignment = subject.attribute("alignment")
    if alignment:
        return str(alignment).lower()
    text = subject.facts_text
    if contains_any(text, ALIGNMENT_FACT_TERMS["villain"]):
        return "villain"
    if subject.category == "superheroes" or contains_any(text, ALIGNMENT_FACT_TERMS["hero"]):
        return "hero"
    return None


def _match_fictional(subject, value):
    expected = as_bool(value)
    if expected is None:
        return True
    return subject.is_fictional == expected


def _match_category(subject, value):
    value = value.lower()
    category = subject.category.lower()
    return value in category or category in value


def _match_gender(subject, value):
    return subject_gender(subject) == value.lower()


def _match_species(subject, value):
    species = subject.attribute("species")
    if species:
        return str(species).lower() == value.lower()
    return contains_term(subject.facts_text, value)


def _match_is_alive(subject, value):
    expected = as_bool(value)
    if expected is None:
        return True
    alive = subject.attribute("is_alive")
    if alive is None:
        # fictional characters and real people with no recorded death count as alive
        alive = True
    return bool(alive) == expected


def _match_origin_medium(subject, value):
    wanted = canonical_medium(value)
    medium = subject_medium(subject)
    if medium is None:
        return False
    return medium in EQUIVALENT_MEDIA.get(wanted, frozenset({wanted}))


def _match_has_powers(subject, value):
    expected = as_bool(value)
    if expected is None:
        return True
    return bool(subject.attribute("has_powers", False)) == expected


def _match_alignment(subject, value):
    return subject_alignment(subject) == value.lower()


def _match_nationality(subject, value):
    wanted = canonical_nationality(value)
    nationality = subject.attribute("nationality")
    if nationality:
        actual = canonical_nationality(nationality)
        if wanted == "european":
            return actual in EUROPEAN_NATIONALITIES
        return actual == wanted
    return contains_any(subject.facts_text, NATIONALITY_GROUPS.get(wanted, (wanted,)))


def _match_age_group(subject, value):
    age_group = subject.attribute("age_group")
    if age_group is None and subject.category in REAL_PERSON_CATEGORIES:
        age_group = "adult"
    return str(age_group or "").lower() == value.lower()


def _match_has_oscar(subject, value):
    expected = as_bool(value)
    if expected is None:
        return True
    has_oscar = subject.attribute("has_oscar")
    if has_oscar is None:
        has_oscar = contains_any(subject.facts_text, ("oscar", "academy award"))
    return bool(has_oscar) == expected


def _match_listed_attribute(attribute_name):
    def _match(subject, value):
        recorded = subject.attribute(attribute_name)
        if recorded is None:
            return contains_term(subject.facts_text, value)
        if isinstance(recorded, (list, tuple)):
            return value.lower() in {str(item).lower() for item in recorded}
        return str(recorded).lower() == value.lower()

    return _match


def _match_default(subject, value):
    needle = value.lower().replace("_", " ")
    haystack = f"{subject.name} {subject.category} {subject.facts_text}".lower()
    return needle in haystack


TRAIT_PREDICATES = {
    "fictional": _match_fictional,
    "category": _match_category,
    "gender": _match_gender,
    "species": _match_species,
    "is_alive": _match_is_alive,
    "origin_medium": _match_origin_medium,
    "has_powers": _match_has_powers,
    "alignment": _match_alignment,
    "nationality": _match_nationality,
    "age_group": _match_age_group,
    "has_oscar": _match_has_oscar,
    "publisher": _match_listed_attribute("publisher"),
    "genre": _match_listed_attribute("genre"),
    "tv_show_type": _match_listed_attribute("tv_show_type"),
}


def subject_matches_trait(subject, trait):
    predicate = TRAIT_PREDICATES.get(trait.key, _match_default)
    return predicate(subject, str(trait.value))


def subject_matches_all(subject, traits):
    return all(subject_matches_trait(subject, trait) for trait in traits)


__all__ = [
    "TRAIT_PREDICATES",
    "as_bool",
    "canonical_medium",
    "canonical_nationality",
    "subject_alignment",
    "subject_gender",
    "subject_matches_all",
    "subject_matches_trait",
    "subject_medium",
]
