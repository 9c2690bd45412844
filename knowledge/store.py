"""
Candidate Store: the static, versioned table of known subjects.

Subjects are built once from a JSON dataset and never mutated. Attributes the
dataset leaves out are derived from the free-text facts at load time so the
Knowledge Filter can stay a pure function of (subject, trait).
"""

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from inference.config import KNOWLEDGE_PATH
from inference.rules import CATEGORIES, FICTIONAL_CATEGORIES, REAL_PERSON_CATEGORIES


class KnowledgeBaseError(RuntimeError):
    pass


_MALE_PRONOUNS = re.compile(r"\b(he|him|his|himself|actor|king|man|boy)\b")
_FEMALE_PRONOUNS = re.compile(r"\b(she|her|hers|herself|actress|queen|woman|girl)\b")
_LIFESPAN = re.compile(r"\b(1[0-9]{3}|20[0-9]{2})\s*[-–]\s*(1[0-9]{3}|20[0-9]{2})\b")
_POWER_WORDS = re.compile(r"\b(superhero|superpowers?|powers|magic|magical|abilities|supernatural|jutsu)\b")


def normalize_name(name):
    return " ".join(str(name or "").lower().replace("_", " ").split())


def is_valid_subject_name(name):
    clean = normalize_name(name)
    if len(clean) <= 2:
        return False
    if "disambiguation" in clean or clean.startswith("list of"):
        return False
    if re.fullmatch(r"[0-9 .\-]+", clean):
        return False
    return True


def infer_gender_from_text(text):
    lowered = (text or "").lower()
    male = len(_MALE_PRONOUNS.findall(lowered))
    female = len(_FEMALE_PRONOUNS.findall(lowered))
    if male == female:
        return None
    return "male" if male > female else "female"


def infer_alive_from_text(text):
    if _LIFESPAN.search(text or ""):
        return False
    return None


def infer_powers(category, text):
    if category in {"superheroes", "anime"}:
        return True
    if _POWER_WORDS.search((text or "").lower()):
        return True
    return False


@dataclass(frozen=True, eq=False)
class Subject:
    name: str
    category: str
    is_fictional: bool
    facts: tuple = ()
    attributes: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    aliases: tuple = ()
    sitelinks: int = 0

    @property
    def facts_text(self):
        return " ".join(self.facts).lower()

    @property
    def key(self):
        return normalize_name(self.name)

    def attribute(self, key, default=None):
        return self.attributes.get(key, default)

    def __repr__(self):
        return f"Subject({self.name!r}, {self.category!r})"


def subject_from_record(record):
    name = str(record.get("name", "")).strip()
    category = str(record.get("category", "other")).strip().lower()
    if category not in CATEGORIES:
        category = "other"
    facts = tuple(str(fact) for fact in record.get("facts", []) if str(fact).strip())
    is_fictional = record.get("fictional")
    if is_fictional is None:
        is_fictional = category in FICTIONAL_CATEGORIES
    facts_text = " ".join(facts)

    attributes = {str(k).lower(): v for k, v in (record.get("attributes") or {}).items()}
    if "gender" not in attributes:
        inferred = infer_gender_from_text(facts_text)
        if inferred:
            attributes["gender"] = inferred
    if "is_alive" not in attributes and not is_fictional:
        inferred = infer_alive_from_text(facts_text)
        if inferred is not None:
            attributes["is_alive"] = inferred
    if "species" not in attributes and not is_fictional:
        attributes["species"] = "human"
    if "has_powers" not in attributes:
        attributes["has_powers"] = False if category in REAL_PERSON_CATEGORIES else infer_powers(category, facts_text)

    return Subject(
        name=name,
        category=category,
        is_fictional=bool(is_fictional),
        facts=facts,
        attributes=MappingProxyType(attributes),
        aliases=tuple(str(alias) for alias in record.get("aliases", [])),
        sitelinks=int(record.get("sitelinks", 0) or 0),
    )


class CandidateStore:
    def __init__(self, subjects, version="", source_path=None):
        self.version = version
        self.source_path = source_path
        self.subjects = tuple(subjects)
        self._index = {}
        for subject in self.subjects:
            self._index.setdefault(subject.key, subject)
        for subject in self.subjects:
            for alias in subject.aliases:
                self._index.setdefault(normalize_name(alias), subject)

    @classmethod
    def from_records(cls, records, version="", source_path=None):
        subjects = []
        seen = set()
        for record in records:
            if not isinstance(record, dict) or not is_valid_subject_name(record.get("name")):
                continue
            subject = subject_from_record(record)
            if subject.key in seen:
                continue
            seen.add(subject.key)
            subjects.append(subject)
        return cls(subjects, version=version, source_path=source_path)

    @classmethod
    def load(cls, path=None):
        path = path or KNOWLEDGE_PATH
        try:
            with open(path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as ex:
            raise KnowledgeBaseError(f"could not load knowledge base '{path}': {ex}") from ex

        if isinstance(payload, list):
            records, version = payload, ""
        elif isinstance(payload, dict) and isinstance(payload.get("subjects"), list):
            records, version = payload["subjects"], str(payload.get("version", ""))
        else:
            raise KnowledgeBaseError(f"knowledge base '{path}' has no 'subjects' list")

        store = cls.from_records(records, version=version, source_path=path)
        if not store.subjects:
            raise KnowledgeBaseError(f"knowledge base '{path}' contains no valid subjects")
        return store

    def __len__(self):
        return len(self.subjects)

    def __iter__(self):
        return iter(self.subjects)

    def get(self, name):
        return self._index.get(normalize_name(name))

    def __contains__(self, name):
        return self.get(name) is not None

    def names(self):
        return [subject.name for subject in self.subjects]

    def categories(self):
        counts = {}
        for subject in self.subjects:
            counts[subject.category] = counts.get(subject.category, 0) + 1
        return counts


@lru_cache(maxsize=None)
def load_default_store(path=None):
    """Process-wide store; the dataset is read once per path."""
    return CandidateStore.load(path)


__all__ = [
    "CandidateStore",
    "KnowledgeBaseError",
    "Subject",
    "infer_alive_from_text",
    "infer_gender_from_text",
    "infer_powers",
    "is_valid_subject_name",
    "load_default_store",
    "normalize_name",
    "subject_from_record",
]
