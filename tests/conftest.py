import os

# tests never reach a real model or the encyclopedia unless they serve one locally
os.environ.setdefault("DT_ORACLE_BACKEND", "offline")
os.environ.setdefault("DT_LOOKUP_ENABLED", "0")

import pytest

from knowledge.store import CandidateStore
from session_state import Session


def _comic_record(name, alignment):
    return {
        "name": name,
        "category": "superheroes",
        "fictional": True,
        "sitelinks": 10,
        "facts": [f"{name} is a comic book character"],
        "attributes": {
            "gender": "male",
            "species": "human",
            "origin_medium": "comic",
            "has_powers": True,
            "alignment": alignment,
        },
    }


@pytest.fixture
def comic_store():
    """40 male comic characters, half of them villains."""
    records = [_comic_record(f"Villain Number {index}", "villain") for index in range(20)]
    records += [_comic_record(f"Hero Number {index}", "hero") for index in range(20)]
    return CandidateStore.from_records(records, version="test")


@pytest.fixture
def small_store():
    records = [
        {
            "name": "Tom Hanks",
            "category": "actors",
            "fictional": False,
            "sitelinks": 120,
            "facts": ["American actor", "He won two Oscars"],
            "attributes": {"gender": "male", "nationality": "american", "is_alive": True, "has_oscar": True},
        },
        {
            "name": "Meryl Streep",
            "category": "actors",
            "fictional": False,
            "sitelinks": 110,
            "facts": ["American actress", "She has won three Oscars"],
            "attributes": {"gender": "female", "nationality": "american", "is_alive": True, "has_oscar": True},
        },
        {
            "name": "Donald Trump",
            "category": "politicians",
            "fictional": False,
            "sitelinks": 160,
            "facts": ["American businessman and politician"],
            "attributes": {
                "gender": "male",
                "nationality": "american",
                "office": "President of the United States",
                "in_office": True,
            },
        },
        {
            "name": "Spider-Man",
            "category": "superheroes",
            "fictional": True,
            "sitelinks": 90,
            "aliases": ["Peter Parker"],
            "facts": ["Marvel superhero who wears a mask"],
            "attributes": {
                "gender": "male",
                "species": "human",
                "origin_medium": "comic",
                "publisher": "marvel",
                "has_powers": True,
                "alignment": "hero",
            },
        },
        {
            "name": "Wonder Woman",
            "category": "superheroes",
            "fictional": True,
            "sitelinks": 70,
            "facts": ["DC superhero and Amazon warrior princess"],
            "attributes": {
                "gender": "female",
                "species": "amazon",
                "origin_medium": "comic",
                "publisher": "dc",
                "has_powers": True,
                "alignment": "hero",
            },
        },
        {
            "name": "Naruto Uzumaki",
            "category": "anime",
            "fictional": True,
            "sitelinks": 60,
            "facts": ["Ninja from the Hidden Leaf Village"],
            "attributes": {"gender": "male", "species": "human", "origin_medium": "manga", "has_powers": True},
        },
    ]
    return CandidateStore.from_records(records, version="test")


@pytest.fixture
def session():
    return Session(seed=7)
