"""
Question catalogues.

ENTROPY_CATALOGUE pairs each question with a predicate over Subjects so the
selector can measure how a question would split the current candidates.
FALLBACK_QUESTIONS, EXTENDED_QUESTIONS and BROAD_QUESTIONS carry no predicate;
they are used when the oracle fails, or when no known subject fits anymore.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from inference.text_match import contains_any
from knowledge.predicates import canonical_nationality, subject_alignment, subject_gender, subject_medium


@dataclass(frozen=True)
class CatalogueQuestion:
    text: str
    test: Callable
    scope: str = "any"  # "any", "fiction" or "real"
    category: Optional[str] = None

    def applies_to(self, fictional):
        if fictional is True and self.scope == "real":
            return False
        if fictional is False and self.scope == "fiction":
            return False
        return True


def _facts(*terms):
    return lambda subject: contains_any(subject.facts_text, terms)


def _attribute_in(name, *values):
    wanted = {value.lower() for value in values}

    def _test(subject):
        recorded = subject.attribute(name)
        if isinstance(recorded, (list, tuple)):
            return bool(wanted & {str(item).lower() for item in recorded})
        return str(recorded).lower() in wanted if recorded is not None else False

    return _test


def _born_before(year):
    def _test(subject):
        decade = subject.attribute("birth_decade")
        return decade is not None and int(decade) < year

    return _test


def _holds_office(fragment):
    return lambda subject: fragment in str(subject.attribute("office", "")).lower()


ENTROPY_CATALOGUE = (
    # broad binaries
    CatalogueQuestion("Is your character fictional?", lambda s: s.is_fictional),
    CatalogueQuestion("Is your character male?", lambda s: subject_gender(s) == "male"),
    CatalogueQuestion("Is your character American?", lambda s: canonical_nationality(s.attribute("nationality")) == "american"),
    CatalogueQuestion("Is your character from the United Kingdom?",
                      lambda s: canonical_nationality(s.attribute("nationality")) == "british", scope="real"),
    CatalogueQuestion("Is your character still alive today?", lambda s: s.attribute("is_alive", True) is True, scope="real"),
    CatalogueQuestion("Was your character born before 1950?", _born_before(1950), scope="real"),
    # categories
    CatalogueQuestion("Is your character an actor?", lambda s: s.category == "actors", scope="real", category="actors"),
    CatalogueQuestion("Is your character an athlete?", lambda s: s.category == "athletes", scope="real", category="athletes"),
    CatalogueQuestion("Is your character a musician?", lambda s: s.category == "musicians", scope="real", category="musicians"),
    CatalogueQuestion("Is your character a politician?", lambda s: s.category == "politicians", scope="real",
                      category="politicians"),
    CatalogueQuestion("Is your character a historical figure?", lambda s: s.category == "historical", scope="real",
                      category="historical"),
    CatalogueQuestion("Did your character originate in an anime or manga?",
                      lambda s: subject_medium(s) in {"anime", "manga"}, scope="fiction", category="anime"),
    CatalogueQuestion("Is your character a superhero?", lambda s: s.category == "superheroes", scope="fiction",
                      category="superheroes"),
    CatalogueQuestion("Did your character originate in a video game?", lambda s: subject_medium(s) == "video game",
                      scope="fiction", category="video-games"),
    CatalogueQuestion("Did your character originate in a TV show?", lambda s: subject_medium(s) in {"tv", "cartoon"},
                      scope="fiction", category="tv-characters"),
    # fictional characters
    CatalogueQuestion("Does your character have superpowers?", lambda s: bool(s.attribute("has_powers")), scope="fiction"),
    CatalogueQuestion("Is your character a villain or antagonist?", lambda s: subject_alignment(s) == "villain",
                      scope="fiction"),
    CatalogueQuestion("Is your character human?", lambda s: str(s.attribute("species", "")).lower() == "human",
                      scope="fiction"),
    CatalogueQuestion("Is your character a child or teenager?", _attribute_in("age_group", "child", "teenager"),
                      scope="fiction"),
    CatalogueQuestion("Is your character published by Marvel?", _attribute_in("publisher", "marvel"), scope="fiction",
                      category="superheroes"),
    CatalogueQuestion("Does your character belong to the DC universe?", _attribute_in("publisher", "dc"),
                      scope="fiction", category="superheroes"),
    CatalogueQuestion("Does your character wear a mask?", _facts("mask", "masked"), scope="fiction"),
    CatalogueQuestion("Can your character fly?", _facts("fly", "flies", "flight", "flying"), scope="fiction"),
    CatalogueQuestion("Does your character fight with a sword?", _facts("sword", "swordsman", "blade", "katana"),
                      scope="fiction"),
    CatalogueQuestion("Is your character a ninja or pirate?", _facts("ninja", "pirate"), scope="fiction",
                      category="anime"),
    CatalogueQuestion("Does your character appear in Nintendo games?", _facts("nintendo"), scope="fiction",
                      category="video-games"),
    CatalogueQuestion("Did your character originate in a sitcom?", _attribute_in("tv_show_type", "sitcom"),
                      scope="fiction", category="tv-characters"),
    CatalogueQuestion("Did your character originate in an animated show?", _attribute_in("tv_show_type", "animated"),
                      scope="fiction", category="tv-characters"),
    CatalogueQuestion("Is your character a scientist or genius?", _facts("scientist", "genius", "inventor", "physicist"),
                      scope="any"),
    # real people
    CatalogueQuestion("Has your character won an Oscar?", lambda s: bool(s.attribute("has_oscar")), scope="real",
                      category="actors"),
    CatalogueQuestion("Is your character known for comedy?", _attribute_in("genre", "comedy"), scope="real",
                      category="actors"),
    CatalogueQuestion("Is your character primarily known for action movies?", _attribute_in("genre", "action"),
                      scope="real", category="actors"),
    CatalogueQuestion("Is your character a basketball player?", _facts("basketball", "nba"), scope="real",
                      category="athletes"),
    CatalogueQuestion("Is your character a soccer player?", _facts("soccer", "football club", "footballer"),
                      scope="real", category="athletes"),
    CatalogueQuestion("Has your character competed in the Olympics?", _facts("olympic", "olympics"), scope="real",
                      category="athletes"),
    CatalogueQuestion("Is your character a rapper or hip-hop artist?", _facts("rapper", "hip hop", "hip-hop"),
                      scope="real", category="musicians"),
    CatalogueQuestion("Is your character in a band?", _facts("band", "beatles", "frontman", "lead singer"),
                      scope="real", category="musicians"),
    CatalogueQuestion("Is your character a pop singer?", _facts("pop"), scope="real", category="musicians"),
    CatalogueQuestion("Was your character a U.S. President?", _holds_office("president of the united states"),
                      scope="real", category="politicians"),
    CatalogueQuestion("Is your character currently in office?", lambda s: bool(s.attribute("in_office")),
                      scope="real", category="politicians"),
    CatalogueQuestion("Was your character a military leader?", _facts("military", "general", "emperor", "conqueror"),
                      scope="real", category="historical"),
)

FALLBACK_QUESTIONS = (
    "Is your character fictional?",
    "Is your character male?",
    "Is your character American?",
    "Did your character originate in an anime or manga?",
    "Is your character a superhero?",
    "Is your character an athlete?",
    "Is your character a musician?",
    "Is your character an actor?",
    "Is your character a politician?",
    "Did your character originate in a TV show?",
    "Did your character originate in a video game?",
    "Has your character won an Oscar?",
    "Is your character still alive today?",
    "Is your character known for dramatic or serious roles?",
    "Is your character known for comedy movies or shows?",
    "Is your character from the United Kingdom?",
    "Has your character starred in a famous movie franchise?",
    "Has your character appeared in a crime or thriller movie?",
    "Did your character live before 1950?",
    "Was your character active in the 2000s or later?",
    "Does your character have superpowers?",
    "Does your character work with a team?",
    "Is your character a villain?",
    "Does your character wear a costume or uniform?",
    "Does your character have distinctive hair?",
    "Did your character originate in a comic book?",
    "Does your character come from Japanese media?",
    "Is your character a leader?",
    "Has your character won major awards?",
    "Has your character played a real historical person on screen?",
    "Has your character starred in a romantic drama or love story?",
    "Is your character known for their voice acting?",
    "Has your character directed a film in addition to acting?",
    "Has your character won a Golden Globe award?",
    "Is your character over 60 years old?",
    "Is your character well-known internationally?",
    "Is your character associated with a specific location or place?",
    "Does your character have a distinctive personality trait?",
    "Is your character known for a specific catchphrase or saying?",
)

EXTENDED_QUESTIONS = (
    "Is your character considered one of the greatest in their field?",
    "Is your character associated with a specific decade?",
    "Is your character known for a single defining work or role?",
    "Has your character ever won a lifetime achievement award?",
    "Is your character known for collaborating with the same creative partners repeatedly?",
    "Is your character primarily known in their home country rather than internationally?",
    "Has your character ever made a highly anticipated comeback or return?",
    "Is your character known for a very long career spanning multiple decades?",
    "Has your character ever been considered controversial or polarizing?",
    "Is your character known for transforming their appearance for roles?",
)

# direct category questions; a negative answer rules the category out
CATEGORY_PROBES = {
    "Is your character an actor?": "actors",
    "Is your character an athlete?": "athletes",
    "Is your character a musician?": "musicians",
    "Is your character a politician?": "politicians",
    "Is your character a historical figure?": "historical",
    "Did your character originate in an anime or manga?": "anime",
    "Is your character a superhero?": "superheroes",
    "Did your character originate in a video game?": "video-games",
    "Did your character originate in a TV show?": "tv-characters",
}

# asked when even relaxed filtering leaves no known subject
BROAD_QUESTIONS = (
    "Is your character known mainly for entertainment?",
    "Is your character associated with sports or competition?",
    "Is your character connected to science or technology?",
    "Is your character from the 21st century?",
    "Is your character associated with a famous family?",
    "Is your character famous on the internet or social media?",
    "Is your character associated with a book series?",
    "Is your character associated with religion or mythology?",
)

__all__ = [
    "BROAD_QUESTIONS",
    "CATEGORY_PROBES",
    "CatalogueQuestion",
    "ENTROPY_CATALOGUE",
    "EXTENDED_QUESTIONS",
    "FALLBACK_QUESTIONS",
]
