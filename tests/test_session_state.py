import pytest

from session_state import Guess, Session, Trait, Turn, TurnOutput, answer_polarity


def _trait(key, value, turn=0):
    return Trait(key=key, value=value, confidence=0.9, turn_added=turn)


def test_ledger_keeps_one_trait_per_key_and_most_recent_last():
    session = Session(seed=1)
    session.add_trait(_trait("gender", "male"))
    session.add_trait(_trait("fictional", "true"))
    session.add_trait(_trait("gender", "female", turn=3))

    assert [trait.key for trait in session.live_traits()] == ["fictional", "gender"]
    assert session.trait_value("gender") == "female"
    assert session.most_recent_trait().key == "gender"


def test_dont_know_turns_are_tracked_as_ambiguous():
    session = Session(seed=1)
    session.record_turn("Is your character male?", "yes")
    session.record_turn("Does your character wear a mask?", "dont_know")

    assert session.turn_number == 2
    assert session.ambiguous_questions == ["Does your character wear a mask?"]


def test_rejected_guesses_match_case_insensitively_and_keep_a_snapshot():
    session = Session(seed=1)
    session.add_trait(_trait("fictional", "true"))
    session.record_turn("Is your character Batman?", "no")
    rejected = session.record_rejected_guess("Batman")

    assert session.is_rejected("  batman ")
    assert rejected.turn == 1
    assert [trait.key for trait in rejected.traits_snapshot] == ["fictional"]
    assert session.turns_since_rejection() == 0


def test_reset_clears_everything_and_draws_a_seed():
    session = Session(seed=1)
    session.add_trait(_trait("gender", "male"))
    session.record_turn("Is your character male?", "yes")
    session.record_rejected_guess("Batman")
    session.lookup_cache["batman"] = {"gender": "male"}

    session.reset(seed=99)

    assert session.live_traits() == []
    assert session.turns == []
    assert session.rejected_guesses == []
    assert session.lookup_cache == {}
    assert session.seed == 99


def test_trait_confidence_must_be_in_range():
    with pytest.raises(ValueError):
        Trait(key="gender", value="male", confidence=0.0, turn_added=0)
    with pytest.raises(ValueError):
        Trait(key="gender", value="male", confidence=1.5, turn_added=0)


def test_turn_rejects_unknown_answers():
    with pytest.raises(ValueError):
        Turn(question="Is your character male?", answer="maybe")


def test_answer_polarity():
    assert answer_polarity("probably") == "positive"
    assert answer_polarity("probably_not") == "negative"
    assert answer_polarity("dont_know") is None


def test_turn_output_serializes_wire_names():
    output = TurnOutput(
        question=None,
        traits=[_trait("gender", "male", turn=2)],
        guesses=[Guess(name="Batman", confidence=0.81234)],
        is_guess_phase=True,
    )

    payload = output.to_dict()

    assert payload["isGuessPhase"] is True
    assert payload["traits"][0] == {"key": "gender", "value": "male", "confidence": 0.9, "turnAdded": 2}
    assert payload["guesses"][0]["confidence"] == 0.812
