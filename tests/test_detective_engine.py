import pytest

from detective_engine import DetectiveEngine
from inference.question_bank import BROAD_QUESTIONS
from inference.topic_tracker import find_redundancy, normalize_question
from oracle.backend import FakeBackend


def _offline_engine(store):
    return DetectiveEngine(store=store, seed=3, oracle_enabled=False, lookup_enabled=False)


def test_offline_game_narrows_to_a_direct_guess_and_solves(small_store):
    engine = _offline_engine(small_store)

    output = engine.new_game(seed=3)
    assert output.question == "Is your character fictional?"
    assert not output.is_guess_phase

    output = engine.submit_answer("yes")
    assert output.question == "Is your character male?"
    assert [(trait.key, trait.value) for trait in output.traits] == [("fictional", "true")]

    output = engine.submit_answer("no")
    assert output.is_guess_phase
    assert output.question is None
    assert output.guesses[0].name == "Wonder Woman"

    output = engine.submit_answer("yes")
    assert output.solved
    assert engine.session.solved_name == "Wonder Woman"
    assert engine.session.turns[-1].question == "Is your character Wonder Woman?"

    with pytest.raises(RuntimeError):
        engine.submit_answer("yes")

    paths = engine.runtime_health_summary()["path_counts"]
    assert paths["fallback"] == 2
    assert paths["direct_guess"] == 1


def test_rejected_guess_leads_out_of_knowledge(small_store):
    engine = _offline_engine(small_store)
    engine.new_game(seed=3)
    engine.submit_answer("yes")
    engine.submit_answer("no")

    output = engine.submit_answer("no")

    assert engine.session.is_rejected("Wonder Woman")
    assert output.out_of_knowledge
    assert output.question in BROAD_QUESTIONS
    assert all(guess.name != "Wonder Woman" for guess in output.guesses)


def test_dont_know_on_a_guess_counts_as_not_confirmed(small_store):
    engine = _offline_engine(small_store)
    engine.new_game(seed=3)
    engine.submit_answer("yes")
    engine.submit_answer("no")

    output = engine.submit_answer("dont_know")

    assert not output.solved
    assert engine.session.is_rejected("Wonder Woman")
    assert "Is your character Wonder Woman?" in engine.session.ambiguous_questions


def test_submit_answer_validation(small_store):
    engine = _offline_engine(small_store)

    with pytest.raises(RuntimeError):
        engine.submit_answer("yes")

    engine.new_game()
    with pytest.raises(ValueError):
        engine.submit_answer("maybe")


def test_oracle_question_and_trait_flow_through_a_turn(small_store):
    fake = FakeBackend(
        [
            {"question": "Is your character real?", "top_guesses": [{"name": "Tom Hanks", "confidence": 0.4}]},
            {"key": "fictional", "value": "false", "confidence": 0.95},
        ]
    )
    engine = DetectiveEngine(store=small_store, seed=5, fake_backend=fake, lookup_enabled=False)

    output = engine.new_game(seed=5)
    assert output.question == "Is your character real?"

    output = engine.submit_answer("no")

    assert engine.session.trait_value("fictional") == "true"
    assert output.question
    assert len(fake.calls) == 3
    summary = engine.runtime_health_summary()
    assert summary["calls_total"] == 3
    assert summary["path_counts"]["oracle"] == 1


def test_malformed_question_reply_falls_back(small_store):
    engine = DetectiveEngine(store=small_store, seed=5, fake_backend=FakeBackend(["not json at all"]), lookup_enabled=False)

    output = engine.new_game(seed=5)

    assert output.question == "Is your character fictional?"
    assert engine.runtime_health_summary()["path_counts"] == {"fallback": 1}


def test_rate_limited_oracle_call_is_retried(monkeypatch, small_store):
    import requests

    import detective_engine as engine_module

    response = requests.Response()
    response.status_code = 429
    response.headers["Retry-After"] = "0"
    error = requests.exceptions.HTTPError(response=response)
    fake = FakeBackend([error, {"question": "Does your character wear a mask?"}])
    engine = DetectiveEngine(store=small_store, seed=5, fake_backend=fake, lookup_enabled=False)

    sleeps = []
    monkeypatch.setattr(engine_module, "ORACLE_RATE_LIMIT_COOLDOWN_SEC", 0)
    monkeypatch.setattr(engine_module.time, "sleep", lambda seconds: sleeps.append(seconds))

    output = engine.new_game(seed=5)

    summary = engine.runtime_health_summary()
    assert output.question == "Does your character wear a mask?"
    assert sleeps == [0.0]
    assert summary["calls_total"] == 2
    assert summary["calls_failure"] == 1


def test_exhausted_retries_degrade_to_the_catalogue(monkeypatch, small_store):
    import requests

    import detective_engine as engine_module

    fake = FakeBackend(default=requests.exceptions.ConnectionError("backend down"))
    engine = DetectiveEngine(store=small_store, seed=5, fake_backend=fake, lookup_enabled=False)
    monkeypatch.setattr(engine_module, "ORACLE_MAX_RETRIES", 3)

    output = engine.new_game(seed=5)

    assert output.question == "Is your character fictional?"
    assert len(fake.calls) == 3
    assert engine.runtime_health_summary()["calls_failure"] == 3


def test_beyond_knowledge_prompt_names_the_nearest_subjects(small_store):
    fake = FakeBackend([{"top_guesses": [{"name": "Harry Potter", "confidence": 0.7}]}])
    engine = DetectiveEngine(store=small_store, seed=5, fake_backend=fake, lookup_enabled=False)
    engine.new_game(seed=5)
    fake.calls.clear()
    fake.responses = [{"top_guesses": [{"name": "Harry Potter", "confidence": 0.7}]}]

    guesses = engine.propose_beyond_knowledge_guesses()

    assert [guess.name for guess in guesses] == ["Harry Potter"]
    assert "Closest known characters" in fake.calls[0][1]["content"]


def test_new_game_forgets_the_previous_session(small_store):
    engine = _offline_engine(small_store)
    engine.new_game(seed=3)
    engine.submit_answer("yes")

    output = engine.new_game(seed=4)

    assert engine.session.seed == 4
    assert engine.session.turns == []
    assert output.traits == []
    assert output.question == "Is your character fictional?"


@pytest.mark.parametrize("answer", ["no", "yes", "probably_not", "dont_know"])
def test_a_long_game_never_repeats_a_question(answer):
    engine = DetectiveEngine(seed=3, oracle_enabled=False, lookup_enabled=False)
    output = engine.new_game(seed=3)

    for _ in range(80):
        if output.solved or output.gave_up:
            break
        session = engine.session
        if output.question is not None:
            asked = [normalize_question(question) for question in session.asked_questions()]
            assert normalize_question(output.question) not in asked
            assert find_redundancy(output.question, session.asked_questions(), session.confirmed_keys()) is None
            output = engine.submit_answer(answer)
        else:
            output = engine.submit_answer("no")

    assert output.solved or output.gave_up or engine.session.turn_number >= 80
