from oracle.parsing import (
    EmptyReply,
    MalformedReply,
    TraitProposal,
    ValidReply,
    parse_guess_reply,
    parse_question_reply,
    parse_trait_proposal,
)
from oracle.prompts import build_beyond_knowledge_messages, build_question_messages, build_trait_messages
from oracle.security import mask_headers, redact_sensitive
from session_state import Session, Trait


def test_question_reply_strips_reasoning_and_code_fences():
    raw = "<think>the pool is big</think>```json\n{\"question\": \"Can your  character fly?\", \"top_guesses\": [\"Superman\", {\"name\": \"Thor\", \"confidence\": 3}]}\n```"

    reply = parse_question_reply(raw)

    assert isinstance(reply, ValidReply)
    assert reply.question == "Can your character fly?"
    assert [guess.name for guess in reply.guesses] == ["Superman", "Thor"]
    assert reply.guesses[0].confidence == 0.5
    assert reply.guesses[1].confidence == 0.99


def test_question_reply_tags_empty_and_malformed_output():
    assert isinstance(parse_question_reply(""), EmptyReply)
    assert isinstance(parse_question_reply("I am not sure"), MalformedReply)
    malformed = parse_question_reply("{\"top_guesses\": []}")
    assert isinstance(malformed, MalformedReply)
    assert malformed.reason == "missing question"


def test_question_reply_finds_embedded_json():
    reply = parse_question_reply("Sure! {\"question\": \"Is your character male?\"} Hope that helps.")

    assert reply == ValidReply(question="Is your character male?", guesses=())


def test_trait_proposal_variants():
    assert parse_trait_proposal("null") == EmptyReply()
    assert parse_trait_proposal("{}") == EmptyReply()
    assert parse_trait_proposal("[{\"key\": \"gender\", \"value\": \"male\", \"confidence\": 0.8}]") == TraitProposal(
        key="gender", value="male", confidence=0.8
    )
    assert parse_trait_proposal("{\"key\": \"fictional\", \"value\": false}") == TraitProposal(
        key="fictional", value="false", confidence=None
    )
    assert isinstance(parse_trait_proposal("{\"key\": \"gender\"}"), MalformedReply)


def test_guess_reply_is_clamped_and_deduplicated():
    guesses = parse_guess_reply(
        "{\"top_guesses\": [{\"name\": \"Harry Potter\", \"confidence\": 0.95}, "
        "{\"name\": \"harry potter\"}, {\"name\": \"\"}, {\"name\": \"Gandalf\", \"confidence\": 0.01}]}"
    )

    assert [(guess.name, guess.confidence) for guess in guesses] == [("Harry Potter", 0.8), ("Gandalf", 0.1)]
    assert parse_guess_reply("") == []


def test_prompts_carry_history_and_rejections():
    session = Session(seed=1)
    session.add_trait(Trait(key="fictional", value="true", confidence=0.9, turn_added=1))
    session.record_turn("Is your character fictional?", "yes")
    session.record_rejected_guess("Batman")

    question_messages = build_question_messages(session, ["Spider-Man", "Superman"], 12)
    beyond_messages = build_beyond_knowledge_messages(session, ["Spider-Man"])
    trait_messages = build_trait_messages("Is your character real?", "probably_not")

    assert "Remaining candidates (12): Spider-Man, Superman" in question_messages[1]["content"]
    assert "Is your character fictional? -> Yes" in question_messages[1]["content"]
    assert "Rejected guesses: Batman" in question_messages[1]["content"]
    assert "Closest known characters" in beyond_messages[1]["content"]
    assert "Answer: Probably not" in trait_messages[1]["content"]


def test_secrets_are_redacted_from_debug_output():
    assert "gsk_abcdefghijklmnop" not in redact_sensitive("key gsk_abcdefghijklmnop")
    assert "abcdef123456" not in redact_sensitive("Authorization: Bearer abcdef123456")
    assert mask_headers({"Authorization": "Bearer x", "Accept": "application/json"}) == {
        "Authorization": "***",
        "Accept": "application/json",
    }
