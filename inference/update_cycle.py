from inference.config import MAX_TURNS
from inference.trait_extractor import deduce_implied_traits
from knowledge.filter import filter_candidates
from session_state import ANSWER_VALUES, POSITIVE_ANSWERS, TurnOutput


def guess_prompt(name):
    return f"Is your character {name}?"


def resolve_pending_guess(engine, answer):
    """
    Apply the player's answer to an outstanding guess.

    yes/probably solves the game. Anything else leaves the guess unconfirmed:
    it is recorded as rejected (with the trait snapshot of this moment) so it is
    never offered again. No trait is extracted from a guess turn.
    """
    session = engine.session
    guess = session.pending_guess
    session.pending_guess = None
    session.record_turn(guess_prompt(guess.name), answer)
    if answer in POSITIVE_ANSWERS:
        session.solved_name = guess.name
        return True
    session.record_rejected_guess(guess.name)
    engine._log_oracle(f"guess '{guess.name}' not confirmed ({answer}); {len(session.rejected_guesses)} rejected so far")
    return False


def absorb_answer(engine, question, answer):
    """Record the turn, extract at most one trait, and add it (after anything it implies) to the ledger."""
    session = engine.session
    session.record_turn(question, answer)
    trait = engine.extractor.extract(question, answer, session)
    if trait is None:
        return None
    for implied in deduce_implied_traits(session, trait):
        session.add_trait(implied)
    # added last so a relaxed filter drops it first
    session.add_trait(trait)
    return trait


def select_next_turn(engine):
    """Filter the store through the ledger and pick the next question or guess."""
    session = engine.session
    filter_result = filter_candidates(engine.store, session.live_traits())
    if filter_result.relaxed:
        engine._log_oracle(
            f"exact filter empty; dropped {filter_result.dropped_trait.key}={filter_result.dropped_trait.value} "
            f"-> {len(filter_result.candidates)} candidates"
        )

    selection = engine.selector.select_next(
        filter_result,
        session,
        propose_question=engine.propose_question,
        propose_beyond=engine.propose_beyond_knowledge_guesses,
    )
    engine.runtime_observability.record_turn(
        turn=session.turn_number,
        path=selection.path,
        candidates=len(filter_result.candidates),
        relaxed=filter_result.relaxed,
        out_of_knowledge=selection.out_of_knowledge,
    )

    if selection.gave_up:
        session.pending_guess = None
        session.current_question = None
        return TurnOutput(traits=session.live_traits(), out_of_knowledge=selection.out_of_knowledge, gave_up=True)
    if selection.is_guess and selection.guesses:
        session.pending_guess = selection.guesses[0]
        session.current_question = None
        guesses = selection.guesses[:1]
    else:
        session.pending_guess = None
        session.current_question = selection.question
        guesses = selection.guesses
    return TurnOutput(
        question=session.current_question,
        traits=session.live_traits(),
        guesses=list(guesses),
        is_guess_phase=session.pending_guess is not None,
        out_of_knowledge=selection.out_of_knowledge,
    )


def run_turn_cycle(engine, answer):
    """
    One turn: answer -> extraction -> ledger -> filter -> selection.

    Returns the TurnOutput the presentation layer shows next.
    """
    if answer not in ANSWER_VALUES:
        raise ValueError(f"unsupported answer '{answer}', expected one of {ANSWER_VALUES}")
    session = engine.session
    if session.solved_name is not None:
        raise RuntimeError("game already solved; start a new game")

    if session.pending_guess is not None:
        guess = session.pending_guess
        if resolve_pending_guess(engine, answer):
            return TurnOutput(traits=session.live_traits(), guesses=[guess], solved=True)
    else:
        if session.current_question is None:
            raise RuntimeError("no question is waiting for an answer; start a new game")
        absorb_answer(engine, session.current_question, answer)

    if session.turn_number >= MAX_TURNS:
        session.current_question = None
        return TurnOutput(traits=session.live_traits(), gave_up=True)
    return select_next_turn(engine)


__all__ = ["absorb_answer", "guess_prompt", "resolve_pending_guess", "run_turn_cycle", "select_next_turn"]
