import time

import requests

from inference.guess_validator import GuessValidator
from inference.question_selector import QuestionSelector
from inference.trait_extractor import TraitExtractor
from inference.update_cycle import run_turn_cycle, select_next_turn
from interaction.cli_helpers import (
    is_exit_command,
    is_reset_command,
    parse_answer,
    print_banner,
    print_gave_up,
    print_invalid_answer_notice,
    print_out_of_knowledge_notice,
    print_reset_notice,
    print_solved,
    print_turn,
    prompt_for_answer,
    prompt_play_again,
)
from knowledge.ranking import score_subject_match
from knowledge.store import load_default_store
from observability.runtime import RuntimeObservability
from oracle import backend as oracle_backend
from oracle.config import ORACLE_DEBUG, ORACLE_MAX_RETRIES, ORACLE_RATE_LIMIT_COOLDOWN_SEC
from oracle.parsing import EmptyReply, parse_guess_reply, parse_question_reply, parse_trait_proposal
from oracle.prompts import build_beyond_knowledge_messages, build_question_messages, build_trait_messages
from oracle.security import redact_sensitive
from session_state import Session


PROMPT_CANDIDATE_SAMPLE = 15
BEYOND_KNOWLEDGE_MAX_GUESSES = 3


def main():
    DetectiveEngine().run_cycle()


class DetectiveEngine:
    def __init__(self, store=None, seed=None, fake_backend=None, oracle_enabled=None, lookup_enabled=None, lookup_fn=None):
        self.store = store if store is not None else load_default_store()
        self.session = Session(seed=seed)
        self.runtime_observability = RuntimeObservability()

        # scripted replies for tests; bypasses the configured backend entirely
        self.fake_backend = fake_backend
        if oracle_enabled is None:
            oracle_enabled = fake_backend is not None or oracle_backend.ORACLE_BACKEND != "offline"
        self.oracle_enabled = oracle_enabled

        self.validator = GuessValidator(
            store=self.store,
            lookup_fn=lookup_fn,
            lookup_enabled=lookup_enabled,
            observability=self.runtime_observability,
        )
        self.extractor = TraitExtractor(propose_fn=self.propose_trait)
        self.selector = QuestionSelector(self.store, validator=self.validator)
        self._out_of_knowledge_notified = False

    def _log_oracle(self, message):
        if ORACLE_DEBUG:
            safe_message = redact_sensitive(message)
            print(f"| ORACLE (Debug): {safe_message}")

    def runtime_health_summary(self):
        return self.runtime_observability.summary()

    def _backend_name(self):
        return "scripted" if self.fake_backend is not None else oracle_backend.ORACLE_BACKEND

    def _call_oracle_backend(self, messages):
        return oracle_backend.call_oracle_backend(self, messages)

    def _call_oracle(self, messages, purpose):
        """One oracle round trip with retries. Returns the raw reply text, "" when every attempt failed."""
        backend = self._backend_name()
        for attempt in range(1, ORACLE_MAX_RETRIES + 1):
            call_started = time.perf_counter()
            try:
                raw, status_code, done_value = self._call_oracle_backend(messages)
                latency_ms = (time.perf_counter() - call_started) * 1000.0
                self.runtime_observability.record_oracle_call(
                    purpose=purpose,
                    backend=backend,
                    success=True,
                    latency_ms=latency_ms,
                    status_code=status_code,
                )
                self._log_oracle(
                    f"backend={backend} purpose={purpose} attempt={attempt}/{ORACLE_MAX_RETRIES} "
                    f"status={status_code} done={done_value} raw_len={len(raw or '')}"
                )
                return raw or ""
            except (requests.exceptions.RequestException, RuntimeError, ValueError) as ex:
                status_code = None
                if isinstance(ex, requests.exceptions.HTTPError) and ex.response is not None:
                    status_code = ex.response.status_code
                    if status_code == 429:
                        retry_after = ex.response.headers.get("Retry-After", "")
                        try:
                            wait_seconds = float(retry_after)
                        except ValueError:
                            wait_seconds = min(2 ** attempt, 20)
                        wait_seconds = max(wait_seconds, ORACLE_RATE_LIMIT_COOLDOWN_SEC)
                        self._log_oracle(
                            f"rate limited (429) on attempt={attempt}; waiting {wait_seconds:.1f}s before retry"
                        )
                        time.sleep(wait_seconds)

                latency_ms = (time.perf_counter() - call_started) * 1000.0
                self.runtime_observability.record_oracle_call(
                    purpose=purpose,
                    backend=backend,
                    success=False,
                    latency_ms=latency_ms,
                    status_code=status_code,
                    error_type=type(ex).__name__,
                )
                self._log_oracle(
                    f"request/parse failure purpose={purpose} attempt={attempt}/{ORACLE_MAX_RETRIES}: "
                    f"{type(ex).__name__}: {ex}"
                )
        return ""

    # --- oracle proposals (all untrusted; callers validate) ---

    def propose_trait(self, question, answer, existing_traits):
        if not self.oracle_enabled:
            return EmptyReply()
        raw = self._call_oracle(build_trait_messages(question, answer, existing_traits), "trait")
        return parse_trait_proposal(raw)

    def propose_question(self, candidates):
        if not self.oracle_enabled:
            return EmptyReply()
        sample = sorted(candidates, key=lambda subject: (-subject.sitelinks, subject.name))
        names = [subject.name for subject in sample[:PROMPT_CANDIDATE_SAMPLE]]
        raw = self._call_oracle(build_question_messages(self.session, names, len(candidates)), "question")
        return parse_question_reply(raw)

    def propose_beyond_knowledge_guesses(self):
        if not self.oracle_enabled:
            return []
        traits = self.session.live_traits()
        nearest = sorted(self.store, key=lambda subject: (-score_subject_match(subject, traits), subject.name))
        names = [subject.name for subject in nearest if not self.session.is_rejected(subject.name)][:5]
        raw = self._call_oracle(build_beyond_knowledge_messages(self.session, names), "beyond_knowledge")
        return parse_guess_reply(raw)[:BEYOND_KNOWLEDGE_MAX_GUESSES]

    # --- game API ---

    def new_game(self, seed=None):
        """Reset the session and return the opening TurnOutput."""
        self.session.reset(seed=seed)
        self._out_of_knowledge_notified = False
        return select_next_turn(self)

    def submit_answer(self, answer):
        return run_turn_cycle(self, answer)

    def _reset_for_new_session(self):
        """Hard reset of per-game state; the store, backend and observability counters survive."""
        return self.new_game()

    def run_cycle(self, input_fn=input, print_fn=print):
        print_banner(print_fn=print_fn)
        output = self.new_game()

        while True:
            if output.solved or output.gave_up:
                if output.solved:
                    print_solved(self.session.solved_name, self.session.turn_number, print_fn=print_fn)
                else:
                    print_gave_up(print_fn=print_fn)
                if not prompt_play_again(input_fn=input_fn):
                    break
                output = self.new_game()
                continue

            if output.out_of_knowledge and not self._out_of_knowledge_notified:
                print_out_of_knowledge_notice(print_fn=print_fn)
                self._out_of_knowledge_notified = True
            print_turn(output, self.session.turn_number + 1, print_fn=print_fn)

            raw = prompt_for_answer(input_fn=input_fn).strip().lower()
            if is_exit_command(raw):
                break
            if is_reset_command(raw):
                output = self._reset_for_new_session()
                print_reset_notice(print_fn=print_fn)
                continue
            answer = parse_answer(raw)
            if answer is None:
                print_invalid_answer_notice(print_fn=print_fn)
                continue
            output = self.submit_answer(answer)


if __name__ == "__main__":
    main()
