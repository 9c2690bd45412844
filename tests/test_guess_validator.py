import json
import threading
import time
from http.server import BaseHTTPRequestHandler, HTTPServer

import requests

from inference import guess_validator
from inference.guess_validator import GuessValidator, contradicts, fetch_summary_traits, traits_from_summary
from observability.runtime import RuntimeObservability
from session_state import Guess, Session, Trait


def _trait(key, value):
    return Trait(key=key, value=value, confidence=0.9, turn_added=0)


class _SummaryHandler(BaseHTTPRequestHandler):
    pages = {}
    requested = []

    def do_GET(self):
        self.__class__.requested.append(self.path)
        title = self.path.rsplit("/", 1)[-1]
        page = self.__class__.pages.get(title)
        if page is None:
            self.send_response(404)
            self.end_headers()
            return
        payload = json.dumps(page).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, *args, **kwargs):
        return


def _serve(pages, requests_expected=1):
    _SummaryHandler.pages = pages
    _SummaryHandler.requested = []
    server = HTTPServer(("127.0.0.1", 0), _SummaryHandler)

    def _handle():
        for _ in range(requests_expected):
            server.handle_request()

    thread = threading.Thread(target=_handle)
    thread.daemon = True
    thread.start()
    return server, thread, f"http://127.0.0.1:{server.server_port}/page/summary/{{title}}"


def test_fetch_summary_traits_from_local_server(monkeypatch):
    server, thread, url = _serve(
        {
            "Hulk": {
                "description": "Fictional superhero appearing in Marvel comics",
                "extract": "The Hulk is a superhero. He has superhuman strength.",
            }
        }
    )
    monkeypatch.setattr(guess_validator, "LOOKUP_URL_TEMPLATE", url)

    traits = fetch_summary_traits("Hulk")

    thread.join(timeout=2)
    server.server_close()

    assert traits["fictional"] == "true"
    assert traits["gender"] == "male"
    assert traits["has_powers"] == "true"
    assert traits["origin_medium"] == "comic"
    assert _SummaryHandler.requested == ["/page/summary/Hulk"]


def test_fetch_summary_traits_missing_page_returns_none(monkeypatch):
    server, thread, url = _serve({})
    monkeypatch.setattr(guess_validator, "LOOKUP_URL_TEMPLATE", url)

    assert fetch_summary_traits("Nobody Special") is None

    thread.join(timeout=2)
    server.server_close()


def test_summary_of_a_real_person():
    traits = traits_from_summary({"description": "American actor and producer", "extract": "He starred in films."})

    assert traits == {"gender": "male", "fictional": "false", "species": "human", "has_powers": "false"}


def test_contradiction_rules():
    assert contradicts(_trait("fictional", "true"), {"fictional": "false"})
    assert not contradicts(_trait("origin_medium", "anime"), {"origin_medium": "manga"})
    assert contradicts(_trait("gender", "female"), {"gender": "male"})
    assert not contradicts(_trait("alignment", "villain"), {"gender": "male"})


def test_store_and_reference_table_are_checked_before_lookups(small_store):
    calls = []
    validator = GuessValidator(
        store=small_store,
        reference_table={"darth vader": {"fictional": "true", "alignment": "villain"}},
        lookup_fn=lambda name: calls.append(name),
        lookup_enabled=True,
        log_fn=lambda _: None,
    )
    session = Session(seed=1)
    traits = [_trait("fictional", "true"), _trait("alignment", "hero")]

    kept = validator.filter_compatible(
        [Guess("Spider-Man", 0.6), Guess("Darth Vader", 0.5), Guess("spider-man", 0.4)], traits, session
    )

    assert [guess.name for guess in kept] == ["Spider-Man"]
    assert calls == []


def test_lookups_run_concurrently_and_are_cached_on_the_session():
    started = []

    def _slow_lookup(name):
        started.append(name)
        time.sleep(0.3)
        return {"fictional": "false"} if name == "Real Person" else None

    observability = RuntimeObservability()
    validator = GuessValidator(
        reference_table={},
        lookup_fn=_slow_lookup,
        lookup_enabled=True,
        max_workers=4,
        observability=observability,
        log_fn=lambda _: None,
    )
    session = Session(seed=1)
    guesses = [Guess("Real Person", 0.5), Guess("Unknown One", 0.5), Guess("Unknown Two", 0.5)]

    began = time.perf_counter()
    kept = validator.filter_compatible(guesses, [_trait("fictional", "true")], session)
    elapsed = time.perf_counter() - began

    assert [guess.name for guess in kept] == ["Unknown One", "Unknown Two"]
    assert sorted(started) == ["Real Person", "Unknown One", "Unknown Two"]
    assert elapsed < 0.75
    assert session.lookup_cache["real person"] == {"fictional": "false"}
    assert observability.summary()["lookups_total"] == 3
    assert observability.summary()["lookup_cache_hits"] == 0

    validator.filter_compatible(guesses, [_trait("fictional", "true")], session)
    assert len(started) == 3
    assert observability.summary()["lookups_total"] == 3
    assert observability.summary()["lookup_cache_hits"] == 3


def test_failed_lookup_lets_the_guess_through():
    def _broken(name):
        raise requests.exceptions.ConnectionError("offline")

    observability = RuntimeObservability()
    validator = GuessValidator(
        reference_table={}, lookup_fn=_broken, lookup_enabled=True, observability=observability, log_fn=lambda _: None
    )

    kept = validator.filter_compatible([Guess("Someone", 0.5)], [_trait("gender", "male")], Session(seed=1))

    assert [guess.name for guess in kept] == ["Someone"]
    assert observability.summary()["lookup_success_rate"] == 0.0


def test_rejected_guesses_are_filtered_before_lookup():
    calls = []
    validator = GuessValidator(
        reference_table={}, lookup_fn=lambda name: calls.append(name), lookup_enabled=True, log_fn=lambda _: None
    )
    session = Session(seed=1)
    session.record_rejected_guess("Batman")

    assert validator.filter_compatible([Guess("batman", 0.9)], [], session) == []
    assert calls == []


def test_reference_table_keeps_only_comparable_keys(tmp_path):
    path = tmp_path / "reference.json"
    path.write_text(
        json.dumps({"characters": {"Mary Poppins": {"gender": "female", "hair": "brown", "has_powers": True}}}),
        encoding="utf-8",
    )

    table = guess_validator.load_reference_traits(str(path))

    assert table == {"mary poppins": {"gender": "female", "has_powers": "true"}}
