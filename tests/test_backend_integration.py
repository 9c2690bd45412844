import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from detective_engine import DetectiveEngine
from oracle import backend as oracle_backend


class _BackendHandler(BaseHTTPRequestHandler):
    response_payload = {}
    captured = {}

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", "0"))
        body = self.rfile.read(content_length).decode("utf-8") if content_length > 0 else ""
        self.__class__.captured = {
            "path": self.path,
            "headers": dict(self.headers),
            "body": body,
        }
        payload = json.dumps(self.__class__.response_payload).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, *args, **kwargs):
        return


def _serve_once(response_payload):
    _BackendHandler.response_payload = response_payload
    _BackendHandler.captured = {}
    server = HTTPServer(("127.0.0.1", 0), _BackendHandler)
    thread = threading.Thread(target=server.handle_request)
    thread.daemon = True
    thread.start()
    return server, thread, f"http://127.0.0.1:{server.server_port}"


MESSAGES = [
    {"role": "system", "content": "system prompt"},
    {"role": "user", "content": "sample prompt"},
]


def _chat_payload(content):
    return {"choices": [{"message": {"content": content}, "finish_reason": "stop"}]}


def test_lemonade_backend_networked_local_server(monkeypatch, small_store):
    server, thread, url = _serve_once(_chat_payload("{\"question\": \"Is your character male?\"}"))
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)

    monkeypatch.setattr(oracle_backend, "LEMONADE_URL", url)

    raw, status, done = oracle_backend.call_lemonade(engine, MESSAGES)

    thread.join(timeout=2)
    server.server_close()

    body = json.loads(_BackendHandler.captured.get("body", "{}"))
    assert status == 200
    assert done == "stop"
    assert "Is your character male?" in raw
    assert body["messages"][1]["content"] == "sample prompt"
    assert body["response_format"] == {"type": "json_object"}


def test_ollama_backend_networked_local_server(monkeypatch, small_store):
    server, thread, url = _serve_once({"message": {"content": "{\"key\": \"gender\"}"}, "done": True})
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)

    monkeypatch.setattr(oracle_backend, "OLLAMA_URL", url)

    raw, status, done = oracle_backend.call_ollama(engine, MESSAGES)

    thread.join(timeout=2)
    server.server_close()

    assert status == 200
    assert done is True
    assert "gender" in raw
    assert "sample prompt" in _BackendHandler.captured.get("body", "")


def test_groq_backend_networked_with_mocked_secret(monkeypatch, small_store):
    server, thread, url = _serve_once(_chat_payload("{\"top_guesses\": []}"))
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)

    monkeypatch.setattr(oracle_backend, "GROQ_API_KEY", "gsk_test_secret_value")
    monkeypatch.setattr(oracle_backend, "GROQ_URL", url)
    monkeypatch.setattr(oracle_backend, "GROQ_MIN_INTERVAL_SEC", 0)

    raw, status, done = oracle_backend.call_groq(engine, MESSAGES)

    thread.join(timeout=2)
    server.server_close()

    headers = _BackendHandler.captured.get("headers", {})
    assert status == 200
    assert "top_guesses" in raw
    assert headers.get("Authorization") == "Bearer gsk_test_secret_value"


def test_groq_backend_requires_a_key(monkeypatch, small_store):
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)
    monkeypatch.setattr(oracle_backend, "GROQ_API_KEY", "")

    with pytest.raises(RuntimeError):
        oracle_backend.call_groq(engine, MESSAGES)


def test_chat_completion_without_choices_is_an_error(monkeypatch, small_store):
    server, thread, url = _serve_once({"choices": []})
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)
    monkeypatch.setattr(oracle_backend, "LEMONADE_URL", url)

    with pytest.raises(RuntimeError):
        oracle_backend.call_lemonade(engine, MESSAGES)

    thread.join(timeout=2)
    server.server_close()


def test_offline_backend_returns_an_empty_reply(small_store):
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)

    assert oracle_backend.call_offline(engine, MESSAGES) == ("", None, "offline")


def test_fake_backend_serializes_and_records(small_store):
    fake = oracle_backend.FakeBackend([{"question": "Is your character male?"}], default="")
    engine = DetectiveEngine(store=small_store, fake_backend=fake, lookup_enabled=False)

    first = oracle_backend.call_oracle_backend(engine, MESSAGES)
    second = oracle_backend.call_oracle_backend(engine, MESSAGES)

    assert json.loads(first[0]) == {"question": "Is your character male?"}
    assert second == ("", 200, "scripted")
    assert len(fake.calls) == 2


def test_non_object_body_is_a_parse_error(monkeypatch, small_store):
    server, thread, url = _serve_once(["not", "an", "object"])
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)
    monkeypatch.setattr(oracle_backend, "LEMONADE_URL", url)

    with pytest.raises(ValueError):
        oracle_backend.call_lemonade(engine, MESSAGES)

    thread.join(timeout=2)
    server.server_close()


def test_non_object_choice_and_ollama_body_are_parse_errors(monkeypatch, small_store):
    engine = DetectiveEngine(store=small_store, lookup_enabled=False)

    server, thread, url = _serve_once({"choices": ["just text"]})
    monkeypatch.setattr(oracle_backend, "LEMONADE_URL", url)
    with pytest.raises(ValueError):
        oracle_backend.call_lemonade(engine, MESSAGES)
    thread.join(timeout=2)
    server.server_close()

    server, thread, url = _serve_once([{"message": {"content": "{}"}}])
    monkeypatch.setattr(oracle_backend, "OLLAMA_URL", url)
    with pytest.raises(ValueError):
        oracle_backend.call_ollama(engine, MESSAGES)
    thread.join(timeout=2)
    server.server_close()


class _ListResponse:
    status_code = 200

    def raise_for_status(self):
        return None

    def json(self):
        return ["not", "an", "object"]


def test_malformed_backend_body_degrades_to_the_catalogue(monkeypatch, small_store):
    import detective_engine as engine_module

    monkeypatch.setattr(oracle_backend, "ORACLE_BACKEND", "lemonade")
    monkeypatch.setattr(oracle_backend.requests, "post", lambda *args, **kwargs: _ListResponse())
    monkeypatch.setattr(engine_module, "ORACLE_MAX_RETRIES", 2)
    engine = DetectiveEngine(store=small_store, seed=5, oracle_enabled=True, lookup_enabled=False)

    output = engine.new_game(seed=5)
    assert output.question == "Is your character fictional?"

    output = engine.submit_answer("yes")

    assert output.question
    summary = engine.runtime_health_summary()
    assert summary["calls_success"] == 0
    assert summary["calls_failure"] >= 2
