import json
import time

import requests

from .config import (
    GROQ_API_KEY,
    GROQ_MIN_INTERVAL_SEC,
    GROQ_MODEL,
    GROQ_URL,
    LEMONADE_MODEL,
    LEMONADE_URL,
    OLLAMA_MODEL,
    OLLAMA_URL,
    OPENROUTER_API_KEY,
    OPENROUTER_MIN_INTERVAL_SEC,
    OPENROUTER_MODEL,
    OPENROUTER_URL,
    ORACLE_BACKEND,
    ORACLE_MAX_TOKENS,
    ORACLE_TEMPERATURE,
    ORACLE_TIMEOUT_SEC,
)
from .security import mask_headers


class FakeBackend:
    """Scripted oracle: returns queued replies in order and records every request.

    Replies may be strings, dicts (serialized to JSON) or exceptions (raised).
    Once the queue is empty the `default` reply is returned.
    """

    def __init__(self, responses=None, default=""):
        self.responses = list(responses or [])
        self.default = default
        self.calls = []

    def __call__(self, engine, messages):
        self.calls.append(messages)
        reply = self.responses.pop(0) if self.responses else self.default
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, (dict, list)):
            reply = json.dumps(reply)
        return reply, 200, "scripted"


def call_oracle_backend(engine, messages):
    fake_backend = getattr(engine, "fake_backend", None)
    if fake_backend is not None:
        return fake_backend(engine, messages)
    if ORACLE_BACKEND == "offline":
        return call_offline(engine, messages)
    if ORACLE_BACKEND == "groq":
        return call_groq(engine, messages)
    if ORACLE_BACKEND in {"openrouter", "router"}:
        return call_openrouter(engine, messages)
    if ORACLE_BACKEND == "ollama":
        return call_ollama(engine, messages)
    return call_lemonade(engine, messages)


def _throttle(engine, attr_name, min_interval_sec):
    now = time.time()
    last_call_ts = getattr(engine, attr_name, None)
    if last_call_ts is not None:
        elapsed = now - last_call_ts
        if elapsed < min_interval_sec:
            time.sleep(min_interval_sec - elapsed)
    setattr(engine, attr_name, time.time())


def _json_object(res, label):
    body = res.json()
    if not isinstance(body, dict):
        raise ValueError(f"{label} returned a {type(body).__name__} body, expected a JSON object")
    return body


def _message_content(message, label):
    if not isinstance(message, dict):
        raise ValueError(f"{label} returned a malformed message: {type(message).__name__}")
    raw = message.get("content", "")
    if not isinstance(raw, str):
        raw = json.dumps(raw)
    return raw


def _post_chat_completion(engine, url, model, messages, headers=None, label="oracle"):
    headers = dict(headers or {})
    headers.setdefault("Content-Type", "application/json")
    payload = {
        "model": model,
        "messages": messages,
        "temperature": ORACLE_TEMPERATURE,
        "max_tokens": ORACLE_MAX_TOKENS,
        "response_format": {"type": "json_object"},
    }
    engine._log_oracle(f"POST {url} model='{model}' headers={mask_headers(headers)}")

    res = requests.post(url, json=payload, headers=headers, timeout=ORACLE_TIMEOUT_SEC)
    res.raise_for_status()
    body = _json_object(res, label)

    choices = body.get("choices") or []
    if not isinstance(choices, list) or not choices:
        raise RuntimeError(f"{label} returned no choices")
    choice = choices[0]
    if not isinstance(choice, dict):
        raise ValueError(f"{label} returned a malformed choice: {type(choice).__name__}")

    raw = _message_content(choice.get("message", {}), label)
    finish_reason = choice.get("finish_reason", "completed")
    return raw, res.status_code, finish_reason


def call_lemonade(engine, messages):
    return _post_chat_completion(engine, LEMONADE_URL, LEMONADE_MODEL, messages, label="Lemonade")


def call_ollama(engine, messages):
    payload = {"model": OLLAMA_MODEL, "messages": messages, "stream": False, "format": "json"}
    res = requests.post(OLLAMA_URL, json=payload, timeout=ORACLE_TIMEOUT_SEC)
    res.raise_for_status()
    body = _json_object(res, "Ollama")
    raw = _message_content(body.get("message", {}), "Ollama")
    return raw, res.status_code, body.get("done", None)


def call_groq(engine, messages):
    if not GROQ_API_KEY:
        raise RuntimeError(
            "Missing GROQ_API_KEY environment variable.\n"
            "Get your free API key from: https://console.groq.com/keys"
        )
    _throttle(engine, "_last_groq_call_ts", GROQ_MIN_INTERVAL_SEC)
    headers = {"Authorization": f"Bearer {GROQ_API_KEY}"}
    return _post_chat_completion(engine, GROQ_URL, GROQ_MODEL, messages, headers=headers, label="Groq")


def call_openrouter(engine, messages):
    if not OPENROUTER_API_KEY:
        raise RuntimeError(
            "Missing OPENROUTER_API_KEY environment variable.\n"
            "Get your free API key from: https://openrouter.ai/keys"
        )
    _throttle(engine, "_last_openrouter_call_ts", OPENROUTER_MIN_INTERVAL_SEC)
    headers = {
        "Authorization": f"Bearer {OPENROUTER_API_KEY}",
        "X-Title": "Detective Twenty Questions",
    }
    return _post_chat_completion(
        engine, OPENROUTER_URL, OPENROUTER_MODEL, messages, headers=headers, label="OpenRouter"
    )


def call_offline(engine, messages):
    # no network: an empty reply sends every caller down its deterministic path
    return "", None, "offline"


__all__ = [
    "FakeBackend",
    "call_groq",
    "call_lemonade",
    "call_offline",
    "call_ollama",
    "call_openrouter",
    "call_oracle_backend",
]
