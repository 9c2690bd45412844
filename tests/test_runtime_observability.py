import json

from observability.runtime import RuntimeObservability


def test_runtime_observability_summary():
    obs = RuntimeObservability(structured_logs=False)
    obs.record_oracle_call(purpose="question", backend="groq", success=True, latency_ms=120.0, status_code=200)
    obs.record_oracle_call(
        purpose="trait", backend="groq", success=False, latency_ms=300.0, status_code=429, error_type="HTTPError"
    )

    summary = obs.summary()

    assert summary["calls_total"] == 2
    assert summary["calls_success"] == 1
    assert summary["calls_failure"] == 1
    assert summary["success_rate"] == 0.5
    assert summary["p95_latency_ms"] >= 120.0
    assert "oracle_success_rate" in summary["slo_targets"]
    assert "oracle_failure_ratio" in summary["error_budget_targets"]
    assert summary["slo_pass"]["oracle_success_rate"] is False


def test_turn_paths_and_fallback_ratio():
    obs = RuntimeObservability(structured_logs=False)
    obs.record_turn(turn=0, path="entropy", candidates=77)
    obs.record_turn(turn=1, path="fallback", candidates=8)
    obs.record_turn(turn=2, path="broad", candidates=0, relaxed=True, out_of_knowledge=True)
    obs.record_turn(turn=3, path="oracle", candidates=4)

    summary = obs.summary()

    assert summary["turns_total"] == 4
    assert summary["path_counts"] == {"entropy": 1, "fallback": 1, "broad": 1, "oracle": 1}
    assert summary["fallback_ratio"] == 0.5
    assert summary["out_of_knowledge_turns"] == 1
    assert summary["slo_pass"]["fallback_question_ratio"] is True


def test_lookup_counters_separate_cache_hits():
    obs = RuntimeObservability(structured_logs=False)
    obs.record_lookup(name="Hulk", success=True, latency_ms=80.0)
    obs.record_lookup(name="Hulk", success=True, latency_ms=0.0, cached=True)
    obs.record_lookup(name="Nobody", success=False, latency_ms=5000.0)

    summary = obs.summary()

    assert summary["lookups_total"] == 2
    assert summary["lookup_cache_hits"] == 1
    assert summary["lookup_success_rate"] == 0.5


def test_structured_logs_are_json_lines(capsys):
    obs = RuntimeObservability(structured_logs=True)
    obs.record_turn(turn=4, path="direct_guess", candidates=1)

    line = capsys.readouterr().out.strip()
    payload = json.loads(line)

    assert payload["event"] == "turn_selected"
    assert payload["path"] == "direct_guess"
    assert payload["candidates"] == 1


def test_empty_summary_is_healthy():
    summary = RuntimeObservability(structured_logs=False).summary()

    assert summary["success_rate"] == 1.0
    assert summary["fallback_ratio"] == 0.0
    assert all(summary["slo_pass"].values())
