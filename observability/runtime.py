import json
import os
import time
from dataclasses import dataclass, field


SLO_TARGETS = {
    "oracle_success_rate": 0.99,
    "oracle_p95_latency_ms": 4000.0,
    "lookup_success_rate": 0.95,
}

ERROR_BUDGET_TARGETS = {
    "oracle_failure_ratio": 0.01,
    "fallback_question_ratio": 0.5,
}

FALLBACK_PATHS = frozenset({"fallback", "broad"})


def _p95(values):
    ordered = sorted(values)
    if not ordered:
        return 0.0
    index = min(len(ordered) - 1, int(round(0.95 * (len(ordered) - 1))))
    return ordered[index]


@dataclass
class RuntimeObservability:
    structured_logs: bool = field(default_factory=lambda: os.getenv("DT_STRUCTURED_LOGS", "0") == "1")
    call_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    latencies_ms: list = field(default_factory=list)
    lookup_count: int = 0
    lookup_success_count: int = 0
    lookup_cache_hits: int = 0
    turn_count: int = 0
    path_counts: dict = field(default_factory=dict)
    out_of_knowledge_turns: int = 0

    def _emit(self, payload):
        if self.structured_logs:
            print(json.dumps(payload, sort_keys=True))

    def record_oracle_call(self, purpose, backend, success, latency_ms, status_code=None, error_type=None):
        self.call_count += 1
        if success:
            self.success_count += 1
        else:
            self.failure_count += 1
        self.latencies_ms.append(float(latency_ms))

        self._emit(
            {
                "event": "oracle_call",
                "ts": time.time(),
                "purpose": purpose,
                "backend": backend,
                "success": bool(success),
                "latency_ms": round(float(latency_ms), 3),
                "status_code": status_code,
                "error_type": error_type,
            }
        )

    def record_lookup(self, name, success, latency_ms, cached=False):
        if cached:
            self.lookup_cache_hits += 1
        else:
            self.lookup_count += 1
            if success:
                self.lookup_success_count += 1

        self._emit(
            {
                "event": "guess_lookup",
                "ts": time.time(),
                "name": name,
                "success": bool(success),
                "cached": bool(cached),
                "latency_ms": round(float(latency_ms), 3),
            }
        )

    def record_turn(self, turn, path, candidates, relaxed=False, out_of_knowledge=False):
        self.turn_count += 1
        self.path_counts[path] = self.path_counts.get(path, 0) + 1
        if out_of_knowledge:
            self.out_of_knowledge_turns += 1

        self._emit(
            {
                "event": "turn_selected",
                "ts": time.time(),
                "turn": turn,
                "path": path,
                "candidates": candidates,
                "relaxed": bool(relaxed),
                "out_of_knowledge": bool(out_of_knowledge),
            }
        )

    def summary(self):
        total = self.call_count
        success_rate = (self.success_count / total) if total else 1.0
        failure_ratio = (self.failure_count / total) if total else 0.0
        p95_latency = _p95(self.latencies_ms)
        lookup_success_rate = (self.lookup_success_count / self.lookup_count) if self.lookup_count else 1.0
        fallback_turns = sum(count for path, count in self.path_counts.items() if path in FALLBACK_PATHS)
        fallback_ratio = (fallback_turns / self.turn_count) if self.turn_count else 0.0

        return {
            "calls_total": total,
            "calls_success": self.success_count,
            "calls_failure": self.failure_count,
            "success_rate": success_rate,
            "p95_latency_ms": p95_latency,
            "failure_ratio": failure_ratio,
            "lookups_total": self.lookup_count,
            "lookup_cache_hits": self.lookup_cache_hits,
            "lookup_success_rate": lookup_success_rate,
            "turns_total": self.turn_count,
            "path_counts": dict(self.path_counts),
            "fallback_ratio": fallback_ratio,
            "out_of_knowledge_turns": self.out_of_knowledge_turns,
            "slo_targets": dict(SLO_TARGETS),
            "error_budget_targets": dict(ERROR_BUDGET_TARGETS),
            "slo_pass": {
                "oracle_success_rate": success_rate >= SLO_TARGETS["oracle_success_rate"],
                "oracle_p95_latency_ms": p95_latency <= SLO_TARGETS["oracle_p95_latency_ms"],
                "lookup_success_rate": lookup_success_rate >= SLO_TARGETS["lookup_success_rate"],
                "oracle_failure_ratio": failure_ratio <= ERROR_BUDGET_TARGETS["oracle_failure_ratio"],
                "fallback_question_ratio": fallback_ratio <= ERROR_BUDGET_TARGETS["fallback_question_ratio"],
            },
        }


__all__ = ["ERROR_BUDGET_TARGETS", "RuntimeObservability", "SLO_TARGETS"]
