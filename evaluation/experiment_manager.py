import json
import os
import platform
import sys
from datetime import datetime, timezone

from evaluation.reporting import ensure_dir
from inference.rules import RULES_VERSION
from oracle.security import redact_sensitive

MANIFEST_NAME = "run_manifest.json"
LATEST_POINTER_NAME = "latest_managed_run.json"


def _utc_now():
    return datetime.now(timezone.utc)


def _write_json(path, payload):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)


def engine_settings_snapshot(environ=None):
    """Every DT_* variable in effect for the run, values passed through the redactor."""
    environ = os.environ if environ is None else environ
    return {
        name: redact_sensitive(value)
        for name, value in sorted(environ.items())
        if name.startswith("DT_")
    }


def prepare_managed_run(base_out_dir, games, seed, max_turns, config_path, argv, run_name="", store=None):
    """Create a timestamped directory for one self-play run and describe it in a manifest.

    The manifest pins what is needed to replay the run: game count, seed, turn cap,
    the dataset the subjects came from and the engine settings read from the
    environment. `latest_managed_run.json` in `base_out_dir` points at the newest run.
    """
    ensure_dir(base_out_dir)

    started = _utc_now()
    safe_name = (run_name or "self_play").strip().replace(" ", "_")
    run_id = f"{started.strftime('%Y%m%d_%H%M%S')}_{safe_name}"
    run_dir = os.path.join(base_out_dir, run_id)
    ensure_dir(run_dir)

    manifest = {
        "run_id": run_id,
        "status": "running",
        "started_at_utc": started.isoformat(),
        "run_dir": run_dir,
        "games": int(games),
        "seed": int(seed),
        "max_turns": int(max_turns),
        "dataset": {
            "version": getattr(store, "version", "") or "",
            "path": getattr(store, "source_path", None) or "",
            "subjects": len(store) if store is not None else 0,
        },
        "rules_version": RULES_VERSION,
        "config": config_path or "",
        "argv": [redact_sensitive(str(arg)) for arg in argv],
        "engine_settings": engine_settings_snapshot(),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
    }

    manifest_path = os.path.join(run_dir, MANIFEST_NAME)
    _write_json(manifest_path, manifest)
    _write_json(os.path.join(base_out_dir, LATEST_POINTER_NAME), {"run_id": run_id, "run_dir": run_dir})
    return run_dir, manifest_path


def finalize_managed_run(manifest_path, metrics, runtime_summary=None):
    """Mark a run finished and copy its headline numbers into the manifest."""
    with open(manifest_path, "r", encoding="utf-8") as f:
        manifest = json.load(f)

    manifest["status"] = "completed"
    manifest["completed_at_utc"] = _utc_now().isoformat()
    manifest["results"] = {
        "games": metrics.get("games", 0),
        "solved": metrics.get("solved", 0),
        "success_rate": metrics.get("success_rate", 0.0),
        "turns_to_success_mean": metrics.get("turns_to_success_mean", ""),
        "out_of_knowledge_games": metrics.get("out_of_knowledge_games", 0),
    }
    if runtime_summary is not None:
        manifest["results"]["slo_pass"] = runtime_summary.get("slo_pass", {})
    _write_json(manifest_path, manifest)
    return manifest


def latest_managed_run(base_out_dir):
    """Manifest of the newest run under `base_out_dir`, or None when nothing was recorded."""
    pointer_path = os.path.join(base_out_dir, LATEST_POINTER_NAME)
    if not os.path.exists(pointer_path):
        return None
    with open(pointer_path, "r", encoding="utf-8") as f:
        pointer = json.load(f)
    manifest_path = os.path.join(pointer["run_dir"], MANIFEST_NAME)
    if not os.path.exists(manifest_path):
        return None
    with open(manifest_path, "r", encoding="utf-8") as f:
        return json.load(f)


__all__ = ["engine_settings_snapshot", "finalize_managed_run", "latest_managed_run", "prepare_managed_run"]
