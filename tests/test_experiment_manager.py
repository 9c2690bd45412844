import json
from pathlib import Path

from evaluation import experiment_manager
from inference.rules import RULES_VERSION


def test_prepare_managed_run(tmp_path, small_store):
    run_dir, manifest_path = experiment_manager.prepare_managed_run(
        base_out_dir=str(tmp_path),
        games=25,
        seed=3,
        max_turns=30,
        config_path="",
        argv=["self_play.py", "--managed"],
        run_name="nightly run",
        store=small_store,
    )

    manifest = json.loads(Path(manifest_path).read_text())
    assert manifest["status"] == "running"
    assert manifest["games"] == 25
    assert manifest["seed"] == 3
    assert manifest["max_turns"] == 30
    assert manifest["dataset"]["subjects"] == len(small_store)
    assert manifest["rules_version"] == RULES_VERSION
    assert manifest["run_id"].endswith("_nightly_run")
    assert manifest["engine_settings"]["DT_ORACLE_BACKEND"] == "offline"
    assert Path(run_dir).is_dir()

    latest = json.loads((tmp_path / "latest_managed_run.json").read_text())
    assert latest["run_id"] == manifest["run_id"]


def test_settings_snapshot_only_keeps_engine_variables_and_redacts_them():
    snapshot = experiment_manager.engine_settings_snapshot(
        {"DT_MAX_TURNS": "40", "DT_EXTRA": "token=abcdef123456", "HOME": "/root", "GROQ_API_KEY": "gsk_zzzzzzzzzzzzzzzz"}
    )

    assert set(snapshot) == {"DT_EXTRA", "DT_MAX_TURNS"}
    assert snapshot["DT_MAX_TURNS"] == "40"
    assert "abcdef123456" not in snapshot["DT_EXTRA"]


def test_finalize_records_results_and_latest_lookup(tmp_path):
    _, manifest_path = experiment_manager.prepare_managed_run(
        str(tmp_path), games=2, seed=1, max_turns=10, config_path="", argv=[]
    )

    experiment_manager.finalize_managed_run(
        manifest_path,
        {"games": 2, "solved": 1, "success_rate": 0.5, "turns_to_success_mean": 7.0, "out_of_knowledge_games": 0},
        {"slo_pass": {"oracle_success_rate": True}},
    )

    latest = experiment_manager.latest_managed_run(str(tmp_path))
    assert latest["status"] == "completed"
    assert latest["results"]["success_rate"] == 0.5
    assert latest["results"]["slo_pass"] == {"oracle_success_rate": True}
    assert latest["dataset"]["subjects"] == 0


def test_latest_run_is_none_without_runs(tmp_path):
    assert experiment_manager.latest_managed_run(str(tmp_path)) is None
