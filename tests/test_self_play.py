import json

from detective_engine import DetectiveEngine
from evaluation import self_play
from evaluation.reporting import GAME_FIELDS


def test_simulated_player_answers_from_the_subject(small_store):
    spider = small_store.get("Spider-Man")
    wonder = small_store.get("Wonder Woman")

    assert self_play.simulate_answer("Is your character fictional?", spider) == "yes"
    assert self_play.simulate_answer("Is your character male?", wonder) == "no"
    assert self_play.simulate_answer("Is your character a villain?", spider) == "no"
    assert self_play.simulate_answer("Is your character published by Marvel?", spider) == "yes"
    assert self_play.simulate_answer("Does your character like pizza?", spider) == "dont_know"
    assert self_play.simulate_answer(None, spider) == "dont_know"


def test_play_game_records_the_outcome(small_store):
    engine = DetectiveEngine(store=small_store, oracle_enabled=False, lookup_enabled=False)

    row = self_play.play_game(engine, small_store.get("Wonder Woman"), max_turns=20, seed=2)

    assert set(row) == set(GAME_FIELDS)
    assert row["solved"] == 1
    assert row["turns"] == 3
    assert row["solved_rank"] == 1


def test_run_self_play_is_bounded_by_max_turns(small_store):
    rows, health = self_play.run_self_play(games=4, seed=1, max_turns=6, store=small_store)

    assert len(rows) == 4
    assert all(row["turns"] <= 6 for row in rows)
    assert health["calls_total"] == 0
    assert health["turns_total"] >= 4


def test_main_writes_results(tmp_path):
    config = tmp_path / "self_play.json"
    config.write_text(json.dumps({"games": 2, "seed": 5, "max_turns": 15}), encoding="utf-8")

    metrics = self_play.main(["--config", str(config), "--out-dir", str(tmp_path / "out")])

    assert metrics["games"] == 2
    assert (tmp_path / "out" / "games.csv").exists()
    assert (tmp_path / "out" / "by_category.csv").exists()
    summary = json.loads((tmp_path / "out" / "summary.json").read_text())
    assert summary["runtime"]["calls_total"] == 0


def test_managed_run_writes_a_manifest(tmp_path):
    self_play.main(["--games", "1", "--max-turns", "10", "--out-dir", str(tmp_path), "--managed", "--run-name", "smoke"])

    latest = json.loads((tmp_path / "latest_managed_run.json").read_text())
    assert latest["run_id"].endswith("_smoke")
    assert (tmp_path / latest["run_id"] / "games.csv").exists()
    manifest = json.loads((tmp_path / latest["run_id"] / "run_manifest.json").read_text())
    assert manifest["status"] == "completed"
    assert manifest["results"]["games"] == 1
