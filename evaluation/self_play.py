import argparse
import json
import os
import random
import sys

os.environ.setdefault("DT_ORACLE_BACKEND", "offline")
os.environ.setdefault("DT_DEBUG", "0")

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from detective_engine import DetectiveEngine
from evaluation.experiment_manager import finalize_managed_run, prepare_managed_run
from evaluation.reporting import (
    CATEGORY_FIELDS,
    GAME_FIELDS,
    calculate_metrics,
    ensure_dir,
    format_metrics,
    plot_turn_histogram,
    write_csv,
)
from inference.question_bank import ENTROPY_CATALOGUE
from inference.trait_extractor import rule_based_trait
from knowledge.predicates import subject_matches_trait
from knowledge.store import load_default_store


DEFAULT_MAX_TURNS = 40
_CATALOGUE_BY_TEXT = {entry.text.lower(): entry for entry in ENTROPY_CATALOGUE}


def _load_config(path):
    if not path:
        return {}
    ext = os.path.splitext(path)[1].lower()
    if ext in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise RuntimeError("YAML config requested but PyYAML is not installed. Install with: pip install pyyaml") from exc
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
            return data if isinstance(data, dict) else {}

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f) or {}
        return data if isinstance(data, dict) else {}


def simulate_answer(question, subject):
    """
    Answer a question the way a player thinking of `subject` would.

    Catalogue questions are answered from their own predicate; other shapes are
    mapped to the trait a "yes" would imply. Anything else gets "dont_know".
    """
    if not question:
        return "dont_know"
    entry = _CATALOGUE_BY_TEXT.get(" ".join(question.strip().lower().split()))
    if entry is not None:
        return "yes" if entry.test(subject) else "no"

    implied = rule_based_trait(question, "yes", 0)
    if implied is not None:
        return "yes" if subject_matches_trait(subject, implied) else "no"
    return "dont_know"


def play_game(engine, subject, max_turns=DEFAULT_MAX_TURNS, seed=None):
    output = engine.new_game(seed=seed)
    guesses_made = 0
    out_of_knowledge = False

    while engine.session.turn_number < max_turns:
        out_of_knowledge = out_of_knowledge or output.out_of_knowledge
        if output.is_guess_phase:
            guesses_made += 1
            answer = "yes" if engine.store.get(output.guesses[0].name) is subject else "no"
        else:
            answer = simulate_answer(output.question, subject)
        output = engine.submit_answer(answer)
        if output.solved or output.gave_up:
            break

    solved = bool(output.solved)
    return {
        "subject": subject.name,
        "category": subject.category,
        "seed": seed if seed is not None else "",
        "solved": int(solved),
        "turns": engine.session.turn_number,
        "guesses_made": guesses_made,
        "solved_rank": guesses_made if solved else "",
        "traits_confirmed": len(engine.session.live_traits()),
        "out_of_knowledge": int(out_of_knowledge),
    }


def run_self_play(games=20, seed=42, max_turns=DEFAULT_MAX_TURNS, store=None):
    """Play `games` offline games against subjects drawn from the store."""
    store = store if store is not None else load_default_store()
    rng = random.Random(seed)
    subjects = list(store)
    engine = DetectiveEngine(store=store, seed=seed, oracle_enabled=False, lookup_enabled=False)

    rows = []
    for game_index in range(games):
        subject = subjects[rng.randrange(len(subjects))]
        rows.append(play_game(engine, subject, max_turns=max_turns, seed=seed + game_index))
    return rows, engine.runtime_health_summary()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Offline self-play evaluation for the twenty questions engine")
    parser.add_argument("--games", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-turns", type=int, default=None)
    parser.add_argument("--out-dir", default=None)
    parser.add_argument("--config", default="", help="Optional JSON/YAML config file")
    parser.add_argument("--plots", action="store_true", help="Write a turns-to-success histogram (needs matplotlib)")
    parser.add_argument("--managed", action="store_true", help="Write into a timestamped run directory with a manifest")
    parser.add_argument("--run-name", default="")
    args = parser.parse_args(argv)

    cfg = _load_config(args.config)
    games = args.games if args.games is not None else int(cfg.get("games", 20))
    seed = args.seed if args.seed is not None else int(cfg.get("seed", 42))
    max_turns = args.max_turns if args.max_turns is not None else int(cfg.get("max_turns", DEFAULT_MAX_TURNS))
    out_dir = args.out_dir or cfg.get("out_dir", os.path.join(ROOT_DIR, "evaluation", "results"))
    plots = args.plots or bool(cfg.get("plots", False))

    store = load_default_store()
    manifest_path = None
    if args.managed:
        out_dir, manifest_path = prepare_managed_run(
            out_dir,
            games=games,
            seed=seed,
            max_turns=max_turns,
            config_path=args.config,
            argv=sys.argv if argv is None else argv,
            run_name=args.run_name or cfg.get("run_name", ""),
            store=store,
        )
    ensure_dir(out_dir)

    rows, health = run_self_play(games=games, seed=seed, max_turns=max_turns, store=store)
    metrics = calculate_metrics(rows)

    write_csv(os.path.join(out_dir, "games.csv"), rows, GAME_FIELDS)
    write_csv(os.path.join(out_dir, "by_category.csv"), metrics["by_category"], CATEGORY_FIELDS)
    with open(os.path.join(out_dir, "summary.json"), "w", encoding="utf-8") as f:
        json.dump({"metrics": metrics, "runtime": health}, f, indent=2, sort_keys=True)
    if plots:
        plot_turn_histogram(out_dir, rows)
    if manifest_path:
        finalize_managed_run(manifest_path, metrics, health)

    print(format_metrics(metrics))
    print(f"\nResults written to {out_dir}")
    return metrics


if __name__ == "__main__":
    main()
