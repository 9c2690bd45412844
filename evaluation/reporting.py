import csv
import math
import os
import statistics
from collections import defaultdict


GAME_FIELDS = [
    "subject", "category", "seed", "solved", "turns", "guesses_made", "solved_rank",
    "traits_confirmed", "out_of_knowledge",
]
CATEGORY_FIELDS = ["category", "games", "solved", "success_rate", "turns_mean"]


def ensure_dir(path):
    os.makedirs(path, exist_ok=True)


def write_csv(path, rows, fieldnames):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def mean_std_ci(values):
    if not values:
        return "", "", "", ""
    if len(values) == 1:
        value = float(values[0])
        return value, 0.0, value, value

    mean = statistics.mean(values)
    std = statistics.pstdev(values)
    std_error = statistics.stdev(values) / math.sqrt(len(values))
    margin = 1.96 * std_error
    return mean, std, mean - margin, mean + margin


def category_breakdown(game_rows):
    grouped = defaultdict(list)
    for row in game_rows:
        grouped[row["category"]].append(row)

    breakdown = []
    for category in sorted(grouped):
        rows = grouped[category]
        solved = [row for row in rows if int(row["solved"])]
        breakdown.append({
            "category": category,
            "games": len(rows),
            "solved": len(solved),
            "success_rate": len(solved) / len(rows),
            "turns_mean": statistics.mean(float(row["turns"]) for row in solved) if solved else "",
        })
    return breakdown


def hardest_subjects(game_rows, limit=5):
    """Subjects ordered by failure rate, then by turns spent on them."""
    grouped = defaultdict(list)
    for row in game_rows:
        grouped[row["subject"]].append(row)

    scored = []
    for subject, rows in grouped.items():
        failures = sum(1 for row in rows if not int(row["solved"]))
        turns = statistics.mean(float(row["turns"]) for row in rows)
        scored.append((failures / len(rows), turns, subject))
    scored.sort(key=lambda item: (-item[0], -item[1], item[2]))
    return [
        {"subject": subject, "failure_rate": failure_rate, "turns_mean": turns}
        for failure_rate, turns, subject in scored[:limit]
    ]


def calculate_metrics(game_rows):
    total = len(game_rows)
    solved_rows = [row for row in game_rows if int(row["solved"])]
    turns = [float(row["turns"]) for row in solved_rows]
    mean, std, ci_low, ci_high = mean_std_ci(turns)

    rank_distribution = defaultdict(int)
    for row in solved_rows:
        rank_distribution[int(row["solved_rank"])] += 1

    return {
        "games": total,
        "solved": len(solved_rows),
        "success_rate": (len(solved_rows) / total) if total else 0.0,
        "turns_to_success_mean": mean,
        "turns_to_success_std": std,
        "turns_to_success_ci95_low": ci_low,
        "turns_to_success_ci95_high": ci_high,
        "guess_rank_distribution": dict(sorted(rank_distribution.items())),
        "out_of_knowledge_games": sum(1 for row in game_rows if int(row["out_of_knowledge"])),
        "by_category": category_breakdown(game_rows),
        "hardest_subjects": hardest_subjects(game_rows),
    }


def _fmt(value, pattern="{:.2f}"):
    return "n/a" if value in ("", None) else pattern.format(value)


def format_metrics(metrics):
    lines = [
        "=== Self-play results ===",
        f"Games:          {metrics['games']}",
        f"Solved:         {metrics['solved']} ({metrics['success_rate'] * 100:.1f}%)",
        f"Turns to solve: {_fmt(metrics['turns_to_success_mean'])} "
        f"(95% CI {_fmt(metrics['turns_to_success_ci95_low'])} - {_fmt(metrics['turns_to_success_ci95_high'])})",
        f"Out of knowledge in {metrics['out_of_knowledge_games']} games",
    ]
    if metrics["guess_rank_distribution"]:
        ranks = ", ".join(f"#{rank}: {count}" for rank, count in metrics["guess_rank_distribution"].items())
        lines.append(f"Solved on guess: {ranks}")

    lines.append("")
    lines.append("By category:")
    for row in metrics["by_category"]:
        lines.append(
            f"  {row['category']:<14} {row['solved']:>3}/{row['games']:<3} "
            f"({row['success_rate'] * 100:5.1f}%)  turns {_fmt(row['turns_mean'], '{:.1f}')}"
        )

    if metrics["hardest_subjects"]:
        lines.append("")
        lines.append("Hardest subjects:")
        for row in metrics["hardest_subjects"]:
            lines.append(f"  {row['subject']}: failed {row['failure_rate'] * 100:.0f}%, {row['turns_mean']:.1f} turns")
    return "\n".join(lines)


def plot_turn_histogram(out_dir, game_rows):
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("[WARN] matplotlib not installed. Skipping plot generation.")
        return None

    turns = [int(row["turns"]) for row in game_rows if int(row["solved"])]
    if not turns:
        return None

    path = os.path.join(out_dir, "turns_to_success.png")
    plt.figure(figsize=(10, 5))
    plt.hist(turns, bins=range(1, max(turns) + 2))
    plt.title("Turns to success")
    plt.xlabel("Turns")
    plt.ylabel("Games")
    plt.tight_layout()
    plt.savefig(path, dpi=140)
    plt.close()
    return path


__all__ = [
    "CATEGORY_FIELDS",
    "GAME_FIELDS",
    "calculate_metrics",
    "category_breakdown",
    "ensure_dir",
    "format_metrics",
    "hardest_subjects",
    "mean_std_ci",
    "plot_turn_histogram",
    "write_csv",
]
