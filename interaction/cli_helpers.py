ANSWER_ALIASES = {
    "y": "yes",
    "yes": "yes",
    "n": "no",
    "no": "no",
    "p": "probably",
    "probably": "probably",
    "pn": "probably_not",
    "probably not": "probably_not",
    "probably_not": "probably_not",
    "?": "dont_know",
    "dk": "dont_know",
    "dont know": "dont_know",
    "don't know": "dont_know",
    "dont_know": "dont_know",
}


def print_banner(print_fn=print):
    print_fn("=== Detective: Twenty Questions ===")
    print_fn("Think of a character, real or fictional. I will ask questions until I can name them.")
    print_fn("Answers: y (yes), n (no), p (probably), pn (probably not), ? (don't know)")
    print_fn("Commands: type 'exit' to quit, or '/new' (or 'new game') to start over.")


def parse_answer(raw):
    cleaned = " ".join(str(raw or "").strip().lower().split())
    return ANSWER_ALIASES.get(cleaned)


def is_reset_command(text):
    return text in {"/new", "new game", "/reset", "restart"}


def is_exit_command(text):
    return text in {"exit", "quit", "/exit"}


def prompt_for_answer(input_fn=input):
    return input_fn("[Your answer]: ")


def print_invalid_answer_notice(print_fn=print):
    print_fn("| INPUT: Please answer y, n, p, pn or ?")


def print_reset_notice(print_fn=print):
    print_fn("| GAME (Reset): Forgot everything. Think of a new character.")


def print_turn(output, turn_number, print_fn=print):
    for trait in output.traits:
        print_fn(f"|   known: {trait.key} = {trait.value} ({trait.confidence * 100:.0f}%)")
    if output.is_guess_phase and output.guesses:
        guess = output.guesses[0]
        print_fn(f"\n[Guess {turn_number}]: Is your character {guess.name}? ({guess.confidence * 100:.0f}% sure)")
        return
    if output.guesses:
        ranked = ", ".join(f"{guess.name} {guess.confidence * 100:.0f}%" for guess in output.guesses[:3])
        print_fn(f"| Current suspects: {ranked}")
    print_fn(f"\n[Question {turn_number}]: {output.question}")


def print_out_of_knowledge_notice(print_fn=print):
    print_fn("| GAME: Nobody I know matches every answer. Guesses from here on are less certain.")


def print_solved(name, turns, print_fn=print):
    print_fn(f"| GAME (Solved): It was {name}! Found in {turns} turns.")


def print_gave_up(print_fn=print):
    print_fn("| GAME (Over): I give up. You win this round.")


def prompt_play_again(input_fn=input):
    reply = input_fn("Play again? (y/n): ").lower().strip()
    while reply not in {"y", "n"}:
        reply = input_fn("Please type 'y' or 'n': ").lower().strip()
    return reply == "y"


__all__ = [
    "ANSWER_ALIASES",
    "is_exit_command",
    "is_reset_command",
    "parse_answer",
    "print_banner",
    "print_gave_up",
    "print_invalid_answer_notice",
    "print_out_of_knowledge_notice",
    "print_reset_notice",
    "print_solved",
    "print_turn",
    "prompt_for_answer",
    "prompt_play_again",
]
