ANSWER_LABELS = {
    "yes": "Yes",
    "no": "No",
    "probably": "Probably",
    "probably_not": "Probably not",
    "dont_know": "Don't know",
}

DETECTIVE_SYSTEM_PROMPT = """You are the detective in a twenty-questions game about a famous person or character.
Ask ONE short yes/no question about a trait or category that splits the remaining candidates roughly in half.

Rules:
1. Never name a specific character in a question; naming someone is a guess, and only the game makes guesses.
2. Never repeat or rephrase a question that was already asked.
3. Never contradict confirmed traits (no powers or magic questions for real people, no real-world awards for fictional characters).
4. Avoid narrow biographical detail such as careers, exact dates or specific physical measurements.
5. Keep questions under 20 words.

Return ONLY valid JSON:
{"question": "your yes/no question", "top_guesses": [{"name": "Candidate Name", "confidence": 0.4}]}"""

TRAIT_EXTRACTOR_PROMPT = """Extract one structured trait from a yes/no question and its answer.

Trait keys: fictional (true/false), gender (male/female), species (human, alien, robot, animal, god),
category (actors, athletes, musicians, politicians, historical, anime, superheroes, tv-characters, video-games),
origin_medium (anime, manga, comic, video game, movie, tv, book), has_powers (true/false),
alignment (hero/villain), age_group (child/teenager/adult), nationality (american, british, japanese, ...),
is_alive (true/false), has_oscar (true/false), publisher (marvel/dc), genre (comedy, drama, action, ...).

Rules:
- Extract only what the question itself asks about.
- For a "no" answer on a binary key, return the opposite value ("Is your character real?" + no -> fictional=true).
- If the question does not map to a key, return null.

Return ONLY JSON: {"key": "trait_key", "value": "trait_value", "confidence": 0.9}"""

BEYOND_KNOWLEDGE_PROMPT = """The character being guessed is not in the game's database.
Using the confirmed traits and the question history, name up to 3 famous people or characters that fit ALL of them.
Do not name anyone listed as already rejected.

Return ONLY JSON: {"top_guesses": [{"name": "Full Name", "confidence": 0.5}]}"""


def format_traits(traits):
    if not traits:
        return "(none yet)"
    return "\n".join(f"- {trait.key} = {trait.value} (confidence {trait.confidence:.2f})" for trait in traits)


def format_turns(turns):
    if not turns:
        return "(no questions asked yet)"
    return "\n".join(
        f"{index}. {turn.question} -> {ANSWER_LABELS.get(turn.answer, turn.answer)}"
        for index, turn in enumerate(turns, start=1)
    )


def build_question_messages(session, candidate_names, total_candidates):
    rejected = ", ".join(rejected.name for rejected in session.rejected_guesses) or "(none)"
    sample = ", ".join(candidate_names) if candidate_names else "(no known candidates)"
    user_prompt = (
        f"Confirmed traits:\n{format_traits(session.live_traits())}\n\n"
        f"Questions so far:\n{format_turns(session.turns)}\n\n"
        f"Rejected guesses: {rejected}\n\n"
        f"Remaining candidates ({total_candidates}): {sample}\n\n"
        "What is your next question?"
    )
    return [
        {"role": "system", "content": DETECTIVE_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def build_trait_messages(question, answer, existing_traits=None):
    known = ""
    if existing_traits:
        known = f"Already known:\n{format_traits(existing_traits)}\n\n"
    user_prompt = (
        f"{known}Question: \"{question}\"\n"
        f"Answer: {ANSWER_LABELS.get(answer, answer)}\n\n"
        "Extract the trait."
    )
    return [
        {"role": "system", "content": TRAIT_EXTRACTOR_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def build_beyond_knowledge_messages(session, nearest_names=None):
    rejected = ", ".join(rejected.name for rejected in session.rejected_guesses) or "(none)"
    nearest = ""
    if nearest_names:
        nearest = f"\n\nClosest known characters (none fits every trait): {', '.join(nearest_names)}"
    user_prompt = (
        f"Confirmed traits:\n{format_traits(session.live_traits())}\n\n"
        f"Questions so far:\n{format_turns(session.turns)}\n\n"
        f"Already rejected: {rejected}"
        f"{nearest}"
    )
    return [
        {"role": "system", "content": BEYOND_KNOWLEDGE_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


__all__ = [
    "ANSWER_LABELS",
    "build_beyond_knowledge_messages",
    "build_question_messages",
    "build_trait_messages",
    "format_traits",
    "format_turns",
]
