import os

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# --- KNOWLEDGE ---
KNOWLEDGE_PATH = os.getenv("DT_KNOWLEDGE_PATH", os.path.join(ROOT_DIR, "data", "subjects.json"))
REFERENCE_TRAITS_PATH = os.getenv(
    "DT_REFERENCE_TRAITS_PATH", os.path.join(ROOT_DIR, "data", "reference_traits.json")
)

# --- QUESTION SELECTION ---
ENTROPY_MIN_POOL = int(os.getenv("DT_ENTROPY_MIN_POOL", "10"))
ENTROPY_SAMPLE_LIMIT = int(os.getenv("DT_ENTROPY_SAMPLE_LIMIT", "100"))
ENTROPY_SAMPLE_SIZE = int(os.getenv("DT_ENTROPY_SAMPLE_SIZE", "60"))
MAX_QUESTION_WORDS = int(os.getenv("DT_MAX_QUESTION_WORDS", "20"))

DIRECT_GUESS_POOL = int(os.getenv("DT_DIRECT_GUESS_POOL", "2"))
DIRECT_GUESS_SMALL_POOL = int(os.getenv("DT_DIRECT_GUESS_SMALL_POOL", "3"))
DIRECT_GUESS_SMALL_POOL_TURN = int(os.getenv("DT_DIRECT_GUESS_SMALL_POOL_TURN", "12"))
DIRECT_GUESS_CONFIDENT_POOL = int(os.getenv("DT_DIRECT_GUESS_CONFIDENT_POOL", "5"))
DIRECT_GUESS_CONFIDENCE = float(os.getenv("DT_DIRECT_GUESS_CONFIDENCE", "0.85"))
DIRECT_GUESS_LATE_TURN = int(os.getenv("DT_DIRECT_GUESS_LATE_TURN", "18"))
DIRECT_GUESS_MIN_TRAITS = int(os.getenv("DT_DIRECT_GUESS_MIN_TRAITS", "7"))
DIRECT_GUESS_MIN_TRAITS_WITH_CATEGORY = int(os.getenv("DT_DIRECT_GUESS_MIN_TRAITS_WITH_CATEGORY", "6"))
TURNS_BETWEEN_GUESSES = int(os.getenv("DT_TURNS_BETWEEN_GUESSES", "5"))

# single threshold for leaving the knowledge base (oracle-only guessing)
OUT_OF_KB_GUESS_TURN = int(os.getenv("DT_OUT_OF_KB_GUESS_TURN", "15"))
OBSCURE_AWARD_TURN = int(os.getenv("DT_OBSCURE_AWARD_TURN", "15"))
UNIQUE_ROLE_CONFIDENCE = float(os.getenv("DT_UNIQUE_ROLE_CONFIDENCE", "0.95"))

# --- GAME ---
MAX_TURNS = int(os.getenv("DT_MAX_TURNS", "100"))
CONFIDENCE_THRESHOLD = float(os.getenv("DT_CONFIDENCE_THRESHOLD", "0.95"))

# --- TRAIT EXTRACTION ---
DEFAULT_TRAIT_CONFIDENCE = float(os.getenv("DT_DEFAULT_TRAIT_CONFIDENCE", "0.7"))
DEDUCED_TRAIT_CONFIDENCE = float(os.getenv("DT_DEDUCED_TRAIT_CONFIDENCE", "0.9"))
RULE_TRAIT_CONFIDENCE = float(os.getenv("DT_RULE_TRAIT_CONFIDENCE", "0.9"))

# --- GUESS LOOKUP ---
LOOKUP_ENABLED = os.getenv("DT_LOOKUP_ENABLED", "1") == "1"
LOOKUP_URL_TEMPLATE = os.getenv(
    "DT_LOOKUP_URL", "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
)
LOOKUP_TIMEOUT_SEC = float(os.getenv("DT_LOOKUP_TIMEOUT", "5"))
LOOKUP_MAX_WORKERS = int(os.getenv("DT_LOOKUP_WORKERS", "4"))
LOOKUP_USER_AGENT = os.getenv("DT_LOOKUP_USER_AGENT", "detective-engine/0.1 (twenty questions game)")
