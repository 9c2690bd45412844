import os

# --- ORACLE BACKENDS ---
ORACLE_BACKEND = os.getenv("DT_ORACLE_BACKEND", "lemonade").strip().lower()

# Lemonade Server (local, OpenAI-compatible; default for desktop play)
LEMONADE_URL = os.getenv("DT_LEMONADE_URL", "http://localhost:8000/v1/chat/completions")
LEMONADE_MODEL = os.getenv("DT_LEMONADE_MODEL", "Qwen3-4B-Instruct-2507-GGUF")

OLLAMA_URL = os.getenv("DT_OLLAMA_URL", "http://127.0.0.1:11434/api/chat")
OLLAMA_MODEL = os.getenv("DT_OLLAMA_MODEL", "llama3.2:1b")

# Groq (hosted, generous free tier)
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "").strip()
GROQ_MODEL = os.getenv("DT_GROQ_MODEL", "llama-3.1-8b-instant")
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
GROQ_MIN_INTERVAL_SEC = float(os.getenv("DT_GROQ_MIN_INTERVAL", "0.1"))

# OpenRouter (hosted, free models available)
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "").strip()
OPENROUTER_MODEL = os.getenv("DT_OPENROUTER_MODEL", "meta-llama/llama-3.2-3b-instruct:free")
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_MIN_INTERVAL_SEC = float(os.getenv("DT_OPENROUTER_MIN_INTERVAL", "0.2"))

ORACLE_DEBUG = os.getenv("DT_DEBUG", "0") == "1"
ORACLE_TIMEOUT_SEC = int(os.getenv("DT_ORACLE_TIMEOUT", "30"))
ORACLE_MAX_RETRIES = int(os.getenv("DT_ORACLE_RETRIES", "2"))
ORACLE_RATE_LIMIT_COOLDOWN_SEC = float(os.getenv("DT_RATE_LIMIT_COOLDOWN", "2"))
ORACLE_TEMPERATURE = float(os.getenv("DT_ORACLE_TEMPERATURE", "0.3"))
ORACLE_MAX_TOKENS = int(os.getenv("DT_ORACLE_MAX_TOKENS", "300"))
