import re
from functools import lru_cache


@lru_cache(maxsize=4096)
def _term_pattern(term):
    # word boundaries only where the term itself starts/ends with a word character
    prefix = r"\b" if re.match(r"\w", term) else ""
    suffix = r"\b" if re.search(r"\w$", term) else ""
    return re.compile(prefix + re.escape(term) + suffix)


def contains_term(text, term):
    if not text or not term:
        return False
    return _term_pattern(term.lower()).search(text.lower()) is not None


def contains_any(text, terms):
    return any(contains_term(text, term) for term in terms)


__all__ = ["contains_any", "contains_term"]
