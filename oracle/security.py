import re


_REDACTION_PATTERNS = [
    re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]{6,}"),
    re.compile(r"(?i)(api[_-]?key|token|authorization|x-api-key)\s*[:=]\s*['\"]?([A-Za-z0-9._\-]{6,})"),
    re.compile(r"(?i)(api_key=|access_token=|key=)([^&\s]+)"),
    re.compile(r"\b(gsk_|sk-or-v1-|sk-)[A-Za-z0-9]{8,}"),
]


def redact_sensitive(text):
    if not text:
        return text
    redacted = str(text)
    for pattern in _REDACTION_PATTERNS:
        redacted = pattern.sub(r"\1***", redacted)
    return redacted


def mask_headers(headers):
    """Copy of request headers safe to print in debug output."""
    masked = {}
    for name, value in (headers or {}).items():
        if name.lower() in {"authorization", "x-api-key"}:
            masked[name] = "***"
        else:
            masked[name] = redact_sensitive(value)
    return masked


__all__ = ["mask_headers", "redact_sensitive"]
