from oracle import config as oracle_config
from oracle.security import redact_sensitive


def debug_log(channel, message):
    """Redacted debug line, printed only when DT_DEBUG=1."""
    if oracle_config.ORACLE_DEBUG:
        print(f"| {channel} (Debug): {redact_sensitive(message)}")


__all__ = ["debug_log"]
