import logging
import re

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_REDACTIONS = [
    (re.compile(r"(password\s*[:=]\s*['\"]?)([^'\"\s,}]+)", re.IGNORECASE), r"\1***REDACTED***"),
    (re.compile(r"(bearer\s+)([a-zA-Z0-9_\-\.]{10,})", re.IGNORECASE), r"\1***REDACTED***"),
    (re.compile(r"(upload_preset\s*[:=]\s*['\"]?)([^'\"\s,}]+)", re.IGNORECASE), r"\1***REDACTED***"),
]


def redact(message: str) -> str:
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        rendered = record.getMessage()
        cleaned = redact(rendered)
        if cleaned != rendered:
            record.msg = cleaned
            record.args = None
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not any(isinstance(f, RedactingFilter) for h in root.handlers for f in h.filters):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(RedactingFilter())
        root.addHandler(handler)
    root.setLevel(level.upper())
