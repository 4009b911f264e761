import logging
import logging.config
import re
import threading

import httpx

SECRET_PATTERNS = [
    re.compile(r"(https?://hooks\.slack\.com/(?:services|workflows|triggers)/)[^\s'\"]+"),
    re.compile(r"(?i)\b((?:token|secret|api_key|password)\s*[=:]\s*)([^,\s]+)"),
]

# Webhook URLs in use; any URL carries its credential, not only Slack's
_registered_secrets: set[str] = set()
_registered_lock = threading.Lock()


def register_secret(value: str) -> None:
    """Redact *value* verbatim from every filtered log record."""
    if not value:
        return
    with _registered_lock:
        _registered_secrets.add(value)


def install_secret_filter(logger_name: str) -> None:
    """Attach a ``WebhookSecretFilter`` to *logger_name* unless it has one.

    Logger-level filters run before propagation, so this holds whatever the
    host application does with handlers.
    """
    target = logging.getLogger(logger_name)
    if not any(isinstance(f, WebhookSecretFilter) for f in target.filters):
        target.addFilter(WebhookSecretFilter())


class WebhookSecretFilter(logging.Filter):
    def _sanitize(self, value: object) -> object:
        # httpx passes request URLs as httpx.URL objects
        if isinstance(value, httpx.URL):
            value = str(value)
        if not isinstance(value, str):
            return value

        redacted = value
        with _registered_lock:
            literals = sorted(_registered_secrets, key=len, reverse=True)
        for literal in literals:
            redacted = redacted.replace(literal, "[REDACTED]")
        for pattern in SECRET_PATTERNS:
            redacted = pattern.sub(r"\1[REDACTED]", redacted)
        return redacted

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._sanitize(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(self._sanitize(item) for item in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._sanitize(value) for key, value in record.args.items()}

        return True


def setup_logging() -> None:
    from slacksender.core.settings import get_settings

    settings = get_settings()
    register_secret(settings.webhook_url)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "webhook_secret": {
                    "()": "slacksender.core.logging.WebhookSecretFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["webhook_secret"],
                }
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                },
                "httpx": {
                    "handlers": ["console"],
                    "level": "WARNING",
                    "filters": ["webhook_secret"],
                    "propagate": False,
                },
            },
        }
    )
