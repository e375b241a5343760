import os
import re
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler

# ---------- File helpers ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def slugify(text: str, max_chars: int = 60) -> str:
    """File-name safe slug from the first ``max_chars`` characters of ``text``."""
    head = (text or "")[:max_chars].rstrip()
    head = re.sub(r"[^\w\s-]|_", "", head)
    head = re.sub(r"\s+", "-", head.strip())
    return head.lower()

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = os.getenv("LOG_DIR")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if json_mode:
        fmt = JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(os.path.join(log_dir, "meeting-promo.log"), when="D", backupCount=7, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)

def run_logger(verbose: bool = False) -> logging.Logger:
    """Logger handed through one run; verbose mode turns on DEBUG state dumps."""
    logger = get_logger("promo.run")
    logger.setLevel(logging.DEBUG if verbose else logging.NOTSET)
    return logger

# ---------- Secret redaction ----------

SECRET_ENV_KEYS = ["OPENAI_API_KEY"]

def redact_secrets(s: str) -> str:
    """Redact API keys from strings for safe logging."""
    if not s:
        return s

    redacted = s
    for k in SECRET_ENV_KEYS:
        v = os.getenv(k)
        if v and len(v) > 3:
            redacted = redacted.replace(v, "***")

    redacted = re.sub(r"sk-[A-Za-z0-9_-]{16,}", "sk-***", redacted)
    return redacted
