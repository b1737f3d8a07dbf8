import json
import time
from coffeecore.settings import settings

# Contact details and free text typed by visitors
SENSITIVE_KEYS = {"email", "contactEmail", "name", "msg", "message", "payload"}

def _redact_value(v):
    if isinstance(v, str) and len(v) > 0:
        return f"[REDACTED:{len(v)}chars]"
    if isinstance(v, dict):
        return {k: _redact_value(val) for k, val in v.items()}
    return v

def _scrub(fields: dict) -> dict:
    return {
        k: _redact_value(v) if k in SENSITIVE_KEYS else (_scrub(v) if isinstance(v, dict) else v)
        for k, v in fields.items()
    }

def log(event: str, **fields):
    """Print one JSON line. Never raises."""
    payload = {"ts": int(time.time()), "event": event}
    payload.update(_scrub(fields) if settings.ENABLE_PII_REDACTION else fields)
    try:
        print(json.dumps(payload, ensure_ascii=False, default=str))
    except Exception:
        pass
