import json
from unittest.mock import patch
from coffeecore.observability.logging import log
from coffeecore.settings import settings

def _emit(capsys, **fields):
    log("unit_event", **fields)
    return json.loads(capsys.readouterr().out.strip())

def test_pii_is_redacted(capsys):
    with patch.object(settings, "ENABLE_PII_REDACTION", True):
        out = _emit(capsys, email="a@b.com", product="pellet",
                    payload={"email": "a@b.com", "msg": "ciao"})
    assert out["event"] == "unit_event"
    assert out["email"] == "[REDACTED:7chars]"
    assert out["product"] == "pellet"
    assert out["payload"]["msg"] == "[REDACTED:4chars]"

def test_nested_non_sensitive_dict_keeps_safe_keys(capsys):
    with patch.object(settings, "ENABLE_PII_REDACTION", True):
        out = _emit(capsys, meta={"name": "Ada", "statusCode": 200})
    assert out["meta"] == {"name": "[REDACTED:3chars]", "statusCode": 200}

def test_redaction_disabled(capsys):
    with patch.object(settings, "ENABLE_PII_REDACTION", False):
        out = _emit(capsys, email="a@b.com")
    assert out["email"] == "a@b.com"

def test_deeply_nested_pii_is_redacted(capsys):
    with patch.object(settings, "ENABLE_PII_REDACTION", True):
        out = _emit(capsys, meta={"inner": {"email": "x@y.it", "attempt": 2}})
    assert out["meta"] == {"inner": {"email": "[REDACTED:6chars]", "attempt": 2}}
