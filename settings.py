"""
settings.py - environment driven configuration for the relay.
Read once at import; every value can be overridden per deployment.
"""
import os


def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 8080))
TIMEOUT = int(os.environ.get("PROXY_TIMEOUT", 15))
VERIFY_TLS = _flag("VERIFY_TLS", True)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Host whose hotlink protection the relay impersonates by default
DEFAULT_REFERER = os.environ.get("DEFAULT_REFERER", "https://megacloud.tv")

# Public base for rewritten playlist entries, e.g. https://relay.example/api/proxy.
# Empty means: derive it from the inbound request.
RELAY_BASE_URL = os.environ.get("RELAY_BASE_URL", "").rstrip("?")
