"""
normalize.py - turns an inbound relay request into a ProxyRequest.
All validation happens here, before any upstream call is made.
"""
import re
import urllib.parse
from collections import namedtuple

import settings
from errors import InvalidEncoding, InvalidUrlFormat, MethodNotAllowed, MissingParameter

ProxyRequest = namedtuple("ProxyRequest", ["target_url", "referer", "relay_base"])

ALLOWED_METHODS = ("GET", "OPTIONS")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def check_method(method):
    if method.upper() not in ALLOWED_METHODS:
        raise MethodNotAllowed()


def decode_target(raw):
    """Percent-decode the ``url`` parameter, rejecting malformed escapes."""
    if _BAD_ESCAPE.search(raw):
        raise InvalidEncoding()
    try:
        return urllib.parse.unquote(raw, errors="strict")
    except UnicodeDecodeError:
        raise InvalidEncoding()


def relay_base_url(headers, scheme, host, path):
    if settings.RELAY_BASE_URL:
        return settings.RELAY_BASE_URL
    proto = headers.get("X-Forwarded-Proto") or scheme
    # a proxy chain may send "https,http"
    proto = proto.split(",")[0].strip()
    return f"{proto}://{host}{path}"


def normalize(args, relay_base):
    url = args.get("url")
    if not url:
        raise MissingParameter()
    target = decode_target(url)
    if not (target.startswith("http://") or target.startswith("https://")):
        raise InvalidUrlFormat()
    referer = args.get("referer") or settings.DEFAULT_REFERER
    return ProxyRequest(target, referer, relay_base)
