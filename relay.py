"""
relay.py - upstream fetch and response projection.

One GET per relayed request, spoofing a browser visiting the referer site.
The upstream answer is classified (playlist / segment / other), which decides
both the Cache-Control policy and whether the body goes through the playlist
rewriter before being sent back.
"""
import enum
import logging

import requests
from flask import Response

import settings
from errors import InternalError, UpstreamFailure
from playlist import rewrite_playlist

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

CACHE_SEGMENT = "public, max-age=31536000, immutable"
CACHE_PLAYLIST = "no-cache, no-store, must-revalidate"
CACHE_OTHER = "public, max-age=3600"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class Kind(enum.Enum):
    PLAYLIST = "playlist"
    SEGMENT = "segment"
    OTHER = "other"


def is_playlist(url, content_type):
    ct = content_type.lower()
    return "mpegurl" in ct or "m3u8" in ct or url.endswith(".m3u8")


def is_segment(url, content_type):
    return url.endswith(".ts") or "mp2t" in content_type.lower()


def classify(url, content_type):
    """Content kind used for body handling. Playlist wins over segment."""
    if is_playlist(url, content_type):
        return Kind.PLAYLIST
    if is_segment(url, content_type):
        return Kind.SEGMENT
    return Kind.OTHER


def cache_control(url, content_type):
    # segments are checked first: they never change once published
    if is_segment(url, content_type):
        return CACHE_SEGMENT
    if is_playlist(url, content_type):
        return CACHE_PLAYLIST
    return CACHE_OTHER


def upstream_headers(referer):
    return {
        "User-Agent": USER_AGENT,
        "Accept": "*/*",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": referer,
        "Origin": referer,
        "Connection": "keep-alive",
    }


def fetch(preq):
    try:
        return requests.get(
            preq.target_url,
            headers=upstream_headers(preq.referer),
            timeout=settings.TIMEOUT,
            allow_redirects=True,
            verify=settings.VERIFY_TLS,
        )
    except requests.RequestException as e:
        logger.error(f"Upstream fetch failed for {preq.target_url}: {e}")
        raise InternalError(e)


def _body_was_decoded(r):
    encoding = (r.headers.get("Content-Encoding") or "identity").strip().lower()
    return encoding != "identity"


def relay(preq):
    """Fetch ``preq.target_url`` and build the outbound response."""
    logger.info(f"Fetching: {preq.target_url}")
    logger.info(f"Referer: {preq.referer}")

    r = fetch(preq)
    try:
        logger.info(f"Upstream status: {r.status_code}")
        if not 200 <= r.status_code < 300:
            logger.error(f"Upstream error {r.status_code}: {r.text[:200]}")
            raise UpstreamFailure(r.status_code, r.reason or "")

        upstream_type = r.headers.get("Content-Type") or ""
        kind = classify(preq.target_url, upstream_type)
        headers_out = {
            "Content-Type": upstream_type or DEFAULT_CONTENT_TYPE,
            "Cache-Control": cache_control(preq.target_url, upstream_type),
        }
        for name in ("Content-Range", "Accept-Ranges"):
            value = r.headers.get(name)
            if value:
                headers_out[name] = value

        if kind is Kind.PLAYLIST:
            # m3u8 is UTF-8; requests guesses ISO-8859-1 for a charset-less text/plain
            r.encoding = "utf-8"
            out = rewrite_playlist(r.text, preq.target_url, preq.relay_base, preq.referer)
            return Response(out, status=200, headers=headers_out)

        body = r.content
        length = r.headers.get("Content-Length")
        if length and not _body_was_decoded(r):
            headers_out["Content-Length"] = length
        return Response(body, status=200, headers=headers_out)
    finally:
        r.close()
