"""
playlist.py - HLS playlist rewriting.

Every URI line of an m3u8 playlist is replaced with a relay URL carrying the
absolute target and the referer, so segments and nested playlists are fetched
through the relay as well. Tag lines (``#EXT...``), comments and blank lines
are left exactly as they were.
"""
import urllib.parse
from urllib.parse import urljoin

# characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value):
    return urllib.parse.quote(value, safe=_URI_COMPONENT_SAFE)


def relay_url(relay_base, target, referer):
    return f"{relay_base}?url={encode_component(target)}&referer={encode_component(referer)}"


def is_uri_line(line):
    return bool(line) and not line.startswith("#") and not line[0].isspace()


def resolve(uri, base):
    """Absolute form of ``uri`` relative to ``base``, or None if it cannot be resolved."""
    try:
        return urljoin(base, uri)
    except ValueError:
        return None


def rewrite_line(line, base, relay_base, referer):
    if not is_uri_line(line):
        return line
    token, rest = line, ""
    for i, ch in enumerate(line):
        if ch.isspace():
            token, rest = line[:i], line[i:]
            break
    absu = resolve(token, base)
    if absu is None:
        return line
    return relay_url(relay_base, absu, referer) + rest


def rewrite_playlist(text, base, relay_base, referer):
    # split on "\n" only so CRLF endings and the final newline survive the join
    out_lines = [rewrite_line(ln, base, relay_base, referer) for ln in text.split("\n")]
    return "\n".join(out_lines)
