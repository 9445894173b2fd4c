import io

import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers


def make_upstream(body=b"", status=200, headers=None, reason="OK", url="https://host/x"):
    """A real requests.Response backed by an in-memory body, encoded the way HTTPAdapter sets it."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    r = requests.Response()
    r.status_code = status
    r.reason = reason
    r.url = url
    r.headers = CaseInsensitiveDict(headers or {})
    r.raw = io.BytesIO(body)
    r.encoding = get_encoding_from_headers(r.headers)
    return r
