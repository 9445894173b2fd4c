#!/usr/bin/env python3
"""
run.py - Flask CORS relay for HLS streams.
Routes:
  /api/proxy -> fetches ?url= with a spoofed referer, rewrites m3u8 playlists
                so every entry comes back through the relay, passes anything
                else through with CORS and caching headers
  /proxy     -> alias of /api/proxy
"""
import logging
from types import MappingProxyType

from flask import Flask, Response, jsonify, request

import settings
from errors import InternalError, RelayError
from normalize import check_method, normalize, relay_base_url
from relay import relay

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

CORS_HEADERS = MappingProxyType({
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, HEAD, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Range, Authorization",
    "Access-Control-Expose-Headers": "Content-Length, Content-Range, Accept-Ranges",
    "Access-Control-Max-Age": "86400",
})

# every method is routed to the view so rejections still get CORS and JSON
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@app.after_request
def add_cors(resp):
    for k, v in CORS_HEADERS.items():
        resp.headers[k] = v
    return resp


def error_response(err):
    return jsonify(err.to_dict()), err.status_code


@app.route("/api/proxy", methods=ROUTED_METHODS, provide_automatic_options=False)
@app.route("/proxy", methods=ROUTED_METHODS, provide_automatic_options=False)
def proxy():
    try:
        check_method(request.method)
        if request.method == "OPTIONS":
            return Response(status=200)
        base = relay_base_url(request.headers, request.scheme, request.host, request.path)
        preq = normalize(request.args, base)
        return relay(preq)
    except RelayError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Relay failed")
        return error_response(InternalError(e))


if __name__ == "__main__":
    app.run(host=settings.HOST, port=settings.PORT)
