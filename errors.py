"""Relay error types. Each one knows the status code and JSON body it maps to."""


class RelayError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.message}


class MethodNotAllowed(RelayError):
    status_code = 405
    message = "Method not allowed"


class MissingParameter(RelayError):
    status_code = 400
    message = "Missing url parameter"


class InvalidEncoding(RelayError):
    status_code = 400
    message = "Invalid URL encoding"


class InvalidUrlFormat(RelayError):
    status_code = 400
    message = "Invalid URL format"


class UpstreamFailure(RelayError):
    """Upstream answered with a non-2xx status; the status is mirrored."""

    status_code = 502
    message = "Upstream request failed"

    def __init__(self, status_code, status_text=""):
        super().__init__(status_code=status_code)
        self.status_text = status_text

    def to_dict(self):
        return {
            "error": self.message,
            "status": self.status_code,
            "statusText": self.status_text,
        }


class InternalError(RelayError):
    """Anything unexpected: network failures, body read or rewrite faults."""

    def __init__(self, detail):
        super().__init__()
        self.detail = str(detail)

    def to_dict(self):
        return {"error": self.message, "message": self.detail}
