# =============================================================================
# core/errors.py  -  Failure Taxonomy
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Names every way a tool invocation can fail.  Handlers in core/ raise
#   these; the tools/ layer turns them into text (for normal upstream
#   trouble) or into JSON-RPC errors (for protocol trouble).
#
#   NotFound          the identifier or title resolved to nothing
#   UpstreamTimeout   an upstream call exceeded its time bound
#   UpstreamFailure   network error, bad HTTP status, undecodable body,
#                     or an error reported inside the upstream payload
#   InvalidRequest    a required argument is missing or malformed
#   InternalError     unexpected fault while composing a result
#
# None of these are retried anywhere.
# =============================================================================


class CultureError(Exception):
    """Base class for every failure raised by the culture core."""

    kind = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFound(CultureError):
    kind = "not_found"


class UpstreamTimeout(CultureError):
    kind = "upstream_timeout"


class UpstreamFailure(CultureError):
    """A non-timeout upstream failure.

    ``reason`` is one of ``network``, ``decode`` or ``upstream`` (the
    provider answered, but reported an error in its own payload).
    """

    kind = "upstream_failure"

    def __init__(self, message: str, reason: str = "network"):
        super().__init__(message)
        self.reason = reason


class InvalidRequest(CultureError):
    kind = "invalid_request"


class InternalError(CultureError):
    kind = "internal"
