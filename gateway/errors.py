"""GraphQL error types raised by resolvers."""
from graphql import GraphQLError

from .clients import DownstreamError

SERVICE_UNAVAILABLE = "Service unavailable"


class GatewayError(GraphQLError):
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message, extensions={"code": self.code})


class Unauthenticated(GatewayError):
    code = "UNAUTHENTICATED"
    default_message = "Not authenticated"


class Unauthorized(GatewayError):
    code = "FORBIDDEN"
    default_message = "Not authorized"


class NotFound(GatewayError):
    code = "NOT_FOUND"
    default_message = "Not found"


class UpstreamUnavailable(GatewayError):
    code = "SERVICE_UNAVAILABLE"
    default_message = SERVICE_UNAVAILABLE


class UnexpectedShapeError(GatewayError):
    code = "UNEXPECTED_RESPONSE"
    default_message = "Unexpected response from downstream service"


class DownstreamFailure(GatewayError):
    """Downstream rejected the request (validation, conflict, ...)."""

    code = "BAD_REQUEST"
    default_message = "Request failed"


def downstream_message(err: Exception, default: str = SERVICE_UNAVAILABLE) -> str:
    """Best message to show the caller for a failed downstream call."""
    if isinstance(err, DownstreamError):
        if err.is_network_failure:
            return default
        return err.message or default
    return str(err) or default


def relay(err: DownstreamError, default: str = SERVICE_UNAVAILABLE) -> GatewayError:
    """Map a downstream failure onto the matching GraphQL error."""
    message = downstream_message(err, default)
    if err.status_code in (401, 403):
        return Unauthorized(message)
    if err.status_code == 404:
        return NotFound(message)
    if err.is_network_failure or err.status_code >= 500:
        return UpstreamUnavailable(message)
    return DownstreamFailure(message)
