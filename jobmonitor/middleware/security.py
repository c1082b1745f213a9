"""Authentication + authorization stage run before routing."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from jobmonitor.api.errors import auth_error_response
from jobmonitor.core.errors import AuthError, InsufficientRole
from jobmonitor.core.policy import AuthorizationPolicy, Decision
from jobmonitor.core.request_auth import RequestAuthenticator

logger = logging.getLogger(__name__)


class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Authenticates the bearer token of every non-public request and applies the
    authorization policy.

    The principal (or None) is stored on request.state.principal for handlers.
    Anonymous access to a protected path → 401 JSON; wrong role → 403 JSON.
    """

    def __init__(
        self,
        app: ASGIApp,
        authenticator: RequestAuthenticator,
        policy: AuthorizationPolicy,
    ) -> None:
        super().__init__(app)
        self.authenticator = authenticator
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        request.state.principal = None

        if self.policy.is_public(path):
            return await call_next(request)

        result = self.authenticator.authenticate(request.headers.get("Authorization"))
        request.state.principal = result.principal

        decision = self.policy.decide(path, result.principal)
        if decision is Decision.UNAUTHENTICATED:
            error = result.error or AuthError()
            logger.debug("401 %s %s: %s", request.method, path, error.message)
            return auth_error_response(error, path)
        if decision is Decision.FORBIDDEN:
            logger.info(
                "403 %s %s: user_id=%s lacks the required role",
                request.method,
                path,
                result.principal.id if result.principal else None,
            )
            return auth_error_response(InsufficientRole(), path)

        return await call_next(request)
