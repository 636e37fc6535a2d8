from __future__ import annotations

import logging
import typing as t

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..core.coalescing import CoalescingCache
from ..core.session import CoralSession
from ..errors import CoralError, CredentialError, UpstreamError

_logger = logging.getLogger(__name__)

SessionGetter = t.Callable[[CoralSession], t.Awaitable[t.Any]]


def _session_token(request: Request) -> t.Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "na" or not token.strip():
        return None
    return token.strip()


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse({"error": error, "error_message": message}, status_code=status_code)


def create_app(
    sessions: CoalescingCache[str, CoralSession],
    *,
    debug: bool = False,
    lifespan: t.Optional[t.Callable[[Starlette], t.AsyncContextManager[None]]] = None,
) -> Starlette:
    """ASGI app serving cached Coral data for the token in ``Authorization: na <token>``.

    Each route reads one session field, so repeated requests inside the field's
    TTL never reach the upstream service. ``lifespan`` is handed to Starlette
    for collaborators that must be closed on shutdown.
    """

    def endpoint(read: SessionGetter, wrap: t.Optional[str] = None):
        async def handler(request: Request) -> JSONResponse:
            token = _session_token(request)
            if token is None:
                return _error(401, "invalid_request", "Missing Nintendo Account session token")

            try:
                session = await sessions.get(token)
                data = await read(session)
            except CredentialError as exc:
                return _error(401, "invalid_token", str(exc))
            except UpstreamError as exc:
                _logger.warning("Upstream error for %s: %s", request.url.path, exc)
                return _error(502, "upstream_error", str(exc))
            except CoralError as exc:
                _logger.warning("Error serving %s: %s", request.url.path, exc)
                return _error(502, "unknown_error", str(exc))

            return JSONResponse({wrap: data} if wrap else data)

        return handler

    async def read_user(session: CoralSession) -> t.Dict[str, t.Any]:
        return {"id": session.credentials.user_id, "name": session.credentials.user_name}

    routes = [
        Route("/api/znc/user", endpoint(read_user), methods=["GET"]),
        Route("/api/znc/announcements", endpoint(lambda s: s.get_announcements()), methods=["GET"]),
        Route("/api/znc/friends", endpoint(lambda s: s.get_friends(), wrap="friends"), methods=["GET"]),
        Route("/api/znc/webservices", endpoint(lambda s: s.get_web_services()), methods=["GET"]),
        Route("/api/znc/activeevent", endpoint(lambda s: s.get_active_event()), methods=["GET"]),
    ]
    return Starlette(debug=debug, routes=routes, lifespan=lifespan)
