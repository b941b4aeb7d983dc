"""Request middleware that feeds actor and origin into the timeline context.

Upstream middleware (authentication) is expected to put the current user
on ``request.state``. The attribute names are configurable through
``TIMELINE_ACTOR_ATTRIBUTE`` and ``TIMELINE_ORIGIN_ATTRIBUTE``.
"""

from typing import TYPE_CHECKING, Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sqla_timeline.config import settings
from sqla_timeline.context.store import (
    clear_metadata,
    clear_request_context,
    set_request_context,
)


if TYPE_CHECKING:
    from starlette.types import ASGIApp


class TimelineContextMiddleware(BaseHTTPMiddleware):
    """Middleware that scopes the timeline context to each request.

    Attributes:
        actor_attribute: request.state attribute holding the actor
        origin_attribute: request.state attribute holding the client address
        exclude_paths: Paths that skip context handling
    """

    def __init__(
        self,
        app: "ASGIApp",
        actor_attribute: str | None = None,
        origin_attribute: str | None = None,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.actor_attribute = actor_attribute or settings.actor_attribute
        self.origin_attribute = origin_attribute or settings.origin_attribute
        self.exclude_paths = (
            exclude_paths
            if exclude_paths is not None
            else settings.middleware_exclude_paths
        )

    def _resolve_actor(self, request: Request) -> Any:
        return getattr(request.state, self.actor_attribute, None)

    def _resolve_origin(self, request: Request) -> str | None:
        origin = getattr(request.state, self.origin_attribute, None)
        if origin is None and request.client:
            origin = request.client.host
        return origin

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Set the timeline context, run the handler, then clear it.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler
        """
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        set_request_context(
            actor=self._resolve_actor(request),
            origin=self._resolve_origin(request),
        )
        try:
            return await call_next(request)
        finally:
            clear_request_context()
            clear_metadata()
