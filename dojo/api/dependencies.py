"""Dependency injection for API routes."""

from typing import Annotated

from fastapi import Depends, Request

from dojo.core.exceptions import ConfigurationError
from dojo.core.logging import bind_context
from dojo.services.session_controller import SessionController


async def get_session_controller(request: Request) -> SessionController:
    """FastAPI dependency for the process-wide session controller.

    The controller is built once in the application lifespan and stored on
    app.state; there is exactly one session per process. The logged-in
    trainee is bound to the request's log context.
    """
    controller = getattr(request.app.state, "session_controller", None)
    if controller is None:
        raise ConfigurationError("Session controller not initialized")
    if controller.identifier is not None:
        bind_context(trainee=controller.identifier)
    return controller


# Type aliases for dependency injection
ControllerDep = Annotated[SessionController, Depends(get_session_controller)]
