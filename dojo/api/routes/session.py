"""
Session API routes.

The single process-wide training session: lifecycle, commands and the
state snapshot the presentation layer renders.
"""

from fastapi import APIRouter
import structlog

from dojo.api.dependencies import ControllerDep
from dojo.api.schemas import CommandRequest, LoginRequest, SessionStateResponse

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionStateResponse)
async def get_session(controller: ControllerDep):
    """Current mode, lives, score, busy flag and full history."""
    return SessionStateResponse.from_controller(controller)


@router.post("/login", response_model=SessionStateResponse)
async def login(request: LoginRequest, controller: ControllerDep):
    """Log in with a non-empty identifier and show the welcome menu."""
    controller.login(request.identifier)
    return SessionStateResponse.from_controller(controller)


@router.post("/commands", response_model=SessionStateResponse)
async def send_command(request: CommandRequest, controller: ControllerDep):
    """Send free text or a reserved token (menu, hint, 1/2/3).

    Returns once the command, including any teacher call, has completed.
    """
    await controller.handle_command(request.text)
    return SessionStateResponse.from_controller(controller)


@router.post("/exam", response_model=SessionStateResponse)
async def request_exam(controller: ControllerDep):
    """Ask for a graded exam question (training mode only)."""
    await controller.request_exam()
    return SessionStateResponse.from_controller(controller)


@router.post("/restart", response_model=SessionStateResponse)
async def restart(controller: ControllerDep):
    """Start a fresh episode with full lives and zero score."""
    controller.restart()
    return SessionStateResponse.from_controller(controller)


@router.post("/logout", response_model=SessionStateResponse)
async def logout(controller: ControllerDep):
    """Release the session so another trainee can log in."""
    controller.logout()
    return SessionStateResponse.from_controller(controller)
