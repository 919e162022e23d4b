from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..commands import CommandAPI, get_command_api
from ..schemas import TickOut, TimerConfigure, TimerInit, TimerStateOut

router = APIRouter(
    prefix="/api/v1/timer",
    tags=["timer"],
)


# PUBLIC_INTERFACE
@router.get("/", response_model=TimerStateOut, summary="Get Timer State")
def get_timer_state(api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Return the current timer session."""
    return api.get_timer_state()


# PUBLIC_INTERFACE
@router.post(
    "/init",
    response_model=TimerStateOut,
    summary="Init Timer",
    description="Replace the session with a paused work phase of the given lengths (minutes).",
    responses={422: {"description": "Non-positive duration"}},
)
def init_timer(payload: TimerInit, api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Start a fresh, paused timer session."""
    return api.init_timer(payload.work_min, payload.break_min)


# PUBLIC_INTERFACE
@router.patch(
    "/",
    response_model=TimerStateOut,
    summary="Configure Timer",
    description=(
        "Change phase lengths without starting over. Changing the current phase's "
        "length restarts its countdown from the new length."
    ),
    responses={422: {"description": "Non-positive duration"}},
)
def configure_timer(payload: TimerConfigure, api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Change the timer phase lengths."""
    return api.configure_timer(payload.work_min, payload.break_min)


# PUBLIC_INTERFACE
@router.post("/pause", status_code=status.HTTP_204_NO_CONTENT, summary="Pause Timer")
def pause_timer(api: CommandAPI = Depends(get_command_api)) -> None:
    """Pause the countdown."""
    api.pause_timer()
    return None


# PUBLIC_INTERFACE
@router.post(
    "/resume",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Resume Timer",
    responses={409: {"description": "Current phase has no time left"}},
)
def resume_timer(api: CommandAPI = Depends(get_command_api)) -> None:
    """Resume the countdown."""
    api.resume_timer()
    return None


# PUBLIC_INTERFACE
@router.post(
    "/tick",
    response_model=TickOut,
    summary="Tick Timer",
    description="Count down one second. Call once per elapsed second; paused or expired sessions do not change.",
)
def tick_timer(api: CommandAPI = Depends(get_command_api)) -> TickOut:
    """Count down one second."""
    return TickOut(remaining=api.tick_timer())


# PUBLIC_INTERFACE
@router.post(
    "/break",
    response_model=TimerStateOut,
    summary="Start Break",
    responses={409: {"description": "Already on a break"}},
)
def start_break(api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Switch to the break phase."""
    return api.start_break()


# PUBLIC_INTERFACE
@router.post(
    "/work",
    response_model=TimerStateOut,
    summary="Start Work",
    responses={409: {"description": "Already in a work phase"}},
)
def start_work(api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Switch to the work phase."""
    return api.start_work()


# PUBLIC_INTERFACE
@router.post(
    "/reset",
    response_model=TimerStateOut,
    summary="Reset Timer",
    description="Return to a paused, full work phase regardless of the current phase.",
)
def reset_timer(api: CommandAPI = Depends(get_command_api)) -> TimerStateOut:
    """Reset to a paused work phase."""
    return api.reset_timer()
