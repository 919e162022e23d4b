"""
tomatxt backend package.

Notes with checklist-derived child notes and a caller-driven Pomodoro timer,
served to the desktop client over FastAPI. The FastAPI app is exposed at
package level for convenience imports (``tomatxt.app``).
"""

from .main import app  # noqa: F401
