"""Exception types raised by the plugin host."""

from __future__ import annotations


class PinguBotError(RuntimeError):
    """Base class for plugin host failures."""


class PublishError(PinguBotError):
    """Raised when the remote command catalog rejects or never receives an update."""


class StartupError(PinguBotError):
    """Raised when a startup step fails; ``step`` names the step that broke."""

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"Startup step '{step}' failed: {cause}")
        self.step = step


__all__ = ["PinguBotError", "PublishError", "StartupError"]
