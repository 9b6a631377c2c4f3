"""lxc-top fatal error types.

Every class here is fatal: the CLI restores the terminal, prints the message
and exits 1. A stopped container is not an error and has no class.
"""

from __future__ import annotations


class LxcTopError(Exception):
    pass


class EnvironmentFault(LxcTopError):
    """Enumerating containers failed or returned nothing."""


class FetchError(LxcTopError):
    def __init__(self, *, identity: str, message: str):
        super().__init__(message)
        self.identity = str(identity or "")


class FetchTimeout(FetchError):
    pass


class FetchFailure(FetchError):
    pass


class MalformedResponse(FetchError):
    pass


class InputChannelFault(LxcTopError):
    pass


class RenderFault(LxcTopError):
    pass
