"""Module de gestion des erreurs."""

from cmder.errors.exceptions import (CmderError,
                                     ConfigurationError,
                                     CommandError,
                                     CommandSpawnError,
                                     CommandExitError,
                                     CommandStreamError,
                                     InvalidTransitionError,
                                     ContextError,
                                     ContextCanceledError,
                                     DeadlineExceededError)


__all__ = [
    "CmderError",
    "ConfigurationError",
    "CommandError",
    "CommandSpawnError",
    "CommandExitError",
    "CommandStreamError",
    "InvalidTransitionError",
    "ContextError",
    "ContextCanceledError",
    "DeadlineExceededError",
]
