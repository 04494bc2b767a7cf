"""
Module contenant les exceptions personnalisées de cmder.

Toutes les erreurs levées par le package héritent de CmderError afin
de pouvoir être interceptées d'un seul bloc par l'appelant.
"""
from typing import Any, List, Optional


class CmderError(Exception):
    """Exception de base pour tout le package.

    Attributes:
        origin: Commande dont l'exécution a levé l'erreur, si connue.
    """

    origin: Optional[Any] = None


class ConfigurationError(CmderError, ValueError):
    """Exception levée pour une configuration invalide."""
    pass


class CommandError(CmderError):
    """Exception de base pour les erreurs liées à une commande.

    Attributes:
        command: Commande concernée sous forme de liste.
    """

    def __init__(self, message: str, command: Optional[List[str]] = None):
        super().__init__(message)
        self.command: List[str] = list(command or [])


class CommandSpawnError(CommandError):
    """Le processus n'a pas pu être créé (binaire absent, permission)."""
    pass


class CommandExitError(CommandError):
    """Le processus s'est terminé avec un code retour non nul.

    Attributes:
        exit_code: Code retour natif du processus.
        output: Sortie standard capturée (vide si non capturée).
        stderr: Sortie d'erreur capturée (vide si non capturée).
    """

    def __init__(
        self,
        command: List[str],
        exit_code: int,
        output: bytes = b"",
        stderr: bytes = b"",
    ) -> None:
        super().__init__(
            f"Code retour {exit_code} : {' '.join(command)}", command
        )
        self.exit_code = exit_code
        self.output = output
        self.stderr = stderr


class CommandStreamError(CommandError):
    """Échec de copie sur stdin, stdout ou stderr."""
    pass


class InvalidTransitionError(CommandError):
    """Transition de cycle de vie invalide (ex: wait sans start)."""
    pass


class ContextError(CmderError):
    """Exception de base pour les contextes d'annulation."""
    pass


class ContextCanceledError(ContextError):
    """Le contexte a été annulé explicitement."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceededError(ContextError):
    """L'échéance du contexte est dépassée."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)
