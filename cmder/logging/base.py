"""Interface abstraite pour le logging des commandes."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional


class Logger(ABC):
    """Interface pour le système de logging.

    Toute implémentation (console, fichier, mémoire, muette) peut être
    passée à une commande via Command.with_logger().
    """

    @abstractmethod
    def log(self, *values: Any) -> None:
        """Log les valeurs avec leur représentation par défaut."""
        pass

    @abstractmethod
    def logf(self, format: str, *values: Any) -> None:
        """Log les valeurs interpolées dans format (style printf)."""
        pass

    @contextmanager
    def action(
        self,
        key: str,
        color: Optional[str] = None,
        cols: Optional[int] = None,
    ) -> Iterator["Logger"]:
        """Change temporairement la clé d'action du logger.

        L'implémentation par défaut ne fait rien : seuls les loggers
        qui affichent une clé (ConsoleLogger) la surchargent.

        Args:
            key: Clé d'action à afficher (ex: "run", "dry start").
            color: Couleur temporaire de la clé.
            cols: Largeur temporaire de la colonne de clé.

        Yields:
            Le logger lui-même.
        """
        yield self
