"""Loggers sans sortie console : capture en mémoire et logger muet."""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

from cmder.logging.base import Logger


class MemoryLogger(Logger):
    """Capture les messages en mémoire avec leur clé d'action.

    Utile dans les tests pour vérifier ce qu'une commande a loggé.

    Attributes:
        records: Liste de tuples (clé, message) dans l'ordre d'appel.
    """

    def __init__(self, key: str = "") -> None:
        self.key = key
        self.records: List[Tuple[str, str]] = []

    @property
    def messages(self) -> List[str]:
        """Retourne les messages seuls."""
        return [message for _, message in self.records]

    @property
    def keys(self) -> List[str]:
        """Retourne les clés d'action seules."""
        return [key for key, _ in self.records]

    @contextmanager
    def action(
        self,
        key: str,
        color: Optional[str] = None,
        cols: Optional[int] = None,
    ) -> Iterator["MemoryLogger"]:
        saved = self.key
        self.key = key
        try:
            yield self
        finally:
            self.key = saved

    def log(self, *values: Any) -> None:
        self.records.append((self.key, " ".join(str(v) for v in values)))

    def logf(self, format: str, *values: Any) -> None:
        self.records.append((self.key, format % values if values else format))

    def clear(self) -> None:
        """Efface les messages capturés."""
        self.records.clear()


class NullLogger(Logger):
    """Logger qui ignore tous les messages."""

    def log(self, *values: Any) -> None:
        pass

    def logf(self, format: str, *values: Any) -> None:
        pass
