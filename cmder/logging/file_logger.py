"""Logger écrivant les actions des commandes dans un fichier texte."""

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from cmder.logging.base import Logger


class FileLogger(Logger):
    """Écrit chaque ligne "clé : message" dans un fichier, sans couleur.

    Un logger stdlib est dédié à chaque fichier ; il ne propage pas
    vers la racine et chaque ligne est vidée sur disque aussitôt.

    Attributes:
        log_file: Chemin du fichier de log.
        key: Clé d'action courante.
    """

    def __init__(
        self,
        log_file: str,
        key: str = "run",
        log_format: str = "%(asctime)s - %(message)s",
    ) -> None:
        """Ouvre (ou réutilise) le handler du fichier.

        Args:
            log_file: Fichier de destination, créé avec ses parents.
            key: Clé d'action initiale.
            log_format: Format passé à logging.Formatter.
        """
        self.log_file = log_file
        self.key = key

        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)

        self.logger = logging.getLogger(f"cmder.file.{log_file}")
        self.logger.setLevel(logging.INFO)

        # Un seul handler par fichier, même après plusieurs instances
        if not self.logger.handlers:
            handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(logging.Formatter(log_format))
            self.logger.addHandler(handler)
        self.handler = self.logger.handlers[0]

        self.logger.propagate = False

    @contextmanager
    def action(
        self,
        key: str,
        color: Optional[str] = None,
        cols: Optional[int] = None,
    ) -> Iterator["FileLogger"]:
        """Change temporairement la clé (couleur et largeur ignorées)."""
        saved = self.key
        self.key = key
        try:
            yield self
        finally:
            self.key = saved

    def log(self, *values: Any) -> None:
        """Log les valeurs séparées par un espace."""
        self._write(" ".join(str(v) for v in values))

    def logf(self, format: str, *values: Any) -> None:
        """Log les valeurs interpolées dans format."""
        self._write(format % values if values else format)

    def _write(self, message: str) -> None:
        self.logger.info(f"{self.key} : {message}")
        self.handler.flush()
