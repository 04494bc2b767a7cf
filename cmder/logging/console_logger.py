"""Logger console structuré utilisé par défaut par les commandes.

Chaque appel produit une ligne de la forme :

    <clé colorée justifiée à droite> : <message> : <horodatage gris>

Example:
    Sortie pour un Command("echo", "foo").run() :

          run : [echo foo] : 2024-05-01T10:12:00+02:00
"""

import sys
from contextlib import contextmanager
from datetime import datetime
from typing import IO, TYPE_CHECKING, Any, Iterator, Optional

from cmder.logging.base import Logger
from cmder.logging.colors import Color, paint

if TYPE_CHECKING:
    from cmder.config.settings import CmderSettings


class ConsoleLogger(Logger):
    """Logger écrivant sur la console avec clé, couleur et horodatage.

    Les valeurs par défaut (clé, largeur, couleur, horodatage) sont
    copiées depuis les paramètres globaux à la construction ; les
    méthodes with_* les surchargent pour cette instance seulement.

    Attributes:
        key: Clé d'action affichée en début de ligne.
        color: Code couleur de la clé.
        cols: Largeur de la colonne de clé.
        no_timestamp: True pour omettre l'horodatage.
    """

    def __init__(
        self,
        settings: Optional["CmderSettings"] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        """Initialise le logger.

        Args:
            settings: Paramètres de référence (défaut: paramètres
                globaux courants).
            stream: Flux de sortie (défaut: sys.stdout au moment
                de chaque écriture).
        """
        if settings is None:
            from cmder.config.manager import get_config

            settings = get_config().settings
        self.key: str = settings.key
        self.color: str = settings.color
        self.cols: int = settings.cols
        self.no_timestamp: bool = not settings.timestamp_enabled
        self._color_enabled = settings.color_enabled
        self._time_format = settings.time_format
        self._stream = stream

    def with_key(self, key: str) -> "ConsoleLogger":
        """Définit la clé d'action de cette instance."""
        self.key = key
        return self

    def with_color(self, color: str) -> "ConsoleLogger":
        """Définit la couleur de la clé de cette instance."""
        self.color = color
        return self

    def with_cols(self, cols: int) -> "ConsoleLogger":
        """Définit la largeur de la colonne de clé."""
        self.cols = cols
        return self

    def without_timestamp(self) -> "ConsoleLogger":
        """Omet l'horodatage pour cette instance."""
        self.no_timestamp = True
        return self

    @contextmanager
    def action(
        self,
        key: str,
        color: Optional[str] = None,
        cols: Optional[int] = None,
    ) -> Iterator["ConsoleLogger"]:
        """Change temporairement clé, couleur et largeur de colonne."""
        saved = (self.key, self.color, self.cols)
        self.key = key
        if color is not None:
            self.color = color
        if cols is not None:
            self.cols = cols
        try:
            yield self
        finally:
            self.key, self.color, self.cols = saved

    def log(self, *values: Any) -> None:
        """Log les valeurs séparées par un espace."""
        self._write(" ".join(str(v) for v in values))

    def logf(self, format: str, *values: Any) -> None:
        """Log les valeurs interpolées dans format (opérateur %)."""
        self._write(format % values if values else format)

    def _paint(self, code: str) -> str:
        return paint(code, self._color_enabled)

    def _prefix(self) -> str:
        """Retourne la clé colorée justifiée suivie du séparateur."""
        return (
            f"{self._paint(self.color)}{self.key:>{self.cols}}"
            f"{self._paint(Color.DARK_GREY)} : {self._paint(Color.CLEAR)}"
        )

    def _timestamp(self) -> str:
        """Retourne l'horodatage gris, ou "" s'il est désactivé."""
        if self.no_timestamp:
            return ""
        now = datetime.now().astimezone()
        if self._time_format:
            stamp = now.strftime(self._time_format)
        else:
            stamp = now.isoformat(timespec="seconds")
        return (
            f"{self._paint(Color.DARK_GREY)} : {stamp}"
            f"{self._paint(Color.CLEAR)}"
        )

    def format_line(self, message: str) -> str:
        """Construit la ligne complète, sans retour à la ligne."""
        return f"{self._prefix()}{message}{self._timestamp()}"

    def _write(self, message: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(self.format_line(message) + "\n")
        stream.flush()
