"""Codes couleur ANSI utilisés par les loggers console.

Les couleurs ne sont émises que si elles ont été activées au démarrage
(voir cmder.config.settings_from_env). Désactivées, elles se dégradent
en chaînes vides : aucune erreur, aucun code parasite.
"""

from enum import StrEnum


class Color(StrEnum):
    """Codes ANSI disponibles pour la clé et l'horodatage."""

    BLACK = "\033[1;30m"
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    PURPLE = "\033[1;34m"
    MAGENTA = "\033[1;35m"
    TEAL = "\033[1;36m"
    WHITE = "\033[1;37m"
    DARK_GREY = "\033[90m"
    CLEAR = "\033[0m"


def paint(code: str, enabled: bool) -> str:
    """Retourne le code couleur, ou une chaîne vide si désactivé.

    Args:
        code: Code ANSI (ou chaîne vide).
        enabled: True si la couleur est activée.

    Returns:
        Le code inchangé si enabled, sinon "".
    """
    return str(code) if enabled else ""
