"""Formateurs du message de log annonçant une commande.

Le message reprend argv entre crochets, suivi du répertoire de travail
s'il est défini :

    [rsync -av /src /dst] in /home/user

Classes :
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Texte brut (fichiers, tests).
    AnsiCommandFormatter : Mot-clé « in » coloré pour la console.
"""

from abc import ABC, abstractmethod
from typing import List

from cmder.logging.colors import Color


class CommandFormatter(ABC):
    """Interface abstraite pour formater le message d'une commande."""

    @abstractmethod
    def format_command(self, command: List[str], cwd: str = "") -> str:
        """Formate le message annonçant la commande.

        Args:
            command: Commande sous forme de liste.
            cwd: Répertoire de travail ("" s'il n'est pas défini).

        Returns:
            Message formaté prêt à l'affichage.
        """
        pass


class PlainCommandFormatter(CommandFormatter):
    """Formateur texte brut, sans code ANSI."""

    def format_command(self, command: List[str], cwd: str = "") -> str:
        message = f"[{' '.join(command)}]"
        if cwd:
            message += f" in {cwd}"
        return message


class AnsiCommandFormatter(CommandFormatter):
    """Formateur console : le mot-clé « in » reprend la couleur de clé.

    Attributes:
        color: Code ANSI appliqué au mot-clé.
    """

    def __init__(self, color: str = Color.TEAL) -> None:
        self.color = color

    def format_command(self, command: List[str], cwd: str = "") -> str:
        message = f"[{' '.join(command)}]"
        if cwd:
            message += f"{self.color} in{Color.CLEAR} {cwd}"
        return message
