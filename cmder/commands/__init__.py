"""Module de construction et d'exécution de commandes système.

Classes disponibles :
    Cmder : Interface abstraite du constructeur de commandes.
    Command : Constructeur fluent, implémentation via subprocess.
    CommandState : États du cycle de vie d'une commande.
    CommandResult : Instantané immuable de l'état d'une commande.
    Context : Contexte d'annulation transmis aux processus.
    ProcessInvocation : Descripteur d'exécution d'un processus.
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Formatage texte brut.
    AnsiCommandFormatter : Formatage ANSI coloré (console).
"""

from cmder.commands.base import (
    Cmder,
    CommandResult,
    CommandState,
)
from cmder.commands.builder import Command, new
from cmder.commands.context import Context
from cmder.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
    AnsiCommandFormatter,
)
from cmder.commands.process import ProcessInvocation, fold_environment

__all__ = [
    # Structures de données
    "CommandResult",
    "CommandState",
    # Interface abstraite
    "Cmder",
    # Constructeur
    "Command",
    "new",
    # Annulation
    "Context",
    # Exécution
    "ProcessInvocation",
    "fold_environment",
    # Formateurs
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
]
