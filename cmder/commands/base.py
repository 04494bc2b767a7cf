"""Interfaces abstraites et structures de données des commandes.

Ce module définit :
    - CommandState : États du cycle de vie d'une commande.
    - CommandResult : Instantané immuable de l'état d'une commande.
    - Cmder : Interface abstraite du constructeur de commandes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from subprocess import Popen  # nosec B404
from typing import IO, Any, Callable, List, Optional

from cmder.commands.context import Context
from cmder.logging.base import Logger


class CommandState(Enum):
    """États du cycle de vie d'une commande.

    CONFIGURED → STARTED → COMPLETED | FAILED | KILLED

    run(), output() et combined_output() passent directement de
    CONFIGURED à COMPLETED ou FAILED.
    """

    CONFIGURED = "configured"
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"
    KILLED = "killed"


@dataclass(frozen=True)
class CommandResult:
    """Instantané de l'état d'une commande après exécution.

    Attributes:
        command: Commande sous forme de liste.
        state: État du cycle de vie.
        exit_code: Code retour (0 tant que non exécutée).
        complete: True si l'exécution est allée à son terme.
        failed: True si l'exécution a échoué ou a été tuée.
        duration: Durée d'exécution.
        pid: Identifiant du processus, ou None.
    """

    command: List[str]
    state: CommandState
    exit_code: int
    complete: bool
    failed: bool
    duration: timedelta
    pid: Optional[int] = None

    @property
    def success(self) -> bool:
        """True si la commande est terminée avec le code 0."""
        return self.complete and not self.failed and self.exit_code == 0


Runnable = Callable[..., None]
RunnableWithResult = Callable[..., "Cmder"]


class Cmder(ABC):
    """Interface du constructeur fluent de commandes système.

    Les méthodes de configuration modifient l'instance et la
    retournent pour le chaînage. Les méthodes d'exécution (run,
    output, combined_output, start, wait, kill) lèvent une
    CmderError en cas d'échec.
    """

    # --- Configuration ---

    @abstractmethod
    def with_args(self, *args: str) -> "Cmder":
        """Ajoute des arguments ; sans effet si aucun n'est fourni."""
        pass

    @abstractmethod
    def with_context(self, context: Context) -> "Cmder":
        """Définit le contexte d'annulation transmis au processus."""
        pass

    @abstractmethod
    def with_dir(self, path: str) -> "Cmder":
        """Définit le répertoire de travail ("" : répertoire courant)."""
        pass

    @abstractmethod
    def with_env(self, *entries: str) -> "Cmder":
        """Ajoute des entrées KEY=VALUE à l'environnement.

        L'environnement du processus appelant est conservé. En cas de
        clé dupliquée, seule la dernière valeur est visible.
        """
        pass

    @abstractmethod
    def with_input(self, data: Optional[bytes] = None) -> "Cmder":
        """Fournit un contenu fixe sur stdin, ou rétablit stdin hérité."""
        pass

    @abstractmethod
    def with_output(
        self, stdout: Optional[IO[Any]], stderr: Optional[IO[Any]] = None
    ) -> "Cmder":
        """Redirige stdout et, si fourni, stderr."""
        pass

    @abstractmethod
    def with_logger(self, logger: Logger) -> "Cmder":
        """Remplace le logger par défaut pour cette commande."""
        pass

    @abstractmethod
    def silent(self) -> "Cmder":
        """Supprime la ligne de log affichée avant l'exécution."""
        pass

    @abstractmethod
    def dry_run(self, *labels: str) -> "Cmder":
        """Active le dry-run : l'action est loggée mais non exécutée.

        Les libellés fournis, joints par un espace, remplacent la clé
        d'action affichée.
        """
        pass

    @abstractmethod
    def clone(self) -> "Cmder":
        """Retourne une copie indépendante, dans l'état CONFIGURED."""
        pass

    # --- Exécution ---

    @abstractmethod
    def run(self, *writers: IO[Any]) -> None:
        """Lance la commande et attend sa fin.

        Un writer redirige stdout et stderr ; deux writers redirigent
        respectivement stdout puis stderr.
        """
        pass

    @abstractmethod
    def output(self) -> bytes:
        """Lance la commande silencieusement et retourne stdout."""
        pass

    @abstractmethod
    def combined_output(self) -> bytes:
        """Lance la commande et retourne stdout et stderr mêlés."""
        pass

    @abstractmethod
    def start(self, *writers: IO[Any]) -> None:
        """Lance la commande sans attendre sa fin."""
        pass

    @abstractmethod
    def wait(self) -> None:
        """Attend la fin d'une commande lancée par start()."""
        pass

    @abstractmethod
    def kill(self) -> None:
        """Tue immédiatement le processus, sans attendre sa fin."""
        pass

    @abstractmethod
    def as_runnable(self, *writers: IO[Any]) -> Runnable:
        """Retourne une fonction qui clone, complète et lance (run)."""
        pass

    @abstractmethod
    def as_runnable_with_result(
        self, *writers: IO[Any]
    ) -> RunnableWithResult:
        """Comme as_runnable, mais retourne le clone exécuté."""
        pass

    @abstractmethod
    def as_startable(self, *writers: IO[Any]) -> Runnable:
        """Retourne une fonction qui clone, complète et lance (start)."""
        pass

    @abstractmethod
    def as_startable_with_result(
        self, *writers: IO[Any]
    ) -> RunnableWithResult:
        """Comme as_startable, mais retourne le clone lancé."""
        pass

    # --- État ---

    @property
    @abstractmethod
    def exit_code(self) -> int:
        """Code retour ; 0 tant que la commande n'a pas été exécutée."""
        pass

    @property
    @abstractmethod
    def duration(self) -> timedelta:
        """Durée d'exécution ; nulle avant la fin."""
        pass

    @property
    @abstractmethod
    def complete(self) -> bool:
        """True si la commande a terminé son exécution."""
        pass

    @property
    @abstractmethod
    def process(self) -> Optional[Popen]:
        """Processus sous-jacent, une fois lancé."""
        pass

    @property
    @abstractmethod
    def pid(self) -> Optional[int]:
        """Identifiant du processus, ou None s'il n'est pas lancé."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Description lisible de la commande, pour le débogage."""
        pass

