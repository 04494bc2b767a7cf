"""Constructeur fluent pour configurer et lancer des commandes système.

Ce module fournit la classe Command, qui accumule la configuration
d'un processus (arguments, environnement, répertoire, entrées/sorties,
contexte d'annulation, dry-run) puis l'exécute selon un des modes :
run, output, combined_output, start/wait, kill.

Example:
    Construction et exécution d'une commande :

        from cmder import Command

        cmd = (
            Command("rsync", "-av")
            .with_args("/src/", "/dest/")
            .with_dir("/home/user")
            .with_env("RSYNC_RSH=ssh")
        )
        cmd.run()
        print(cmd.exit_code, cmd.duration)

    Définir une commande une fois et l'appeler plusieurs fois :

        go = Command("go").as_runnable()
        go("mod", "tidy")
        go("test", "./...")
"""

import copy
import os
from datetime import datetime, timedelta
from subprocess import Popen  # nosec B404
from typing import IO, Any, List, Optional, Tuple

from cmder.commands.base import (
    Cmder,
    CommandResult,
    CommandState,
    Runnable,
    RunnableWithResult,
)
from cmder.commands.context import Context
from cmder.commands.formatter import (
    AnsiCommandFormatter,
    CommandFormatter,
    PlainCommandFormatter,
)
from cmder.commands.process import ProcessInvocation
from cmder.config.manager import CmderConfig, get_config
from cmder.errors.exceptions import (
    CmderError,
    CommandSpawnError,
    InvalidTransitionError,
)
from cmder.logging.base import Logger
from cmder.logging.colors import paint


class Command(Cmder):
    """Constructeur fluent de commandes système.

    Les méthodes with_*, silent() et dry_run() modifient l'instance et
    la retournent pour le chaînage. L'état d'exécution (code retour,
    durée, processus) est renseigné par les méthodes d'exécution et
    écrasé si la même instance est exécutée à nouveau.

    Attributes:
        _argv: Programme et arguments.
        _env: Entrées KEY=VALUE (environnement hérité puis ajouts).
        _dir: Répertoire de travail ("" : répertoire courant).
        _stdin: Contenu fixe de stdin, ou None (hérité).
        _stdout: Destination de stdout, ou None (héritée).
        _stderr: Destination de stderr, ou None (héritée).
        _context: Contexte d'annulation.
        _dry_run: Dry-run propre à l'instance.
        _dry_run_key: Clé d'action remplaçant celle du dry-run.
        _silent: Supprime la ligne de log avant exécution.
        _logger: Logger propre à l'instance, ou None (logger global).
        _config: Contexte de configuration ambiant.
    """

    def __init__(
        self,
        *argv: str,
        config: Optional[CmderConfig] = None,
    ) -> None:
        """Initialise la commande avec les valeurs par défaut du système.

        Args:
            *argv: Programme suivi de ses arguments.
            config: Contexte de configuration (défaut: contexte global).

        Raises:
            ValueError: Si aucun programme n'est fourni.
        """
        if not argv or not argv[0] or not argv[0].strip():
            raise ValueError("Le programme est requis.")
        self._argv: List[str] = list(argv)
        self._env: List[str] = [f"{k}={v}" for k, v in os.environ.items()]
        self._dir: str = ""
        self._stdin: Optional[bytes] = None
        self._stdout: Optional[IO[Any]] = None
        self._stderr: Optional[IO[Any]] = None
        self._context: Context = Context.background()
        self._dry_run: bool = False
        self._dry_run_key: str = ""
        self._silent: bool = False
        self._logger: Optional[Logger] = None
        self._config: CmderConfig = config or get_config()
        self._reset_state()

    def _reset_state(self) -> None:
        """Remet l'état d'exécution à celui d'une commande neuve."""
        self._invocation: Optional[ProcessInvocation] = None
        self._process: Optional[Popen] = None
        self._state = CommandState.CONFIGURED
        self._complete = False
        self._failed = False
        self._exit_code = 0
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None

    # --- Configuration ---

    def with_args(self, *args: str) -> "Command":
        """Ajoute des arguments à la fin de la commande.

        Args:
            *args: Arguments à ajouter (aucun : sans effet).

        Returns:
            L'instance courante pour le chaînage.
        """
        if args:
            self._argv.extend(args)
        return self

    def with_context(self, context: Context) -> "Command":
        """Définit le contexte d'annulation.

        Args:
            context: Contexte transmis à la création du processus.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._context = context
        return self

    def with_dir(self, path: str) -> "Command":
        """Définit le répertoire de travail.

        Args:
            path: Répertoire ("" : répertoire courant de l'appelant).

        Returns:
            L'instance courante pour le chaînage.
        """
        self._dir = str(path)
        return self

    def with_env(self, *entries: str) -> "Command":
        """Ajoute des entrées KEY=VALUE à l'environnement.

        Les entrées s'ajoutent à l'environnement hérité ; en cas de
        clé dupliquée, la dernière valeur l'emporte au lancement.

        Args:
            *entries: Entrées de la forme "KEY=VALUE".

        Returns:
            L'instance courante pour le chaînage.
        """
        self._env.extend(entries)
        return self

    def with_input(self, data: Optional[bytes] = None) -> "Command":
        """Fournit un contenu fixe sur stdin.

        Args:
            data: Octets envoyés au processus. None rétablit le stdin
                hérité du processus appelant.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._stdin = bytes(data) if data is not None else None
        return self

    def with_output(
        self,
        stdout: Optional[IO[Any]],
        stderr: Optional[IO[Any]] = None,
    ) -> "Command":
        """Redirige stdout et, si fourni, stderr.

        Args:
            stdout: Flux recevant la sortie standard.
            stderr: Flux recevant la sortie d'erreur (inchangée si
                None).

        Returns:
            L'instance courante pour le chaînage.
        """
        if stderr is not None:
            self._stderr = stderr
        self._stdout = stdout
        return self

    def with_logger(self, logger: Logger) -> "Command":
        """Remplace le logger global pour cette commande."""
        self._logger = logger
        return self

    def silent(self) -> "Command":
        """Supprime la ligne de log affichée avant l'exécution."""
        self._silent = True
        return self

    def dry_run(self, *labels: str) -> "Command":
        """Active le dry-run pour cette instance.

        Args:
            *labels: Libellés joints par un espace remplaçant la clé
                "dry <action>" dans le log.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._dry_run_key = " ".join(labels)
        self._dry_run = True
        return self

    def clone(self) -> "Command":
        """Retourne une copie indépendante de la configuration.

        Arguments et environnement sont copiés ; flux, contexte et
        logger sont partagés avec l'original. L'état d'exécution du
        clone est celui d'une commande neuve.

        Returns:
            Nouvelle commande dans l'état CONFIGURED.
        """
        clone = copy.copy(self)
        clone._argv = list(self._argv)
        clone._env = list(self._env)
        clone._reset_state()
        return clone

    # --- État ---

    @property
    def args(self) -> List[str]:
        """Copie de la commande sous forme de liste."""
        return list(self._argv)

    @property
    def env(self) -> List[str]:
        """Copie des entrées d'environnement."""
        return list(self._env)

    @property
    def dir(self) -> str:
        """Répertoire de travail ("" : répertoire courant)."""
        return self._dir

    @property
    def state(self) -> CommandState:
        """État du cycle de vie."""
        return self._state

    @property
    def exit_code(self) -> int:
        return self._exit_code

    @property
    def failed(self) -> bool:
        """True si la dernière exécution a échoué ou a été tuée."""
        return self._failed

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def start_time(self) -> Optional[datetime]:
        """Début de la dernière exécution réelle."""
        return self._start_time

    @property
    def end_time(self) -> Optional[datetime]:
        """Fin de la dernière exécution terminée."""
        return self._end_time

    @property
    def duration(self) -> timedelta:
        if self._start_time is None or self._end_time is None:
            return timedelta(0)
        return self._end_time - self._start_time

    @property
    def process(self) -> Optional[Popen]:
        return self._process

    @property
    def pid(self) -> Optional[int]:
        if self._process is None:
            return None
        return self._process.pid

    @property
    def is_dry_run(self) -> bool:
        """True si le dry-run est actif (instance ou global)."""
        return self._dry_run or self._config.dry_run

    def result(self) -> CommandResult:
        """Retourne un instantané immuable de l'état courant."""
        return CommandResult(
            command=list(self._argv),
            state=self._state,
            exit_code=self._exit_code,
            complete=self._complete,
            failed=self._failed,
            duration=self.duration,
            pid=self.pid,
        )

    # --- Log ---

    def _get_logger(self) -> Logger:
        if self._logger is None:
            return self._config.logger
        return self._logger

    def _formatter(self) -> CommandFormatter:
        settings = self._config.settings
        if settings.color_enabled:
            return AnsiCommandFormatter(paint(settings.color, True))
        return PlainCommandFormatter()

    def log_command(self) -> None:
        """Logge la commande qui va être exécutée, sauf si silencieuse."""
        if self._silent:
            return
        self._get_logger().log(
            self._formatter().format_command(self._argv, self._dir)
        )

    def _log_action(self, key: str) -> None:
        """Logge la commande sous la clé d'action donnée."""
        if self._silent:
            return
        with self._get_logger().action(key):
            self.log_command()

    def _log_dry_run(self, key: str) -> None:
        """Logge l'action en mode dry-run, même si la commande est
        silencieuse.

        La clé affichée est le libellé de dry_run() s'il a été fourni,
        sinon "<dry_run_key> <key>" (ex: "dry run", "dry start").
        """
        settings = self._config.settings
        label = self._dry_run_key or f"{settings.dry_run_key} {key}"
        saved_silent = self._silent
        self._silent = False
        try:
            with self._get_logger().action(
                label, settings.dry_run_color, settings.dry_run_cols
            ):
                self.log_command()
        finally:
            self._silent = saved_silent

    # --- Exécution ---

    def _build_invocation(
        self, writers: Tuple[IO[Any], ...] = ()
    ) -> ProcessInvocation:
        """Construit le descripteur d'exécution.

        Aucun writer : flux configurés ; un writer : stdout et stderr ;
        deux writers : stdout puis stderr.
        """
        if len(writers) == 1:
            stdout, stderr = writers[0], writers[0]
        elif len(writers) > 1:
            stdout, stderr = writers[0], writers[1]
        else:
            stdout, stderr = self._stdout, self._stderr
        return ProcessInvocation(
            self._argv,
            env=self._env,
            cwd=self._dir,
            stdin=self._stdin,
            stdout=stdout,
            stderr=stderr,
            context=self._context,
        )

    def _prepare(
        self, key: str, writers: Tuple[IO[Any], ...] = ()
    ) -> bool:
        """Prépare l'exécution et indique s'il faut lancer le processus.

        En dry-run, l'action est seulement loggée et False est retourné.
        """
        self._invocation = self._build_invocation(writers)

        if self.is_dry_run:
            self._log_dry_run(key)
            return False

        self._log_action(key)

        self._complete = False
        self._failed = False
        self._end_time = None
        self._start_time = datetime.now()
        return True

    def _finish(self, error: Optional[CmderError]) -> None:
        """Enregistre l'état de fin d'une exécution synchrone."""
        self._end_time = datetime.now()
        if self._invocation is not None:
            self._process = self._invocation.process
        if error is not None:
            error.origin = self
        if isinstance(error, CommandSpawnError):
            self._failed = True
            self._state = CommandState.FAILED
            return
        self._exit_code = ProcessInvocation.exit_status(error)
        self._complete = True
        self._failed = error is not None
        self._state = (
            CommandState.FAILED if self._failed else CommandState.COMPLETED
        )

    def run(self, *writers: IO[Any]) -> None:
        """Lance la commande et attend sa fin.

        Args:
            *writers: Un flux pour stdout et stderr, ou deux flux
                (stdout, stderr). Aucun : flux configurés.

        Raises:
            CommandSpawnError: Si le processus n'a pas pu être créé.
            CommandExitError: Si le code retour est non nul.
            CommandStreamError: Si une copie d'entrée/sortie a échoué.
            ContextError: Si le contexte a été annulé.
        """
        if not self._prepare(self._config.settings.run_key, writers):
            return
        try:
            self._invocation.run()
        except CmderError as e:
            self._finish(e)
            raise
        self._finish(None)

    def output(self) -> bytes:
        """Lance la commande silencieusement et retourne stdout.

        Les flux stdout et stderr configurés ne sont pas utilisés pour
        cette exécution. En cas de code retour non nul, l'erreur levée
        porte les sorties capturées (output, stderr).

        Returns:
            Sortie standard capturée (vide en dry-run).
        """
        self.silent()
        if not self._prepare(self._config.settings.output_key):
            return b""
        try:
            data = self._invocation.output()
        except CmderError as e:
            self._finish(e)
            raise
        self._finish(None)
        return data

    def combined_output(self) -> bytes:
        """Lance la commande et retourne stdout et stderr mêlés.

        Returns:
            Sorties capturées dans un même tampon (vide en dry-run).
        """
        if not self._prepare(self._config.settings.run_key):
            return b""
        try:
            data = self._invocation.combined_output()
        except CmderError as e:
            self._finish(e)
            raise
        self._finish(None)
        return data

    def start(self, *writers: IO[Any]) -> None:
        """Lance la commande sans attendre sa fin.

        Args:
            *writers: Un flux pour stdout et stderr, ou deux flux
                (stdout, stderr). Aucun : flux configurés.

        Raises:
            CommandSpawnError: Si le processus n'a pas pu être créé.
            ContextError: Si le contexte est déjà annulé.
        """
        if not self._prepare(self._config.settings.start_key, writers):
            return
        try:
            self._invocation.start()
        except CmderError as e:
            e.origin = self
            self._failed = True
            self._state = CommandState.FAILED
            if not isinstance(e, CommandSpawnError):
                self._exit_code = ProcessInvocation.exit_status(e)
            raise
        self._process = self._invocation.process
        self._state = CommandState.STARTED

    def wait(self) -> None:
        """Attend la fin d'une commande lancée par start().

        En cas d'échec, la commande est marquée en échec et l'heure de
        fin n'est pas enregistrée. Le code retour d'une commande tuée
        reste -1.

        Raises:
            InvalidTransitionError: Si start() n'a pas été appelé.
            CommandExitError: Si le code retour est non nul.
        """
        if self.is_dry_run:
            self._log_dry_run(self._config.settings.wait_key)
            return

        if self._process is None or self._invocation is None:
            raise InvalidTransitionError(
                "Le processus doit être lancé par start() avant wait().",
                self._argv,
            )

        self._log_action(self._config.settings.wait_key)

        try:
            self._invocation.wait()
        except CmderError as e:
            e.origin = self
            self._failed = True
            if self._state is not CommandState.KILLED:
                self._exit_code = ProcessInvocation.exit_status(e)
                self._state = CommandState.FAILED
            raise

        self._end_time = datetime.now()
        self._complete = True
        # Le processus a pu se terminer avant kill() : il reste tué
        if self._state is CommandState.KILLED:
            return
        self._exit_code = 0
        self._state = CommandState.COMPLETED

    def kill(self) -> None:
        """Tue immédiatement le processus lancé, sans attendre sa fin.

        La commande est marquée en échec avec le code retour -1.

        Raises:
            InvalidTransitionError: Si start() n'a pas été appelé.
        """
        if self.is_dry_run:
            self._log_dry_run(self._config.settings.kill_key)
            return

        if self._process is None or self._invocation is None:
            raise InvalidTransitionError(
                "Le processus doit être lancé par start() avant kill().",
                self._argv,
            )

        self._failed = True
        self._exit_code = -1
        self._state = CommandState.KILLED

        self._log_action(self._config.settings.kill_key)

        self._invocation.kill()

    def as_runnable(self, *writers: IO[Any]) -> Runnable:
        """Retourne une fonction lançant un clone complété (run).

        Chaque appel clone la configuration courante, ajoute les
        arguments reçus puis appelle run() : aucun état ne fuit d'un
        appel à l'autre.
        """
        def runnable(*args: str) -> None:
            self.clone().with_args(*args).run(*writers)

        return runnable

    def as_runnable_with_result(
        self, *writers: IO[Any]
    ) -> RunnableWithResult:
        """Comme as_runnable, la fonction retournant le clone exécuté.

        En cas d'échec, le clone reste accessible via l'attribut origin
        de l'erreur levée.
        """
        def runnable(*args: str) -> "Command":
            clone = self.clone().with_args(*args)
            clone.run(*writers)
            return clone

        return runnable

    def as_startable(self, *writers: IO[Any]) -> Runnable:
        """Retourne une fonction lançant un clone complété (start)."""
        def startable(*args: str) -> None:
            self.clone().with_args(*args).start(*writers)

        return startable

    def as_startable_with_result(
        self, *writers: IO[Any]
    ) -> RunnableWithResult:
        """Comme as_startable, la fonction retournant le clone lancé."""
        def startable(*args: str) -> "Command":
            clone = self.clone().with_args(*args)
            clone.start(*writers)
            return clone

        return startable

    def describe(self) -> str:
        """Description lisible de la commande.

        Destinée au débogage uniquement : le résultat n'est pas
        utilisable comme entrée d'un shell et peut varier selon la
        plateforme.
        """
        return str(self._build_invocation())

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Command({self._argv!r}, state={self._state.value})"


def new(*argv: str) -> Command:
    """Raccourci pour Command(*argv)."""
    return Command(*argv)
