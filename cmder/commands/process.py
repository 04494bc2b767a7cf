"""Lancement de processus via subprocess.

Ce module fournit ProcessInvocation, le descripteur d'exécution
construit par une commande juste avant de lancer le processus. Il
regroupe argv, environnement, répertoire de travail, entrées/sorties
et contexte d'annulation, et délègue la création du processus à
subprocess.Popen.

Les sorties vers un vrai fichier (objet exposant fileno()) sont
confiées directement au système. Les autres destinations (BytesIO,
StringIO, flux capturés) sont alimentées par des threads de copie.
"""

import codecs
import io
import logging
import shutil
import subprocess  # nosec B404
import threading
from typing import IO, Any, Dict, List, Optional, Tuple

from cmder.commands.context import Context
from cmder.errors.exceptions import (
    CommandExitError,
    CommandSpawnError,
    CommandStreamError,
    InvalidTransitionError,
)

_log = logging.getLogger("cmder")

CHUNK_SIZE = 65536
# Période de vérification du contexte pendant l'exécution
WATCH_INTERVAL = 0.05


def fold_environment(entries: List[str]) -> Dict[str, str]:
    """Convertit une liste KEY=VALUE en dictionnaire.

    En cas de clé dupliquée, la dernière valeur l'emporte. Les entrées
    sans '=' sont ignorées.

    Args:
        entries: Entrées d'environnement dans l'ordre d'ajout.

    Returns:
        Dictionnaire d'environnement pour subprocess.
    """
    env: Dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            _log.debug("Entrée d'environnement ignorée : %r", entry)
            continue
        env[key] = value
    return env


def _is_text(sink: Any) -> bool:
    """Indique si le flux attend du texte plutôt que des octets."""
    if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        return False
    return isinstance(sink, io.TextIOBase) or hasattr(sink, "encoding")


def _real_fileno(sink: Any) -> Optional[int]:
    """Retourne le descripteur du flux s'il en possède un, sinon None."""
    fileno = getattr(sink, "fileno", None)
    if fileno is None:
        return None
    try:
        return fileno()
    except (OSError, ValueError, io.UnsupportedOperation):
        return None


class _Pump:
    """Copie un pipe du processus vers un flux Python, dans un thread."""

    def __init__(self, pipe: IO[bytes], sink: Any) -> None:
        self.pipe = pipe
        self.sink = sink
        self.error: Optional[BaseException] = None
        self.thread = threading.Thread(target=self._copy, daemon=True)

    def start(self) -> None:
        self.thread.start()

    def join(self) -> None:
        self.thread.join()

    def _copy(self) -> None:
        decoder = (
            codecs.getincrementaldecoder("utf-8")(errors="replace")
            if _is_text(self.sink) else None
        )
        try:
            for chunk in iter(lambda: self.pipe.read1(CHUNK_SIZE), b""):
                # Après une erreur d'écriture, on continue de vider le
                # pipe pour ne pas bloquer le processus.
                if self.error is None:
                    self._write(chunk, decoder)
            if decoder is not None and self.error is None:
                # Séquence multi-octets incomplète en fin de flux
                tail = decoder.decode(b"", final=True)
                if tail:
                    self.sink.write(tail)
        except (OSError, ValueError, TypeError) as e:
            if self.error is None:
                self.error = e
        finally:
            self.pipe.close()

    def _write(self, chunk: bytes, decoder: Any) -> None:
        try:
            self.sink.write(decoder.decode(chunk) if decoder else chunk)
            if hasattr(self.sink, "flush"):
                self.sink.flush()
        except (OSError, ValueError, TypeError) as e:
            self.error = e


class ProcessInvocation:
    """Descripteur d'exécution d'un processus.

    Attributes:
        argv: Programme et arguments.
        env: Entrées KEY=VALUE (la dernière occurrence l'emporte).
        cwd: Répertoire de travail ("" : répertoire courant).
        stdin: Contenu fixe de l'entrée standard, ou None (hérité).
        stdout: Destination de la sortie standard, ou None (héritée).
        stderr: Destination de la sortie d'erreur, ou None (héritée).
        context: Contexte d'annulation.
        process: Processus lancé (après start()).
    """

    def __init__(
        self,
        argv: List[str],
        env: Optional[List[str]] = None,
        cwd: str = "",
        stdin: Optional[bytes] = None,
        stdout: Any = None,
        stderr: Any = None,
        context: Optional[Context] = None,
    ) -> None:
        if not argv:
            raise ValueError("Le programme est requis.")
        self.argv = list(argv)
        self.env = env
        self.cwd = cwd
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.context = context or Context.background()
        self.process: Optional[subprocess.Popen] = None
        self._pumps: List[_Pump] = []
        self._feeder: Optional[threading.Thread] = None
        self._feed_error: Optional[BaseException] = None
        self._finished = threading.Event()
        self._watcher: Optional[threading.Thread] = None
        self._canceled = False

    def __str__(self) -> str:
        """Description lisible, destinée au débogage uniquement.

        Le programme est résolu via le PATH quand c'est possible. Le
        résultat n'est pas utilisable comme entrée d'un shell.
        """
        program = shutil.which(self.argv[0]) or self.argv[0]
        return " ".join([program] + self.argv[1:])

    def _route(self, sink: Any) -> Tuple[Any, Optional[Any]]:
        """Retourne (argument Popen, flux à alimenter par copie)."""
        if sink is None:
            return None, None
        if _real_fileno(sink) is not None:
            if hasattr(sink, "flush"):
                sink.flush()
            return sink, None
        return subprocess.PIPE, sink

    def start(self) -> None:
        """Lance le processus sans attendre sa fin.

        Raises:
            ContextError: Si le contexte est déjà annulé.
            CommandSpawnError: Si le processus n'a pas pu être créé.
        """
        error = self.context.error()
        if error is not None:
            raise error

        stdout_arg, stdout_copy = self._route(self.stdout)
        if self.stderr is not None and self.stderr is self.stdout:
            stderr_arg = (
                subprocess.STDOUT if stdout_copy is not None else stdout_arg
            )
            stderr_copy = None
        else:
            stderr_arg, stderr_copy = self._route(self.stderr)

        try:
            self.process = subprocess.Popen(  # nosec B603
                self.argv,
                stdin=subprocess.PIPE if self.stdin is not None else None,
                stdout=stdout_arg,
                stderr=stderr_arg,
                env=(
                    fold_environment(self.env)
                    if self.env is not None else None
                ),
                cwd=self.cwd or None,
            )
        except OSError as e:
            _log.debug("Échec du lancement de %s : %s", self.argv, e)
            raise CommandSpawnError(str(e), self.argv) from e

        _log.debug("Processus %d lancé : %s", self.process.pid, self.argv)

        if stdout_copy is not None:
            self._pumps.append(_Pump(self.process.stdout, stdout_copy))
        if stderr_copy is not None:
            self._pumps.append(_Pump(self.process.stderr, stderr_copy))
        for pump in self._pumps:
            pump.start()

        if self.stdin is not None:
            self._feeder = threading.Thread(target=self._feed, daemon=True)
            self._feeder.start()

        if self.context.cancelable:
            self._watcher = threading.Thread(target=self._watch, daemon=True)
            self._watcher.start()

    def _feed(self) -> None:
        try:
            self.process.stdin.write(self.stdin)
        except BrokenPipeError:
            # Le processus a fermé son entrée avant la fin de l'envoi
            pass
        except (OSError, ValueError) as e:
            self._feed_error = e
        finally:
            try:
                self.process.stdin.close()
            except BrokenPipeError:
                pass

    def _watch(self) -> None:
        """Tue le processus si le contexte est annulé avant sa fin."""
        while not self._finished.is_set():
            if self.process.poll() is not None:
                return
            if self.context.wait(WATCH_INTERVAL):
                if self.process.poll() is None:
                    _log.debug(
                        "Contexte annulé, arrêt du processus %d",
                        self.process.pid,
                    )
                    self._canceled = True
                    self.process.kill()
                return

    def wait(self) -> None:
        """Attend la fin du processus et des copies d'entrées/sorties.

        Raises:
            InvalidTransitionError: Si start() n'a pas été appelé.
            ContextError: Si le contexte a interrompu le processus.
            CommandStreamError: Si une copie d'entrée/sortie a échoué.
            CommandExitError: Si le code retour est non nul.
        """
        if self.process is None:
            raise InvalidTransitionError(
                "Le processus doit être lancé par start() avant wait().",
                self.argv,
            )

        returncode = self.process.wait()
        self._finished.set()
        for pump in self._pumps:
            pump.join()
        if self._feeder is not None:
            self._feeder.join()
        if self._watcher is not None:
            self._watcher.join()

        _log.debug(
            "Processus %d terminé, code retour %d",
            self.process.pid, returncode,
        )

        if self._canceled:
            raise self.context.error()
        stream_errors = [p.error for p in self._pumps if p.error is not None]
        if self._feed_error is not None:
            stream_errors.insert(0, self._feed_error)
        if stream_errors:
            raise CommandStreamError(
                f"Erreur de copie d'entrée/sortie : {stream_errors[0]}",
                self.argv,
            ) from stream_errors[0]
        if returncode != 0:
            raise CommandExitError(self.argv, returncode)

    def run(self) -> None:
        """Lance le processus et attend sa fin."""
        self.start()
        self.wait()

    def output(self) -> bytes:
        """Lance le processus et retourne sa sortie standard.

        Les destinations configurées sont remplacées par des tampons
        pour cette exécution.

        Raises:
            CommandExitError: Porte stdout et stderr capturés.
        """
        self.stdout, self.stderr = io.BytesIO(), io.BytesIO()
        try:
            self.run()
        except CommandExitError as e:
            e.output = self.stdout.getvalue()
            e.stderr = self.stderr.getvalue()
            raise
        return self.stdout.getvalue()

    def combined_output(self) -> bytes:
        """Lance le processus et retourne stdout et stderr mêlés.

        Raises:
            CommandExitError: Porte la sortie capturée dans output.
        """
        buffer = io.BytesIO()
        self.stdout = self.stderr = buffer
        try:
            self.run()
        except CommandExitError as e:
            e.output = buffer.getvalue()
            raise
        return buffer.getvalue()

    def kill(self) -> None:
        """Demande l'arrêt immédiat du processus, sans attendre."""
        if self.process is None:
            raise InvalidTransitionError(
                "Le processus doit être lancé par start() avant kill().",
                self.argv,
            )
        _log.debug("Arrêt du processus %d", self.process.pid)
        self.process.kill()

    @staticmethod
    def exit_status(error: Optional[BaseException]) -> int:
        """Extrait le code retour natif d'une erreur d'exécution.

        Un processus terminé par un signal (code négatif côté
        subprocess) donne -1 ; le code négatif reste disponible dans
        l'attribut exit_code de l'erreur.

        Args:
            error: Erreur levée par l'exécution, ou None.

        Returns:
            0 sans erreur, le code natif pour CommandExitError,
            -1 pour un signal, 1 pour toute autre erreur.
        """
        if error is None:
            return 0
        if isinstance(error, CommandExitError):
            return error.exit_code if error.exit_code >= 0 else -1
        return 1

