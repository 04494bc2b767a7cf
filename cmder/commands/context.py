"""Contexte d'annulation transmis aux processus lancés.

Un Context porte un signal d'annulation et une échéance optionnelle.
Lorsqu'il est annulé (ou que l'échéance expire) avant la fin du
processus, celui-ci est tué et l'exécution lève l'erreur du contexte.

Example:
    Limiter une commande à 5 secondes :

        from cmder import Command, Context

        with Context.background().with_timeout(5) as ctx:
            Command("make", "test").with_context(ctx).run()
"""

import threading
from datetime import datetime, timedelta
from typing import List, Optional

from cmder.errors.exceptions import (
    ContextCanceledError,
    ContextError,
    DeadlineExceededError,
)


class Context:
    """Signal d'annulation hiérarchique avec échéance optionnelle.

    L'annulation d'un parent annule tous ses enfants. Un enfant ne
    peut pas avoir une échéance plus tardive que celle de son parent.

    Attributes:
        _done: Événement positionné à l'annulation.
        _error: Cause de l'annulation (None tant que actif).
        _deadline: Échéance absolue ou None.
        _cancelable: False pour le contexte racine (background).
    """

    def __init__(
        self,
        parent: Optional["Context"] = None,
        deadline: Optional[datetime] = None,
        cancelable: bool = True,
    ) -> None:
        """Initialise le contexte.

        Préférer Context.background() et les méthodes with_*.

        Args:
            parent: Contexte parent optionnel.
            deadline: Échéance absolue optionnelle.
            cancelable: False pour un contexte jamais annulé.
        """
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._error: Optional[ContextError] = None
        self._children: List["Context"] = []
        self._timer: Optional[threading.Timer] = None
        self._cancelable = cancelable
        self._parent = parent

        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline
        self._deadline = deadline

        if parent is not None:
            parent._add_child(self)
        if deadline is not None and not self.done():
            remaining = (deadline - datetime.now()).total_seconds()
            if remaining <= 0:
                self._cancel(DeadlineExceededError())
            else:
                self._timer = threading.Timer(
                    remaining, self._cancel, args=(DeadlineExceededError(),)
                )
                self._timer.daemon = True
                self._timer.start()

    @classmethod
    def background(cls) -> "Context":
        """Retourne un contexte racine, jamais annulé."""
        return cls(cancelable=False)

    def with_cancel(self) -> "Context":
        """Retourne un enfant annulable via cancel()."""
        return Context(parent=self)

    def with_deadline(self, deadline: datetime) -> "Context":
        """Retourne un enfant annulé automatiquement à l'échéance."""
        return Context(parent=self, deadline=deadline)

    def with_timeout(self, seconds: float) -> "Context":
        """Retourne un enfant annulé après seconds secondes."""
        return self.with_deadline(datetime.now() + timedelta(seconds=seconds))

    @property
    def deadline(self) -> Optional[datetime]:
        """Échéance absolue, ou None."""
        return self._deadline

    @property
    def cancelable(self) -> bool:
        """True si le contexte peut être annulé."""
        return self._cancelable

    def cancel(self) -> None:
        """Annule le contexte et tous ses enfants.

        Sans effet sur un contexte déjà annulé ou sur background().
        """
        if self._cancelable:
            self._cancel(ContextCanceledError())

    def done(self) -> bool:
        """Indique si le contexte est annulé."""
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Attend l'annulation au plus timeout secondes.

        Returns:
            True si le contexte est annulé.
        """
        return self._done.wait(timeout)

    def error(self) -> Optional[ContextError]:
        """Retourne la cause de l'annulation, ou None si actif."""
        with self._lock:
            return self._error

    def _add_child(self, child: "Context") -> None:
        with self._lock:
            error = self._error
            if error is None:
                self._children.append(child)
        if error is not None:
            child._cancel(error)

    def _remove_child(self, child: "Context") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def _cancel(self, error: ContextError) -> None:
        with self._lock:
            if self._error is not None:
                return
            self._error = error
            children = list(self._children)
            self._children.clear()
            timer = self._timer
            parent, self._parent = self._parent, None
        if parent is not None:
            parent._remove_child(self)
        self._done.set()
        if timer is not None:
            timer.cancel()
        for child in children:
            child._cancel(error)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()
