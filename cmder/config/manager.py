"""Contexte de configuration partagé par toutes les commandes.

CmderConfig remplace les variables globales : il détient les
paramètres actifs et le logger par défaut, protégés par un verrou.
Une instance unique est créée à l'import à partir de l'environnement ;
chaque Command peut en recevoir une autre par injection.

Example:
    Activer le dry-run pour tout le programme :

        import cmder

        cmder.set_dry_run()
        cmder.new("rm", "-rf", "/tmp/build").run()  # loggé, non exécuté

    Isoler un bloc de code :

        with cmder.get_config().override(dry_run=True):
            ...
"""

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from cmder.config.settings import CmderSettings, settings_from_env
from cmder.logging.base import Logger


class CmderConfig:
    """Paramètres ambiants et logger par défaut, localement surchargeables.

    Attributes:
        _settings: Paramètres actifs.
        _logger: Logger par défaut (créé à la demande).
        _lock: Verrou protégeant les lectures et écritures.
    """

    def __init__(
        self,
        settings: Optional[CmderSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise le contexte.

        Args:
            settings: Paramètres initiaux (défaut: CmderSettings()).
            logger: Logger par défaut optionnel.
        """
        self._settings = settings or CmderSettings()
        self._logger = logger
        self._lock = threading.RLock()

    @property
    def settings(self) -> CmderSettings:
        """Retourne les paramètres actifs."""
        with self._lock:
            return self._settings

    @property
    def dry_run(self) -> bool:
        """Indique si le dry-run global est actif."""
        return self.settings.dry_run

    def update(self, **changes: Any) -> CmderSettings:
        """Remplace les paramètres par une copie modifiée et validée.

        Args:
            **changes: Champs de CmderSettings à modifier.

        Returns:
            Les nouveaux paramètres.

        Raises:
            pydantic.ValidationError: Si une valeur est invalide.
        """
        with self._lock:
            data = self._settings.model_dump()
            data.update(changes)
            self._settings = CmderSettings.model_validate(data)
            return self._settings

    def set_dry_run(self, enabled: bool = True) -> None:
        """Active ou désactive le dry-run global."""
        self.update(dry_run=enabled)

    @property
    def logger(self) -> Logger:
        """Retourne le logger par défaut, créé au premier appel."""
        with self._lock:
            if self._logger is None:
                from cmder.logging.console_logger import ConsoleLogger

                self._logger = ConsoleLogger(settings=self._settings)
            return self._logger

    def set_logger(self, logger: Optional[Logger]) -> None:
        """Remplace le logger par défaut (None : console à la demande)."""
        with self._lock:
            self._logger = logger

    @contextmanager
    def override(
        self,
        logger: Optional[Logger] = None,
        **changes: Any,
    ) -> Iterator["CmderConfig"]:
        """Surcharge temporairement paramètres et logger.

        Les valeurs d'origine sont restaurées en sortie de bloc, même
        en cas d'exception.

        Args:
            logger: Logger par défaut temporaire.
            **changes: Champs de CmderSettings à modifier.

        Yields:
            Le contexte lui-même.
        """
        with self._lock:
            saved_settings = self._settings
            saved_logger = self._logger
        try:
            if changes:
                self.update(**changes)
            if logger is not None:
                self.set_logger(logger)
            yield self
        finally:
            with self._lock:
                self._settings = saved_settings
                self._logger = saved_logger


_default_config = CmderConfig(settings_from_env())


def get_config() -> CmderConfig:
    """Retourne le contexte de configuration du processus."""
    return _default_config


def set_dry_run(enabled: bool = True) -> None:
    """Active le dry-run pour toutes les commandes du processus."""
    _default_config.set_dry_run(enabled)


def get_logger() -> Logger:
    """Retourne le logger par défaut du processus."""
    return _default_config.logger


def set_logger(logger: Optional[Logger]) -> None:
    """Remplace le logger par défaut du processus."""
    _default_config.set_logger(logger)
