"""Paramètres globaux de cmder validés par Pydantic.

CmderSettings regroupe toutes les valeurs « ambiantes » partagées par
les commandes : mode dry-run global, clés d'action affichées par le
logger, couleurs, largeur de colonne et horodatage.

Les valeurs par défaut sont lues au démarrage depuis l'environnement
via settings_from_env() :
    - CMDER_ENABLE_COLOR ou MAGEFILE_ENABLE_COLOR : active la couleur
    - CMDER_DRY_RUN : active le dry-run global
"""

import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from cmder.logging.colors import Color

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}

COLOR_ENV_VARS = ("MAGEFILE_ENABLE_COLOR", "CMDER_ENABLE_COLOR")
DRY_RUN_ENV_VAR = "CMDER_DRY_RUN"


class CmderSettings(BaseModel):
    """Configuration ambiante des commandes et du logger console.

    Attributes:
        dry_run: Dry-run global (combiné en OU avec celui de l'instance).
        color_enabled: Active les codes ANSI dans les logs.
        key: Clé d'action par défaut d'un logger neuf.
        cols: Largeur (justifiée à droite) de la colonne de clé.
        color: Couleur de la clé.
        dry_run_color: Couleur de la clé en mode dry-run.
        dry_run_cols: Largeur de la colonne de clé en mode dry-run.
        dry_run_key: Préfixe de la clé en mode dry-run ("dry").
        run_key: Clé de l'action run.
        start_key: Clé de l'action start.
        wait_key: Clé de l'action wait.
        kill_key: Clé de l'action kill.
        output_key: Clé de l'action output.
        time_format: Format strftime de l'horodatage ; None pour
            RFC 3339.
        timestamp_enabled: Ajoute l'horodatage en fin de ligne.
    """

    model_config = {"extra": "forbid", "validate_assignment": True}

    dry_run: bool = False
    color_enabled: bool = False
    key: str = "run"
    cols: int = Field(default=5, ge=1)
    color: str = Color.TEAL.value
    dry_run_color: str = Color.YELLOW.value
    dry_run_cols: int = Field(default=10, ge=1)
    dry_run_key: str = "dry"
    run_key: str = "run"
    start_key: str = "start"
    wait_key: str = "wait"
    kill_key: str = "kill"
    output_key: str = "output"
    time_format: Optional[str] = None
    timestamp_enabled: bool = True

    @field_validator("color", "dry_run_color")
    @classmethod
    def must_be_ansi(cls, v: str) -> str:
        if v and not (v.startswith("\033[") and v.endswith("m")):
            raise ValueError(
                f"Code couleur ANSI invalide : {v!r}"
            )
        return v


def env_bool(name: str) -> bool:
    """Interprète une variable d'environnement comme un booléen.

    Accepte 1, t, T, TRUE, true, True.
    Toute autre valeur, ou l'absence de la variable, vaut False.

    Args:
        name: Nom de la variable d'environnement.

    Returns:
        True si la variable vaut une des formes vraies.
    """
    return os.environ.get(name, "") in _TRUE_VALUES


def settings_from_env(
    dotenv_path: Optional[Union[str, Path]] = None,
) -> CmderSettings:
    """Construit les paramètres depuis l'environnement du processus.

    Si dotenv_path est fourni, le fichier .env est chargé avant la
    lecture (override=False : les variables shell restent prioritaires).

    Args:
        dotenv_path: Chemin optionnel vers un fichier .env.

    Returns:
        Paramètres initialisés.
    """
    if dotenv_path is not None:
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=Path(dotenv_path), override=False)

    return CmderSettings(
        color_enabled=any(env_bool(name) for name in COLOR_ENV_VARS),
        dry_run=env_bool(DRY_RUN_ENV_VAR),
    )
