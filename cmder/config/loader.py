"""Chargement des paramètres cmder depuis un fichier TOML ou JSON."""

import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from cmder.config.settings import CmderSettings
from cmder.errors.exceptions import ConfigurationError

# Section optionnelle regroupant les paramètres dans un fichier partagé
SECTION = "cmder"


def load_settings(config_path: Union[str, Path]) -> CmderSettings:
    """Charge et valide un fichier de configuration TOML ou JSON.

    Le format est détecté par l'extension. Les paramètres peuvent être
    à la racine du fichier ou dans une section [cmder].

    Args:
        config_path: Chemin vers le fichier de configuration.

    Returns:
        Paramètres validés.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas.
        ConfigurationError: Si l'extension n'est pas supportée ou si
            le contenu est invalide.
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(
            f"Fichier de configuration non trouvé: {path}"
        )

    suffix = path.suffix.lower()

    if suffix == ".toml":
        with open(path, "rb") as f:
            raw_config: Dict[str, Any] = tomllib.load(f)
    elif suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            raw_config = json.load(f)
    else:
        raise ConfigurationError(
            f"Extension non supportée: {suffix}. "
            "Utilisez .toml ou .json"
        )

    if isinstance(raw_config.get(SECTION), dict):
        raw_config = raw_config[SECTION]

    try:
        return CmderSettings.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration invalide dans {path}: {e}"
        ) from e
