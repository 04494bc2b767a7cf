"""Tests pour le module config."""

import json
import os

import pytest
from pydantic import ValidationError

from cmder.config import (
    CmderConfig,
    CmderSettings,
    env_bool,
    get_config,
    get_logger,
    load_settings,
    set_dry_run,
    set_logger,
    settings_from_env,
)
from cmder.errors import ConfigurationError
from cmder.logging import Color, ConsoleLogger, MemoryLogger


class TestCmderSettings:
    """Tests pour CmderSettings."""

    def test_valeurs_par_defaut(self):
        settings = CmderSettings()
        assert settings.dry_run is False
        assert settings.color_enabled is False
        assert settings.key == "run"
        assert settings.cols == 5
        assert settings.color == Color.TEAL
        assert settings.dry_run_color == Color.YELLOW
        assert settings.dry_run_cols == 10
        assert settings.dry_run_key == "dry"
        assert settings.time_format is None

    def test_cols_positif(self):
        """Une largeur de colonne nulle est refusée."""
        with pytest.raises(ValidationError):
            CmderSettings(cols=0)

    def test_couleur_invalide(self):
        with pytest.raises(ValidationError):
            CmderSettings(color="rouge")

    def test_couleur_vide_acceptee(self):
        """Une couleur vide désactive la couleur de la clé."""
        assert CmderSettings(color="").color == ""

    def test_champ_inconnu(self):
        with pytest.raises(ValidationError):
            CmderSettings(unknown=True)

    def test_validation_a_l_affectation(self):
        settings = CmderSettings()
        with pytest.raises(ValidationError):
            settings.dry_run_cols = -1


class TestEnvBool:
    """Tests pour env_bool."""

    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_valeurs_vraies(self, monkeypatch, value):
        monkeypatch.setenv("CMDER_TEST_FLAG", value)
        assert env_bool("CMDER_TEST_FLAG") is True

    @pytest.mark.parametrize("value", ["", "0", "yes", "on", "false", "tRuE"])
    def test_valeurs_fausses(self, monkeypatch, value):
        monkeypatch.setenv("CMDER_TEST_FLAG", value)
        assert env_bool("CMDER_TEST_FLAG") is False

    def test_variable_absente(self, monkeypatch):
        monkeypatch.delenv("CMDER_TEST_FLAG", raising=False)
        assert env_bool("CMDER_TEST_FLAG") is False


class TestSettingsFromEnv:
    """Tests pour settings_from_env."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        """Supprime les variables lues par settings_from_env."""
        for name in (
            "MAGEFILE_ENABLE_COLOR", "CMDER_ENABLE_COLOR", "CMDER_DRY_RUN"
        ):
            monkeypatch.delenv(name, raising=False)

    def test_sans_variable(self):
        settings = settings_from_env()
        assert settings.color_enabled is False
        assert settings.dry_run is False

    def test_couleur_cmder(self, monkeypatch):
        monkeypatch.setenv("CMDER_ENABLE_COLOR", "true")
        assert settings_from_env().color_enabled is True

    def test_couleur_magefile(self, monkeypatch):
        """La variable historique MAGEFILE_ENABLE_COLOR est reconnue."""
        monkeypatch.setenv("MAGEFILE_ENABLE_COLOR", "1")
        assert settings_from_env().color_enabled is True

    def test_dry_run(self, monkeypatch):
        monkeypatch.setenv("CMDER_DRY_RUN", "T")
        assert settings_from_env().dry_run is True

    def test_fichier_dotenv(self, tmp_path):
        """Les variables d'un fichier .env sont prises en compte."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("CMDER_DRY_RUN=true\n")
        try:
            assert settings_from_env(dotenv_file).dry_run is True
        finally:
            os.environ.pop("CMDER_DRY_RUN", None)

    def test_environnement_prioritaire_sur_dotenv(
        self, monkeypatch, tmp_path
    ):
        """Une variable déjà définie n'est pas écrasée par le .env."""
        monkeypatch.setenv("CMDER_DRY_RUN", "0")
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("CMDER_DRY_RUN=true\n")
        assert settings_from_env(dotenv_file).dry_run is False


class TestLoadSettings:
    """Tests pour load_settings."""

    def test_toml(self, tmp_path):
        config_file = tmp_path / "cmder.toml"
        config_file.write_text('dry_run = true\ncols = 8\nkey = "exec"\n')
        settings = load_settings(config_file)
        assert settings.dry_run is True
        assert settings.cols == 8
        assert settings.key == "exec"

    def test_toml_section(self, tmp_path):
        """Les paramètres peuvent être dans une section [cmder]."""
        config_file = tmp_path / "project.toml"
        config_file.write_text(
            '[other]\nname = "x"\n\n[cmder]\ncolor_enabled = true\n'
        )
        assert load_settings(config_file).color_enabled is True

    def test_json(self, tmp_path):
        config_file = tmp_path / "cmder.json"
        config_file.write_text(json.dumps({"run_key": "exec"}))
        assert load_settings(str(config_file)).run_key == "exec"

    def test_fichier_absent(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.toml")

    def test_extension_non_supportee(self, tmp_path):
        config_file = tmp_path / "cmder.yaml"
        config_file.write_text("dry_run: true\n")
        with pytest.raises(ConfigurationError):
            load_settings(config_file)

    def test_contenu_invalide(self, tmp_path):
        """Une valeur invalide lève ConfigurationError."""
        config_file = tmp_path / "cmder.toml"
        config_file.write_text("cols = 0\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file)
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestCmderConfig:
    """Tests pour CmderConfig."""

    def test_parametres_par_defaut(self):
        config = CmderConfig()
        assert config.settings == CmderSettings()
        assert config.dry_run is False

    def test_update(self):
        config = CmderConfig()
        settings = config.update(cols=12, key="exec")
        assert settings.cols == 12
        assert config.settings.key == "exec"

    def test_update_invalide(self):
        """Une mise à jour invalide laisse les paramètres inchangés."""
        config = CmderConfig()
        with pytest.raises(ValidationError):
            config.update(cols=0)
        assert config.settings.cols == 5

    def test_set_dry_run(self):
        config = CmderConfig()
        config.set_dry_run()
        assert config.dry_run is True
        config.set_dry_run(False)
        assert config.dry_run is False

    def test_logger_console_par_defaut(self):
        """Sans logger injecté, un ConsoleLogger est créé à la demande."""
        config = CmderConfig(CmderSettings(key="exec"))
        logger = config.logger
        assert isinstance(logger, ConsoleLogger)
        assert logger.key == "exec"
        assert config.logger is logger

    def test_set_logger(self):
        config = CmderConfig()
        logger = MemoryLogger()
        config.set_logger(logger)
        assert config.logger is logger

    def test_override_restaure(self):
        """override() restaure paramètres et logger en sortie."""
        original = MemoryLogger()
        config = CmderConfig(logger=original)
        temporary = MemoryLogger()
        with config.override(logger=temporary, dry_run=True) as active:
            assert active is config
            assert config.dry_run is True
            assert config.logger is temporary
        assert config.dry_run is False
        assert config.logger is original

    def test_override_restaure_apres_exception(self):
        config = CmderConfig()
        with pytest.raises(RuntimeError):
            with config.override(dry_run=True):
                raise RuntimeError("boom")
        assert config.dry_run is False


class TestConfigGlobale:
    """Tests des fonctions du contexte global."""

    def test_get_config_unique(self):
        assert get_config() is get_config()

    def test_set_dry_run(self):
        saved = get_config().settings
        try:
            set_dry_run()
            assert get_config().dry_run is True
            set_dry_run(False)
            assert get_config().dry_run is False
        finally:
            get_config().update(**saved.model_dump())

    def test_set_logger(self):
        logger = MemoryLogger()
        with get_config().override():
            set_logger(logger)
            assert get_logger() is logger
        assert get_logger() is not logger
