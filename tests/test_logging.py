"""Tests pour le module logging."""

import io
import re

import pytest

from cmder.config import CmderSettings, get_config
from cmder.logging import (
    Color,
    ConsoleLogger,
    FileLogger,
    Logger,
    MemoryLogger,
    NullLogger,
    paint,
)


def make_console(**changes):
    """Crée un logger console écrivant dans un StringIO."""
    stream = io.StringIO()
    logger = ConsoleLogger(settings=CmderSettings(**changes), stream=stream)
    return logger, stream


class TestPaint:
    """Tests pour paint()."""

    def test_active(self):
        assert paint(Color.RED, True) == "\033[1;31m"

    def test_desactive(self):
        """Désactivée, la couleur devient une chaîne vide."""
        assert paint(Color.RED, False) == ""


class TestConsoleLogger:
    """Tests pour ConsoleLogger."""

    def test_implemente_logger(self):
        logger, _ = make_console()
        assert isinstance(logger, Logger)

    def test_log_sans_couleur(self):
        """La clé est justifiée à droite sur la largeur de colonne."""
        logger, stream = make_console()
        logger.without_timestamp().log("a", "b")
        assert stream.getvalue() == "  run : a b\n"

    def test_log_valeurs_non_textuelles(self):
        logger, stream = make_console()
        logger.without_timestamp().log("code", 3)
        assert stream.getvalue() == "  run : code 3\n"

    def test_logf(self):
        """logf() interpole les valeurs dans le format."""
        logger, stream = make_console()
        logger.without_timestamp().logf("%s-%d", "x", 1)
        assert stream.getvalue() == "  run : x-1\n"

    def test_logf_sans_valeur(self):
        """Sans valeur, le format est écrit tel quel."""
        logger, stream = make_console()
        logger.without_timestamp().logf("100%")
        assert stream.getvalue() == "  run : 100%\n"

    def test_cle_plus_longue_que_colonne(self):
        """Une clé plus longue que la colonne n'est pas tronquée."""
        logger, stream = make_console()
        logger.without_timestamp().with_key("output").log("x")
        assert stream.getvalue() == "output : x\n"

    def test_with_cols(self):
        logger, stream = make_console()
        logger.without_timestamp().with_cols(8).log("x")
        assert stream.getvalue() == "     run : x\n"

    def test_avec_couleur(self):
        """Avec la couleur, clé et séparateur sont colorés."""
        logger, stream = make_console(color_enabled=True)
        logger.without_timestamp().log("x")
        assert stream.getvalue() == (
            f"{Color.TEAL}  run{Color.DARK_GREY} : {Color.CLEAR}x\n"
        )

    def test_with_color(self):
        logger, stream = make_console(color_enabled=True)
        logger.without_timestamp().with_color(Color.RED).log("x")
        assert stream.getvalue().startswith(f"{Color.RED}  run")

    def test_horodatage_rfc3339(self):
        """Par défaut, l'horodatage est ajouté en fin de ligne."""
        logger, stream = make_console()
        logger.log("x")
        line = stream.getvalue()
        assert line.startswith("  run : x : ")
        assert re.search(
            r" : \d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}\n$",
            line,
        )

    def test_horodatage_format_personnalise(self):
        logger, stream = make_console(time_format="%Y")
        logger.log("x")
        assert re.fullmatch(r"  run : x : \d{4}\n", stream.getvalue())

    def test_horodatage_desactive_par_parametre(self):
        logger, stream = make_console(timestamp_enabled=False)
        logger.log("x")
        assert stream.getvalue() == "  run : x\n"

    def test_action_restaure(self):
        """action() change la clé puis la restaure."""
        logger, stream = make_console()
        logger.without_timestamp()
        with logger.action("dry run", Color.YELLOW, 10):
            assert logger.key == "dry run"
            assert logger.cols == 10
            logger.log("x")
        assert logger.key == "run"
        assert logger.cols == 5
        assert logger.color == Color.TEAL
        assert stream.getvalue() == "   dry run : x\n"

    def test_action_restaure_apres_exception(self):
        logger, _ = make_console()
        with pytest.raises(RuntimeError):
            with logger.action("kill"):
                raise RuntimeError("boom")
        assert logger.key == "run"

    def test_parametres_globaux_par_defaut(self):
        """Sans paramètres, le logger reprend les paramètres globaux."""
        with get_config().override(key="glob", cols=7):
            logger = ConsoleLogger()
        assert logger.key == "glob"
        assert logger.cols == 7

    def test_sortie_standard_par_defaut(self, capsys):
        """Sans flux, le logger écrit sur la sortie standard."""
        logger = ConsoleLogger(settings=CmderSettings())
        logger.without_timestamp().log("x")
        assert capsys.readouterr().out == "  run : x\n"


class TestFileLogger:
    """Tests pour FileLogger."""

    def test_ecrit_dans_fichier(self, tmp_path):
        log_file = tmp_path / "cmder.log"
        logger = FileLogger(str(log_file))
        logger.log("[echo foo]")
        content = log_file.read_text(encoding="utf-8")
        assert "run : [echo foo]" in content

    def test_cree_le_repertoire(self, tmp_path):
        """Le répertoire du fichier est créé si nécessaire."""
        log_file = tmp_path / "logs" / "sub" / "cmder.log"
        FileLogger(str(log_file)).logf("%s", "x")
        assert log_file.exists()

    def test_action_change_la_cle(self, tmp_path):
        log_file = tmp_path / "action.log"
        logger = FileLogger(str(log_file))
        with logger.action("kill"):
            logger.log("x")
        logger.log("y")
        content = log_file.read_text(encoding="utf-8")
        assert "kill : x" in content
        assert "run : y" in content


class TestMemoryLogger:
    """Tests pour MemoryLogger et NullLogger."""

    def test_capture(self):
        logger = MemoryLogger()
        with logger.action("start"):
            logger.log("a", 1)
        logger.logf("%d%%", 50)
        assert logger.records == [("start", "a 1"), ("", "50%")]
        assert logger.keys == ["start", ""]
        assert logger.messages == ["a 1", "50%"]

    def test_clear(self):
        logger = MemoryLogger()
        logger.log("a")
        logger.clear()
        assert logger.records == []

    def test_null_logger(self):
        """NullLogger accepte tous les appels sans effet."""
        logger = NullLogger()
        with logger.action("run") as active:
            active.log("x")
            active.logf("%s", "y")
