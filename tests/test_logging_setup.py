# tests/test_logging_setup.py
"""Tests for praxpdf.config.logging_setup"""

import logging

import pytest

from praxpdf.config.logging_setup import LOG_FILE_NAME, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging()"""

    def test_console_and_file(self, tmp_path, restore_root_logger):
        console, file_handler = setup_logging(tmp_path / "logs")

        root = logging.getLogger()
        assert root.handlers == [console, file_handler]
        assert console.level == logging.INFO
        assert file_handler.level == logging.DEBUG

        logging.getLogger("praxpdf.test").debug("written to file")
        file_handler.flush()
        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "written to file" in content

    def test_console_only_when_dir_unusable(self, tmp_path, restore_root_logger, capsys):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")

        console, file_handler = setup_logging(blocker)

        assert file_handler is None
        assert logging.getLogger().handlers == [console]
        assert "Failed to create log file" in capsys.readouterr().err

    def test_pypdf_is_quiet(self, tmp_path, restore_root_logger):
        setup_logging(tmp_path)
        assert logging.getLogger("pypdf").level == logging.WARNING
