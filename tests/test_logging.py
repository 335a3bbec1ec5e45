"""
Tests for logging setup.
"""

import logging

import pytest

from kubeplan.core.observability.logging_config import (
    ENV_FILE,
    ENV_LEVEL,
    level_from_flags,
    setup_logging,
)


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLevelFromFlags:
    def test_flags_win(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "ERROR")
        assert level_from_flags(debug=True) == "DEBUG"
        assert level_from_flags(verbose=True) == "INFO"

    def test_quiet(self):
        assert level_from_flags(quiet=True) == "ERROR"

    def test_env_then_default(self, monkeypatch):
        monkeypatch.delenv(ENV_LEVEL, raising=False)
        assert level_from_flags() == "WARNING"
        monkeypatch.setenv(ENV_LEVEL, "INFO")
        assert level_from_flags() == "INFO"


class TestSetupLogging:
    def test_console_level(self, restore_root, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging("INFO")
        assert restore_root.level == logging.INFO
        assert len(restore_root.handlers) == 1

    def test_unknown_level_falls_back(self, restore_root, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging("LOUD")
        assert restore_root.level == logging.WARNING

    def test_log_file(self, restore_root, tmp_path):
        log_file = tmp_path / "kubeplan.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert restore_root.level == logging.DEBUG

        logging.getLogger("kubeplan.test").debug("kubectl apply -f -")
        for handler in restore_root.handlers:
            handler.flush()
        assert "kubectl apply -f -" in log_file.read_text()

    def test_quiets_third_party(self, restore_root, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging("INFO")
        assert logging.getLogger("urllib3").level == logging.WARNING
