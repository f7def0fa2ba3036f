"""Tests for the YAML settings singleton and the logger setup."""

import logging

import pytest

from config import CONFIG_ENV_VAR, ConfigurationManager, get_config
from packlist.utils.logger import ColoredFormatter, get_logger, setup_logger, setup_logger_from_config


class TestConfigurationManager:
    def test_singleton(self):
        assert ConfigurationManager() is ConfigurationManager()

    def test_shipped_defaults(self):
        assert get_config("ocr.confidence_threshold") == 70
        assert get_config("suppliers.vendor_codes.wuu_jing") == "V005006"
        assert get_config("suppliers.bounds.yuen_chang.length") == [96, 180]
        assert get_config("warehouse.default") == "LA"

    def test_missing_key_default(self):
        assert get_config("ocr.nothing.here", 5) == 5
        assert get_config("ocr.language.deeper") is None

    def test_paths_resolved(self):
        output_dir = get_config("paths.output_dir")
        assert output_dir.endswith("output")
        assert output_dir != "output"

    def test_set_and_reload(self):
        config = ConfigurationManager()
        config.set("ocr.confidence_threshold", 50)
        config.set("new.section.value", True)
        assert get_config("ocr.confidence_threshold") == 50
        assert get_config("new.section.value") is True

        config.reload()
        assert get_config("ocr.confidence_threshold") == 70
        assert get_config("new.section.value") is None

    def test_get_all_is_a_copy(self):
        snapshot = ConfigurationManager().get_all()
        snapshot["ocr"]["confidence_threshold"] = 1
        assert get_config("ocr.confidence_threshold") == 70

    def test_env_var_path(self, tmp_path, monkeypatch):
        settings = tmp_path / "custom.yaml"
        settings.write_text("ocr:\n  confidence_threshold: 55\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(settings))
        ConfigurationManager.reset()

        assert get_config("ocr.confidence_threshold") == 55
        assert get_config("warehouse.default", "LA") == "LA"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(str(tmp_path / "absent.yaml"))

    def test_empty_file(self, tmp_path):
        settings = tmp_path / "empty.yaml"
        settings.write_text("", encoding="utf-8")
        assert ConfigurationManager(str(settings)).get_all() == {}


class TestLogger:
    def test_namespaced_names(self):
        assert get_logger("packlist.extraction").name == "packlist.extraction"
        assert get_logger("main").name == "packlist.main"

    def test_setup_logger(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger(level="DEBUG", log_file=str(log_file), colorize=False)

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 2
        get_logger("packlist.test").info("written to file")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_setup_twice_does_not_duplicate_handlers(self):
        setup_logger()
        assert len(setup_logger().handlers) == 1

    def test_from_config(self):
        ConfigurationManager().set("logging.level", "WARNING")
        logger = setup_logger_from_config()

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, ColoredFormatter)

    def test_colored_formatter(self):
        record = logging.LogRecord("packlist", logging.ERROR, __file__, 1, "boom", None, None)
        text = ColoredFormatter("%(message)s").format(record)
        assert text.startswith(ColoredFormatter.COLORS[logging.ERROR])
        assert "boom" in text
        assert text.endswith(ColoredFormatter.RESET)
