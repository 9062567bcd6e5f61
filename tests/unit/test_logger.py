import logging
import os
from unittest.mock import patch

from lifetunes.utils import logger as logger_module


class TestSetupLogger:

    def teardown_method(self):
        for name in ("lifetunes.test_console", "lifetunes.test_file"):
            log = logging.getLogger(name)
            for handler in list(log.handlers):
                handler.close()
                log.removeHandler(handler)

    def test_console_only(self):
        log = logger_module.setup_logger("lifetunes.test_console", log_to_file=False)

        assert len(log.handlers) == 1
        assert log.propagate is False
        # Second call returns the configured logger untouched
        assert logger_module.setup_logger("lifetunes.test_console", log_to_file=False).handlers == log.handlers

    def test_file_handler(self, tmp_path):
        with patch.object(logger_module, "LOG_DIR", str(tmp_path / "logs")):
            log = logger_module.setup_logger("lifetunes.test_file", level=logging.DEBUG)
            log.debug("hello")

        assert log.level == logging.DEBUG
        assert len(log.handlers) == 2
        path = os.path.join(str(tmp_path / "logs"), logger_module.LOG_FILE_NAME)
        with open(path, encoding="utf-8") as f:
            assert "hello" in f.read()
