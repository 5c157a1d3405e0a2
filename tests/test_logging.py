from loguru import logger

from dextract.config import LoggingConfig
from dextract.utils.logging import get_logger, setup_logging


def test_file_sinks(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging(LoggingConfig(level="DEBUG", log_dir=str(log_dir)))
    try:
        get_logger("tests").error("something broke")
        logger.complete()
        assert "tests:test_file_sinks" in (log_dir / "app.log").read_text()
        assert "something broke" in (log_dir / "error.log").read_text()
    finally:
        setup_logging(LoggingConfig())


def test_bound_module_name():
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        get_logger("dextract.services.tokens").info("hello")
    finally:
        logger.remove(sink_id)
    assert records[-1]["extra"]["module"] == "dextract.services.tokens"
