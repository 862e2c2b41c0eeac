import pytest
import logging

import logger_setup


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    urllib3_level = logging.getLogger("urllib3").level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
    logging.getLogger("urllib3").setLevel(urllib3_level)


def test_setup_logging_writes_to_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "archiver.log"

    logger_setup.setup_logging(str(log_file), "WARNING")
    logging.warning("something to keep")
    logging.info("too chatty")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 2
    text = log_file.read_text(encoding='utf-8')
    assert "WARNING - something to keep" in text
    assert "too chatty" not in text
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_setup_logging_unwritable_log_exits(tmp_path, restore_root_logger, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(SystemExit) as e:
        logger_setup.setup_logging(str(blocker / "archiver.log"))

    assert e.value.code == 1
    assert "Could not set up file logging" in capsys.readouterr().err
