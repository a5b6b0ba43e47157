import logging

import colorlog
import pytest

from shotify.utils.logging import setup_logger, setup_logging


@pytest.fixture
def root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_writes_console_and_file(root_handlers, tmp_path):
    log_file = setup_logging(logging.DEBUG, log_dir=tmp_path / 'logs')

    assert log_file.parent == tmp_path / 'logs'
    assert log_file.name.startswith('shotify_')
    assert root_handlers.level == logging.DEBUG
    assert len(root_handlers.handlers) == 2
    assert any(isinstance(h, logging.FileHandler) for h in root_handlers.handlers)
    assert any(isinstance(h.formatter, colorlog.ColoredFormatter) for h in root_handlers.handlers)

    logging.getLogger('shotify.test').info('season saved')
    for handler in root_handlers.handlers:
        handler.flush()
    assert 'season saved' in log_file.read_text()


def test_game_logger_carries_video_id():
    adapter = setup_logger('vid42')
    assert adapter.extra == {'video_id': 'vid42'}
    assert adapter.logger.name == 'shotify.game.vid42'
