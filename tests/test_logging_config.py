import json
import logging

import pytest
from flask import g

from langfu_app.core.logging_config import LOGGER_NAME, setup_logging


@pytest.fixture
def clean_logger():
    yield logging.getLogger(LOGGER_NAME)
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogging:

    def test_console_and_rotating_file_handlers(self, tmp_path, clean_logger):
        logger = setup_logging(log_level='DEBUG', log_dir=str(tmp_path / 'logs'))

        assert logger is clean_logger
        assert logger.level == logging.DEBUG
        kinds = sorted(type(handler).__name__ for handler in logger.handlers)
        assert kinds == ['RotatingFileHandler', 'StreamHandler']

        logger.warning('vocabulary imported')
        for handler in logger.handlers:
            handler.flush()
        assert 'vocabulary imported' in (tmp_path / 'logs' / 'langfu.log').read_text(encoding='utf-8')

    def test_json_format(self, tmp_path, clean_logger):
        logger = setup_logging(log_dir=str(tmp_path), json_format=True)

        logger.info('Wort "Haus" gespeichert')
        for handler in logger.handlers:
            handler.flush()
        last_line = (tmp_path / 'langfu.log').read_text(encoding='utf-8').splitlines()[-1]
        entry = json.loads(last_line)
        assert entry['message'] == 'Wort "Haus" gespeichert'
        assert entry['path'] == '-'
        assert entry['level'] == 'INFO'

    def test_records_carry_request_path_and_user(self, app, tmp_path, clean_logger, user):
        logger = setup_logging(log_dir=str(tmp_path))

        with app.test_request_context('/api/progress'):
            g.current_user = user
            logger.warning('progress read')
        for handler in logger.handlers:
            handler.flush()

        text = (tmp_path / 'langfu.log').read_text(encoding='utf-8')
        assert f'/api/progress user={user.user_id}: progress read' in text

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path, clean_logger):
        setup_logging(log_dir=str(tmp_path))
        logger = setup_logging(log_dir=str(tmp_path))

        assert len(logger.handlers) == 2

    def test_unknown_level_defaults_to_info(self, tmp_path, clean_logger):
        assert setup_logging(log_level='chatty', log_dir=str(tmp_path)).level == logging.INFO
