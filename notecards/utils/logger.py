import sys
import logging
import pathlib
import contextvars
from logging.handlers import RotatingFileHandler
from pythonjsonlogger import jsonlogger

from notecards import config

_generation_ctx_var = contextvars.ContextVar('generation_ctx', default={})


def set_generation_context(generation_id: str, note_id: str = None):
    return _generation_ctx_var.set({'generation_id': generation_id, 'note_id': note_id})


def reset_generation_context(token):
    _generation_ctx_var.reset(token)


def get_generation_context():
    return _generation_ctx_var.get()


def _inject_generation_context(record):
    ctx = get_generation_context()
    record.generation_id = ctx.get('generation_id')
    record.note_id = ctx.get('note_id')
    return True


def get_logger(name: str = 'notecards'):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(config.LOG_LEVEL.upper())

    if config.LOG_FORMAT == 'json':
        fmt = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s %(generation_id)s %(note_id)s')
    else:
        fmt = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')

    f = logging.Filter()
    f.filter = _inject_generation_context

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(fmt)
    ch.addFilter(f)
    logger.addHandler(ch)

    # Rotating file handlers, only when a log directory is configured
    if config.LOG_FILE_PATH:
        log_path = pathlib.Path(config.LOG_FILE_PATH)
        if not log_path.is_absolute():
            log_path = pathlib.Path.cwd() / log_path
        log_path.mkdir(parents=True, exist_ok=True)

        combined = RotatingFileHandler(log_path / 'combined.log', maxBytes=config.LOG_MAX_SIZE, backupCount=config.LOG_MAX_FILES)
        combined.setFormatter(fmt)
        combined.addFilter(f)
        logger.addHandler(combined)

        errors = RotatingFileHandler(log_path / 'error.log', maxBytes=config.LOG_MAX_SIZE, backupCount=config.LOG_MAX_FILES)
        errors.setLevel(logging.ERROR)
        errors.setFormatter(fmt)
        errors.addFilter(f)
        logger.addHandler(errors)

    logging.captureWarnings(True)

    return logger


def log_error(error: Exception, context: dict = None):
    logger = get_logger()
    logger.error('error', exc_info=error, extra=context or {})


def log_analyzer_selected(analyzer: str, reason: str):
    logger = get_logger()
    logger.info('analyzer_selected', extra={'analyzer': analyzer, 'reason': reason})


def log_analyzer_fallback(failed_analyzer: str, fallback_analyzer: str, error: Exception):
    logger = get_logger()
    logger.warning('analyzer_fallback', extra={
        'failed_analyzer': failed_analyzer,
        'fallback_analyzer': fallback_analyzer,
        'error': str(error),
    })


def log_flashcard_generation(analyzer: str, flashcard_count: int, keyphrase_count: int, source_counts: dict, duration_ms: float):
    logger = get_logger()
    logger.info('flashcard_generation', extra={
        'analyzer': analyzer,
        'flashcard_count': flashcard_count,
        'keyphrase_count': keyphrase_count,
        'source_counts': source_counts,
        'duration_ms': duration_ms,
    })
