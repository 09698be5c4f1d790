import logging
import sys
from pythonjsonlogger import jsonlogger

LOG_FORMAT = '%(timestamp)s %(level)s %(name)s %(message)s'


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records with an upper-case level and the emitting line; `extra` fields pass through as keys."""

    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = record.created
        log_record['level'] = record.levelname
        log_record['lineno'] = record.lineno


def setup_logging(log_level_str: str = "INFO"):
    """
    Sends JSON logs to stderr so command output on stdout stays parseable.
    Later calls only change the level.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level_str.upper(), logging.INFO))

    if not any(isinstance(h.formatter, CustomJsonFormatter) for h in root_logger.handlers):
        log_handler = logging.StreamHandler(sys.stderr)
        log_handler.setFormatter(CustomJsonFormatter(LOG_FORMAT))
        root_logger.addHandler(log_handler)
