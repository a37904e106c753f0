"""
Logging configuration for the application.
Appends `extra=` fields to every log line as key=value pairs.
"""
import logging
import sys


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends extra fields to log messages."""

    STANDARD_FIELDS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'message', 'asctime', 'taskName'
    }

    def format(self, record):
        base_message = super().format(record)

        extra_fields = {
            k: v for k, v in record.__dict__.items()
            if k not in self.STANDARD_FIELDS
        }

        if extra_fields:
            extra_str = ' | ' + ' '.join(f'{k}={v}' for k, v in sorted(extra_fields.items()))
            return base_message + extra_str

        return base_message


def configure_logging(level: str = "INFO"):
    """Install a single stdout handler on the root logger."""
    formatter = ExtraFieldsFormatter(
        fmt='[%(levelname)s] %(asctime)s %(name)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Quiet chatty libraries
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
