import logging
import sys
from idearoulette.utils.config import config

# Libraries stay at ERROR unless they are listed below
logging.basicConfig(level=logging.ERROR, format=config.log_format, stream=sys.stdout)

NOISY_LOGGERS = ('httpcore', 'httpx', 'google_genai', 'openai', 'pymongo')


def configure_logging(level=None, log_format=None):
    """(Re)attach the single stdout handler of the `idearoulette` logger."""
    app_logger = logging.getLogger('idearoulette')
    app_logger.setLevel(level or config.log_level)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(log_format or config.log_format))
    app_logger.addHandler(handler)
    app_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return app_logger


configure_logging()

logger = logging.getLogger(__name__)
