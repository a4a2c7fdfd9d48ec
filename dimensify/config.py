import logging
import os
import sys

HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', 5000))
DEBUG = os.getenv('DEBUG', 'false').lower() in ('1', 'true', 'yes')
MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

API_URL = os.getenv('DIMENSIFY_API_URL', 'http://localhost:5000')
TIMEOUT = float(os.getenv('DIMENSIFY_TIMEOUT', 30))

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def load():
    return {
        'HOST': HOST,
        'PORT': PORT,
        'DEBUG': DEBUG,
        'MAX_CONTENT_LENGTH': MAX_CONTENT_LENGTH,
        'LOG_LEVEL': LOG_LEVEL,
    }


def configure_logging(level=LOG_LEVEL):
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    # Pillow logs every plugin it probes at DEBUG
    logging.getLogger('PIL').setLevel(logging.WARNING)
