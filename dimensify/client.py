import logging

import requests

from dimensify import config
from dimensify.errors import ResizeFailed
from dimensify.models import ResizeResult

logger = logging.getLogger(__name__)


class ResizeClient:
    """Talks to the /api/resize endpoint, one image per call."""

    def __init__(self, base_url=None, session=None, timeout=None):
        self.base_url = (base_url or config.API_URL).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout or config.TIMEOUT

    @property
    def url(self):
        return f'{self.base_url}/api/resize'

    def resize(self, image, settings):
        files = {'image': (image.name, image.file.data, image.file.content_type)}
        data = settings.to_form(image.ext)

        try:
            response = self.session.post(self.url, files=files, data=data, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error('Resize request for %s failed: %s', image.name, e)
            raise ResizeFailed(str(e), filename=image.name) from e

        if not response.ok:
            message = error_message(response)
            logger.warning('Server rejected %s (%s): %s', image.name, response.status_code, message)
            raise ResizeFailed(message, filename=image.name)

        content_type = response.headers.get('Content-Type', 'application/octet-stream')
        return ResizeResult(response.content, content_type)


def error_message(response):
    fallback = response.reason or f'HTTP {response.status_code}'
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get('error'):
        return body['error']
    return fallback
