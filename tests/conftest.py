import io

import pytest
from PIL import Image

from dimensify.app import create_app
from dimensify.models import LocalFile


def make_image(format='PNG', size=(40, 20), mode='RGB', color=(200, 30, 30)):
    """Encode a solid image in memory and return the bytes."""
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format)
    return buffer.getvalue()


def make_transparent_png(size=(40, 20)):
    """Left half opaque red, right half fully transparent."""
    image = Image.new('RGBA', size, (0, 0, 0, 0))
    image.paste((255, 0, 0, 255), (0, 0, size[0] // 2, size[1]))
    buffer = io.BytesIO()
    image.save(buffer, 'PNG')
    return buffer.getvalue()


def open_image(data):
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.fixture
def app():
    return create_app({'TESTING': True, 'LOG_LEVEL': 'WARNING'})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def png_bytes():
    return make_image('PNG')


@pytest.fixture
def resize_form(png_bytes):
    """Build a valid multipart form; keyword arguments override fields, None drops one."""
    def build(image=None, mimetype='image/png', filename='photo.png', **fields):
        form = {'width': '10', 'height': '30', 'format': 'png', 'quality': '80'}
        form.update(fields)
        form = {key: value for key, value in form.items() if value is not None}
        data = png_bytes if image is None else image
        form['image'] = (io.BytesIO(data), filename, mimetype)
        return form
    return build


@pytest.fixture
def local_file():
    def build(name='photo.png', size=(40, 20), content_type='image/png', format='PNG'):
        return LocalFile(name, make_image(format, size), content_type)
    return build
