"""
Tests for ResizeClient, against a mocked HTTP layer and the Flask app itself

Run:
    pytest tests/test_client.py -v
"""
import io
import zipfile
from unittest import mock
from urllib.parse import urlparse

import pytest
import requests
from PIL import Image

from dimensify.client import ResizeClient
from dimensify.errors import ResizeFailed
from dimensify.models import LocalFile, ResizeSettings, UploadedImage
from dimensify.session import ResizeSession


@pytest.fixture
def image():
    return UploadedImage('abc123xyz', LocalFile('cat.png', b'png-bytes', 'image/png'), 40, 20, 'png')


def fake_response(status_code=200, content=b'', headers=None, json_body=None, reason='OK'):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = content
    response.headers = headers or {}
    response.reason = reason
    if json_body is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = json_body
    return response


class TestResizeClient:

    def test_posts_multipart_form(self, image):
        http = mock.Mock()
        http.post.return_value = fake_response(content=b'out', headers={'Content-Type': 'image/png'})
        client = ResizeClient('http://resizer.local/', session=http, timeout=5)

        result = client.resize(image, ResizeSettings(width=10, height=5, quality=90))

        http.post.assert_called_once_with(
            'http://resizer.local/api/resize',
            files={'image': ('cat.png', b'png-bytes', 'image/png')},
            data={'width': '10', 'height': '5', 'format': 'png', 'quality': '90'},
            timeout=5,
        )
        assert result.data == b'out'
        assert result.content_type == 'image/png'
        assert result.size == 3

    def test_error_body_is_surfaced(self, image):
        http = mock.Mock()
        http.post.return_value = fake_response(400, json_body={'error': 'Invalid quality value'},
                                               reason='BAD REQUEST')
        client = ResizeClient('http://resizer.local', session=http)

        with pytest.raises(ResizeFailed, match='Invalid quality value') as excinfo:
            client.resize(image, ResizeSettings())
        assert excinfo.value.filename == 'cat.png'

    def test_non_json_error_uses_reason(self, image):
        http = mock.Mock()
        http.post.return_value = fake_response(502, reason='Bad Gateway')
        client = ResizeClient('http://resizer.local', session=http)

        with pytest.raises(ResizeFailed, match='Bad Gateway'):
            client.resize(image, ResizeSettings())

    def test_transport_error(self, image):
        http = mock.Mock()
        http.post.side_effect = requests.exceptions.ConnectionError('refused')
        client = ResizeClient('http://resizer.local', session=http)

        with pytest.raises(ResizeFailed, match='refused'):
            client.resize(image, ResizeSettings())


class FlaskHttp:
    """Routes ResizeClient's requests into a Flask test client."""

    def __init__(self, test_client):
        self.test_client = test_client

    def post(self, url, files, data, timeout):
        form = dict(data)
        name, content, content_type = files['image']
        form['image'] = (io.BytesIO(content), name, content_type)
        response = self.test_client.post(urlparse(url).path, data=form,
                                         content_type='multipart/form-data')
        return fake_response(response.status_code, content=response.data,
                             headers=dict(response.headers), json_body=response.get_json(silent=True),
                             reason=response.status)


class TestAgainstEndpoint:

    def test_session_round_trip(self, client, local_file, tmp_path):
        session = ResizeSession(client=ResizeClient('http://testserver', session=FlaskHttp(client)))
        session.stage_files([
            local_file('wide.png', size=(80, 20)),
            local_file('photo.jpg', size=(30, 30), content_type='image/jpeg', format='JPEG'),
        ])
        session.set_maintain_aspect_ratio(False)
        session.set_dimension('width', 16)
        session.set_dimension('height', 12)
        session.set_quality(75)

        session.resize_all()

        sizes = [Image.open(io.BytesIO(session.results[image.id].data)).size for image in session.images]
        assert sizes == [(16, 12), (16, 12)]
        assert [session.results[image.id].content_type for image in session.images] == [
            'image/png', 'image/jpeg']

        with zipfile.ZipFile(session.download_all(str(tmp_path))) as archive:
            assert len(archive.namelist()) == 2

    def test_server_rejection_aborts_batch(self, client, local_file):
        session = ResizeSession(client=ResizeClient('http://testserver', session=FlaskHttp(client)))
        session.stage_files([local_file('a.png'), local_file('b.png')])
        session.set_quality(0)

        with pytest.raises(ResizeFailed, match='a.png'):
            session.resize_all()
        assert session.results == {}
