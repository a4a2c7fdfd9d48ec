"""In-memory state of one resize session: staged originals, their resized
counterparts and the shared settings applied to every image."""
import io
import logging
import math
import os
import random
import string
import zipfile

from PIL import Image, UnidentifiedImageError

from dimensify.client import ResizeClient
from dimensify.errors import ResizeFailed, StagingError
from dimensify.models import ALLOWED_TYPES, ResizeSettings, UploadedImage

logger = logging.getLogger(__name__)

MAX_IMAGES = 10
MAX_FILE_SIZE = 5 * 1024 * 1024
ARCHIVE_NAME = 'Images_byDimensify.zip'

ALPHABET = string.ascii_lowercase + string.digits


def random_token(length):
    return ''.join(random.choices(ALPHABET, k=length))


def random_name(ext):
    return f'{random_token(8)}_byDimensify.{ext}'


def get_ext(filename):
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if ext in ('jpeg', 'jpg', 'png'):
        return ext
    return 'webp'


def validate_file(file):
    if file.size > MAX_FILE_SIZE:
        return 'File size must be less than 5MB'
    if file.content_type not in ALLOWED_TYPES:
        return 'Please upload a valid image file (JPEG, PNG, or WebP)'
    return None


def format_file_size(size):
    if size < 1024:
        return f'{size} B'
    if size < 1024 * 1024:
        return f'{size / 1024:.1f} KB'
    return f'{size / (1024 * 1024):.2f} MB'


def round_half_up(value):
    return int(math.floor(value + 0.5))


class ResizeSession:
    def __init__(self, client=None, settings=None):
        self.client = client or ResizeClient()
        self.settings = settings or ResizeSettings()
        self.images = []
        self.results = {}
        self.error = None
        self.is_loading = False

    def get_image(self, image_id):
        for image in self.images:
            if image.id == image_id:
                return image
        raise KeyError(image_id)

    def fail(self, message):
        self.error = message
        raise StagingError(message)

    def stage_files(self, files):
        """Validate and stage a batch of LocalFiles.

        The batch is all-or-nothing: one bad file rejects every file in it and
        leaves the session as it was.
        """
        files = list(files)
        if len(self.images) + len(files) > MAX_IMAGES:
            self.fail(f'Maximum {MAX_IMAGES} images allowed. '
                      f'You can upload {MAX_IMAGES - len(self.images)} more images.')

        staged = []
        taken = {image.id for image in self.images}
        for file in files:
            message = validate_file(file)
            if message:
                self.fail(message)

            try:
                with Image.open(io.BytesIO(file.data)) as img:
                    width, height = img.size
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
                logger.warning('Could not decode %s', file.name)
                self.fail(f'Could not read image: {file.name}')

            image_id = random_token(9)
            while image_id in taken:
                image_id = random_token(9)
            taken.add(image_id)
            staged.append(UploadedImage(image_id, file, width, height, get_ext(file.name)))

        if staged and not self.images:
            self.settings.width = staged[0].width
            self.settings.height = staged[0].height

        self.images.extend(staged)
        self.error = None
        logger.info('Staged %d image(s), %d in session', len(staged), len(self.images))
        return staged

    def set_dimension(self, kind, value):
        if kind not in ('width', 'height'):
            raise ValueError(f'Unknown dimension: {kind}')
        if not self.images:
            return

        aspect_ratio = self.images[0].aspect_ratio
        if not self.settings.maintain_aspect_ratio:
            setattr(self.settings, kind, value)
        elif kind == 'width':
            self.settings.width = value
            self.settings.height = round_half_up(value / aspect_ratio)
        else:
            self.settings.height = value
            self.settings.width = round_half_up(value * aspect_ratio)

    def set_quality(self, value):
        self.settings.quality = value

    def set_maintain_aspect_ratio(self, enabled):
        self.settings.maintain_aspect_ratio = enabled

    def resize_all(self):
        """Resize every staged image, one request at a time, in staging order.

        Stops at the first failure; results of images before it stay cached
        and the images after it are not sent.
        """
        if not self.images:
            return {}

        self.is_loading = True
        self.error = None
        try:
            for image in list(self.images):
                try:
                    self.results[image.id] = self.client.resize(image, self.settings)
                except ResizeFailed as e:
                    self.error = f'Failed to resize image: {image.name}'
                    logger.error('%s (%s)', self.error, e)
                    raise ResizeFailed(self.error, filename=image.name) from e
        finally:
            self.is_loading = False

        return dict(self.results)

    def remove(self, image_id):
        self.images = [image for image in self.images if image.id != image_id]
        self.results.pop(image_id, None)

    def clear(self):
        self.images = []
        self.results = {}
        self.error = None
        self.is_loading = False

    def present_formats(self):
        return {image.ext for image in self.images}

    def total_resized_size(self):
        return sum(result.size for result in self.results.values())

    def download(self, image_id, directory):
        result = self.results[image_id]
        image = self.get_image(image_id)
        path = os.path.join(directory, random_name(image.ext))
        with open(path, 'wb') as f:
            f.write(result.data)
        return path

    def build_archive(self):
        buffer = io.BytesIO()
        names = set()
        with zipfile.ZipFile(buffer, 'w') as zip_file:
            for image in self.images:
                result = self.results.get(image.id)
                if result is None:
                    continue
                name = random_name(image.ext)
                while name in names:
                    name = random_name(image.ext)
                names.add(name)
                zip_file.writestr(name, result.data)
        return buffer.getvalue()

    def download_all(self, directory):
        path = os.path.join(directory, ARCHIVE_NAME)
        with open(path, 'wb') as f:
            f.write(self.build_archive())
        return path
