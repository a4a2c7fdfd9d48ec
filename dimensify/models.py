import mimetypes
import os

SUPPORTED_FORMATS = ['jpeg', 'jpg', 'png', 'webp']
ALLOWED_TYPES = ['image/jpeg', 'image/jpg', 'image/png', 'image/webp']

MIME_TYPES = {
    'jpeg': 'image/jpeg',
    'jpg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
}


class LocalFile:
    """A file picked by the user, before it is staged."""

    def __init__(self, name, data, content_type):
        self.name = name
        self.data = data
        self.content_type = content_type

    @classmethod
    def from_path(cls, path):
        content_type, _ = mimetypes.guess_type(path)
        with open(path, 'rb') as f:
            data = f.read()
        return cls(os.path.basename(path), data, content_type or 'application/octet-stream')

    @property
    def size(self):
        return len(self.data)

    def __repr__(self):
        return f'LocalFile(name={self.name!r}, size={self.size}, content_type={self.content_type!r})'


class UploadedImage:
    def __init__(self, id, file, width, height, ext):
        self.id = id
        self.file = file
        self.width = width
        self.height = height
        self.ext = ext

    @property
    def name(self):
        return self.file.name

    @property
    def aspect_ratio(self):
        return self.width / self.height

    def __repr__(self):
        return f'UploadedImage(id={self.id!r}, name={self.name!r}, size={self.width}x{self.height})'


class ResizeSettings:
    def __init__(self, width=800, height=600, quality=100, maintain_aspect_ratio=True):
        self.width = width
        self.height = height
        self.quality = quality
        self.maintain_aspect_ratio = maintain_aspect_ratio

    def to_form(self, format):
        return {
            'width': str(self.width),
            'height': str(self.height),
            'format': format,
            'quality': str(self.quality),
        }


class ResizeRequest:
    def __init__(self, image_data, content_type, width, height, format, quality):
        self.image_data = image_data
        self.content_type = content_type
        self.width = width
        self.height = height
        self.format = format
        self.quality = quality

    @property
    def mimetype(self):
        return MIME_TYPES[self.format]

    @property
    def download_name(self):
        return f'resized-image.{self.format}'

    def __repr__(self):
        return (f'ResizeRequest(size={self.width}x{self.height}, format={self.format}, '
                f'quality={self.quality}, bytes={len(self.image_data)})')


class ResizeResult:
    def __init__(self, data, content_type):
        self.data = data
        self.content_type = content_type

    @property
    def size(self):
        return len(self.data)
