class DimensifyError(Exception):
    pass


class ValidationError(DimensifyError):
    """A resize request the caller can fix. Always answered with a 400."""
    status_code = 400
    message = 'Invalid request'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class MissingFile(ValidationError):
    message = 'No image file provided'


class UnsupportedType(ValidationError):
    message = 'Unsupported file type. Only JPEG, JPG, PNG, and WebP images are allowed.'


class InvalidDimensions(ValidationError):
    message = 'Invalid dimensions provided'


class InvalidFormat(ValidationError):
    message = 'Invalid format specified. Only JPEG, JPG, PNG, and WebP are supported.'


class InvalidQuality(ValidationError):
    message = 'Invalid quality value'


class StagingError(DimensifyError):
    pass


class ResizeFailed(DimensifyError):
    def __init__(self, message, filename=None):
        super().__init__(message)
        self.filename = filename
