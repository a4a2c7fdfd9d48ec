from flask import Blueprint, Flask, Response, current_app, jsonify, request

from dimensify import config
from dimensify.errors import ValidationError
from dimensify.utils.image_processor import ImageProcessor
from dimensify.validation import parse_resize_request

api = Blueprint('api', __name__)

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-store, no-cache, must-revalidate, proxy-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
}


@api.route('/api/resize', methods=['POST'])
def resize_image():
    resize_request = parse_resize_request(request.files, request.form)

    try:
        processor = ImageProcessor(resize_request.image_data)
        info = processor.get_info()
        current_app.logger.debug('Resizing %s image %s to %r', info['format'], info['size'], resize_request)
        data = (processor
                .resize(resize_request.width, resize_request.height)
                .convert(resize_request.format, resize_request.quality)
                .encode())
    except Exception:
        current_app.logger.exception('Image processing error')
        return jsonify({'error': 'Failed to process image'}), 500

    headers = dict(NO_CACHE_HEADERS)
    headers['Content-Disposition'] = f'attachment; filename="{resize_request.download_name}"'
    return Response(data, mimetype=resize_request.mimetype, headers=headers)


def handle_validation_error(error):
    current_app.logger.info('Rejected resize request: %s', error.message)
    return jsonify(error.to_dict()), error.status_code


def handle_method_not_allowed(error):
    headers = {'Allow': ', '.join(error.valid_methods or ())}
    return jsonify({'error': 'Method not allowed'}), 405, headers


def handle_too_large(error):
    return jsonify({'error': 'Request body too large'}), 413


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.update(config.load())
    if overrides:
        app.config.update(overrides)

    config.configure_logging(app.config['LOG_LEVEL'])

    app.register_blueprint(api)
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(405, handle_method_not_allowed)
    app.register_error_handler(413, handle_too_large)

    app.logger.info('Dimensify ready, max upload %d bytes', app.config['MAX_CONTENT_LENGTH'])
    return app


def main():
    app = create_app()
    app.run(debug=app.config['DEBUG'], port=app.config['PORT'], host=app.config['HOST'])


if __name__ == '__main__':
    main()
