import io

from PIL import Image

TRANSPARENT = (0, 0, 0, 0)
WHITE = (255, 255, 255)


class ImageProcessor:
    def __init__(self, data):
        self.data = data
        self.image = Image.open(io.BytesIO(data))
        # decode now so a corrupt file fails here rather than on save
        self.image.load()
        self.source_format = self.image.format
        self.format = 'jpeg'
        self.quality = 100

    def resize(self, width, height):
        """Stretch the image to exactly width x height, ignoring aspect ratio"""
        if self.image.mode != 'RGBA':
            self.image = self.image.convert('RGBA')
        self.image = self.image.resize((width, height), Image.Resampling.LANCZOS)
        return self

    def convert(self, format='jpeg', quality=100):
        """Set the output format and quality"""
        self.format = format
        self.quality = quality
        return self

    def flatten(self):
        """Put the image on the canvas its output format needs.

        PNG keeps its alpha over a transparent canvas; every other format is
        composited onto opaque white.
        """
        image = self.image if self.image.mode == 'RGBA' else self.image.convert('RGBA')
        if self.format == 'png':
            canvas = Image.new('RGBA', image.size, TRANSPARENT)
            return Image.alpha_composite(canvas, image)

        canvas = Image.new('RGB', image.size, WHITE)
        canvas.paste(image, mask=image.getchannel('A'))
        return canvas

    def encode(self):
        """Encode the processed image and return the bytes"""
        image = self.flatten()
        output = io.BytesIO()

        if self.format in ('jpeg', 'jpg'):
            image.save(output, 'JPEG', quality=self.quality, progressive=True, optimize=True)
        elif self.format == 'webp':
            image.save(output, 'WEBP', quality=self.quality, method=6,
                       lossless=self.quality >= 90)
        elif self.format == 'png':
            if self.quality < 100:
                image = image.quantize(colors=palette_size(self.quality),
                                       method=Image.Quantize.FASTOCTREE)
            image.save(output, 'PNG', compress_level=9, optimize=True)
        else:
            image.save(output, 'JPEG', quality=100)

        return output.getvalue()

    def get_info(self):
        """Get image information"""
        return {
            'format': self.source_format,
            'size': self.image.size,
            'mode': self.image.mode,
            'file_size': len(self.data),
        }


def palette_size(quality):
    return max(2, min(256, round(256 * quality / 100)))

