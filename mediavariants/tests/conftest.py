"""
Pytest fixtures for mediavariants tests.
"""

import io
import threading

import pytest
from PIL import Image


def encode_image(img, fmt, **params):
    """Encode a Pillow image to bytes."""
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def make_gradient(width, height, mode='RGB'):
    """Image with a horizontal red gradient and a vertical green gradient."""
    horizontal = Image.linear_gradient('L').rotate(90).resize((width, height))
    vertical = Image.linear_gradient('L').resize((width, height))
    bands = [horizontal, vertical, Image.new('L', (width, height), 128)]
    if mode == 'RGBA':
        bands.append(Image.new('L', (width, height), 255))
    return Image.merge(mode, bands)


class MemoryStore:
    """In-memory object store that records calls and can fail selected keys."""
    
    def __init__(self):
        self.objects = {}
        self.content_types = {}
        self.put_calls = []
        self.delete_calls = []
        self.fail_put = set()
        self.fail_delete = set()
        self._lock = threading.Lock()
    
    def put(self, key, data, content_type='application/octet-stream'):
        with self._lock:
            self.put_calls.append(key)
        if any(key.endswith(suffix) for suffix in self.fail_put):
            raise ConnectionError(f"simulated upload failure for {key}")
        with self._lock:
            self.objects[key] = bytes(data)
            self.content_types[key] = content_type
    
    def get(self, key):
        return self.objects.get(key)
    
    def delete(self, key):
        self.delete_calls.append(key)
        if key in self.fail_delete:
            raise ConnectionError(f"simulated delete failure for {key}")
        self.objects.pop(key, None)


@pytest.fixture
def memory_store():
    """Fixture providing an in-memory object store."""
    return MemoryStore()


@pytest.fixture
def sample_jpeg_bytes():
    """Fixture providing a 320x240 JPEG."""
    return encode_image(make_gradient(320, 240), 'JPEG', quality=95)


@pytest.fixture
def sample_png_bytes():
    """Fixture providing a 240x320 PNG with transparency."""
    img = make_gradient(240, 320, mode='RGBA')
    img.putpixel((0, 0), (0, 0, 0, 0))
    return encode_image(img, 'PNG')


@pytest.fixture
def sample_webp_bytes():
    """Fixture providing a 300x300 WebP."""
    return encode_image(make_gradient(300, 300), 'WEBP', quality=90)


@pytest.fixture
def tiny_png_bytes():
    """Fixture providing a 1x1 PNG."""
    return encode_image(Image.new('RGB', (1, 1), color=(10, 200, 30)), 'PNG')


@pytest.fixture
def portable_codec():
    """Fixture providing the Pillow codec."""
    from mediavariants.codec import PillowCodec
    return PillowCodec()


@pytest.fixture
def generator(memory_store, portable_codec, logger):
    """Fixture providing a VariantGenerator on the Pillow codec and memory store."""
    from mediavariants.variant_generator import VariantGenerator
    return VariantGenerator(memory_store, codec=portable_codec, max_workers=4, logger=logger)


@pytest.fixture
def sample_sizes():
    """Fixture providing a five-entry variant metadata map."""
    from mediavariants.models import VariantMetadata
    
    names = ['thumbnail', 'thumbnail_small', 'webcomic_page', 'webcomic_mobile', 'avatar']
    return {
        name: VariantMetadata(
            url=f'/api/media/file/page-1-{name}.jpg',
            width=200,
            height=200,
            mime_type='image/jpeg',
            file_size=1000,
            filename=f'page-1-{name}.jpg',
        )
        for name in names
    }


@pytest.fixture
def sample_manifest(sample_sizes):
    """Fixture providing a manifest with one complete-ish and two empty records."""
    from mediavariants.manifest import MediaManifest
    from mediavariants.media_record import MediaRecord
    
    manifest = MediaManifest(created_at='2026-01-01T00:00:00')
    manifest.add_record(MediaRecord(id='1', filename='page-1.jpg', mime_type='image/jpeg',
                                    image_sizes=dict(sample_sizes)))
    manifest.add_record(MediaRecord(id='2', filename='page-2.png', mime_type='image/png'))
    manifest.add_record(MediaRecord(id='3', filename='cover.webp', mime_type='image/webp'))
    return manifest


@pytest.fixture
def temp_manifest_file(sample_manifest, tmp_path):
    """Fixture providing a temporary manifest file."""
    filepath = tmp_path / "media.json"
    sample_manifest.save(str(filepath))
    return str(filepath)


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')


@pytest.fixture
def make_image_bytes():
    """Fixture providing a factory for gradient images in a given format."""
    def factory(width, height, fmt='PNG', mode='RGB', **params):
        return encode_image(make_gradient(width, height, mode=mode), fmt, **params)
    return factory


@pytest.fixture
def make_oriented_jpeg():
    """
    Fixture providing a factory for JPEGs carrying an EXIF orientation tag.
    
    The stored pixels are blue with a red top-left quadrant, so the quadrant
    the red block lands in after decoding shows which rotation was applied.
    """
    def factory(width, height, orientation):
        img = Image.new('RGB', (width, height), (0, 0, 255))
        img.paste((255, 0, 0), (0, 0, width // 2, height // 2))
        exif = Image.Exif()
        exif[0x0112] = orientation
        return encode_image(img, 'JPEG', quality=95, exif=exif.tobytes())
    return factory
