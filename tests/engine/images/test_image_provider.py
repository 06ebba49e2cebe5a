"""
Unit Tests for Image Providers
"""

import base64
import io

import pytest
from PIL import Image

from scrapbook_toolkit.engine.errors import ImageLoadError
from scrapbook_toolkit.engine.images.provider import FileImageProvider, MemoryImageProvider


def _data_uri(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


class TestFileImageProvider:
    """Tests for FileImageProvider."""

    def test_relative_path_then_loaded_from_root(self, sample_image):
        provider = FileImageProvider(sample_image.parent)

        image = provider.load(sample_image.name)

        assert image.size == (200, 100)

    def test_second_load_then_cached_object(self, sample_image):
        provider = FileImageProvider(sample_image.parent)

        assert provider.load(sample_image.name) is provider.load(sample_image.name)

    def test_missing_file_then_image_load_error(self, tmp_path):
        with pytest.raises(ImageLoadError) as exc_info:
            FileImageProvider(tmp_path).load("nope.jpg")

        assert exc_info.value.src == "nope.jpg"

    def test_not_an_image_then_image_load_error(self, tmp_path):
        (tmp_path / "notes.png").write_text("definitely not a png")

        with pytest.raises(ImageLoadError):
            FileImageProvider(tmp_path).load("notes.png")

    def test_empty_source_then_image_load_error(self):
        with pytest.raises(ImageLoadError):
            FileImageProvider().load("")

    def test_data_uri_then_decoded(self):
        uri = _data_uri(Image.new("RGB", (3, 2), "green"))

        assert FileImageProvider().load(uri).size == (3, 2)

    def test_data_uri_without_base64_then_error(self):
        with pytest.raises(ImageLoadError):
            FileImageProvider().load("data:image/png,abcd")


class TestMemoryImageProvider:
    def test_prefetched_then_returned(self):
        image = Image.new("RGB", (4, 4))
        provider = MemoryImageProvider()

        provider.add("cover", image)

        assert provider.load("cover") is image

    def test_not_prefetched_then_image_load_error(self):
        with pytest.raises(ImageLoadError, match="not prefetched"):
            MemoryImageProvider().load("cover")
