import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import scrapbook_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from scrapbook_toolkit.engine.registry import CatalogRegistry, Palette  # noqa: E402
from scrapbook_toolkit.engine.surfaces import RecordingSurface  # noqa: E402
from scrapbook_toolkit.engine.text.measure import TextMeasurer  # noqa: E402


class FixedWidthMeasurer(TextMeasurer):
    """Every character is `char_width` pixels wide, whatever the font."""

    def __init__(self, char_width: float = 5.0):
        self.char_width = char_width
        self.calls = 0

    def measure(self, text: str, font: str) -> float:
        self.calls += 1
        return len(text) * self.char_width


# Common test fixtures
@pytest.fixture
def fixed_measurer():
    """Measurer with a fixed 5 px character width."""
    return FixedWidthMeasurer(5.0)


@pytest.fixture
def recording_surface():
    """Fresh display-list surface."""
    return RecordingSurface()


@pytest.fixture
def test_palette():
    """Palette with distinct colours per slot."""
    return Palette(
        id="test",
        name="Test",
        colors={
            "primary": "#112233",
            "secondary": "#445566",
            "accent": "#778899",
            "background": "#eeeeee",
            "surface": "#fafafa",
            "text": "#000000",
        },
    )


@pytest.fixture
def empty_registry(test_palette):
    """Catalogue holding only the test palette (no themes)."""
    return CatalogRegistry(palettes=[test_palette])


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
