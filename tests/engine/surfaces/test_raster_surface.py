"""
Unit Tests for the Raster Surface
"""

import pytest
from PIL import Image, ImageChops

from scrapbook_toolkit.core.models.elements import ElementKind, ShapeElement, TextElement
from scrapbook_toolkit.core.models.page import BackgroundKind, BackgroundSpec, PageDescription, PatternKind
from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.engine.compositor import PageCompositor
from scrapbook_toolkit.engine.render.background import build_pattern_tile
from scrapbook_toolkit.engine.surfaces import RasterSurface
from scrapbook_toolkit.engine.text.measure import PillowMeasurer


RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)


@pytest.fixture
def surface():
    s = RasterSurface()
    s.begin_page(100, 100)
    return s


class TestPageLifecycle:
    def test_scale_then_bitmap_size(self):
        surface = RasterSurface(scale=2.0)

        surface.begin_page(100, 50)
        surface.end_page()

        assert surface.image.size == (200, 100)

    def test_pages_kept_in_order(self):
        surface = RasterSurface()

        for width in (10, 20):
            surface.begin_page(width, 10)
            surface.end_page()

        assert [page.size[0] for page in surface.pages] == [10, 20]

    def test_no_page_then_runtime_error(self):
        with pytest.raises(RuntimeError):
            RasterSurface().image

    def test_zero_scale_then_value_error(self):
        with pytest.raises(ValueError):
            RasterSurface(scale=0)

    def test_pop_without_push_then_runtime_error(self, surface):
        with pytest.raises(RuntimeError):
            surface.pop_transform()

    def test_measurer_uses_pillow_fonts(self):
        assert isinstance(RasterSurface().create_measurer(), PillowMeasurer)

    def test_save_then_png_written(self, surface, tmp_path):
        surface.end_page()

        surface.save(tmp_path / "out" / "page.png")

        with Image.open(tmp_path / "out" / "page.png") as saved:
            assert saved.size == (100, 100)


class TestPainting:
    def test_fill_rect_then_pixels_painted(self, surface):
        surface.fill_rect(0, 0, 10, 10, "#ff0000")

        assert surface.image.getpixel((5, 5)) == RED
        assert surface.image.getpixel((15, 15)) == WHITE

    def test_fill_rect_opacity_then_blended(self, surface):
        surface.fill_rect(0, 0, 10, 10, "#ff0000", opacity=0.5)

        r, g, b, a = surface.image.getpixel((5, 5))
        assert r == 255
        assert 120 <= g <= 135

    def test_transform_then_translated(self, surface):
        surface.push_transform(50, 20)
        surface.fill_rect(0, 0, 10, 10, "#ff0000")
        surface.pop_transform()

        assert surface.image.getpixel((55, 25)) == RED
        assert surface.image.getpixel((5, 5)) == WHITE

    def test_rotation_then_clockwise_about_origin(self, surface):
        surface.push_transform(50, 20, 90)
        surface.fill_rect(0, 0, 10, 4, "#ff0000")
        surface.pop_transform()

        assert surface.image.getpixel((48, 25)) == RED
        assert surface.image.getpixel((55, 22)) == WHITE

    def test_closed_path_fill(self, surface):
        surface.draw_path("M 10 10 L 60 10 L 60 60 L 10 60 Z", fill="#0000ff")

        assert surface.image.getpixel((30, 30)) == (0, 0, 255, 255)

    def test_draw_image_then_scaled_into_box(self, surface):
        surface.draw_image(Image.new("RGB", (10, 10), "blue"), 20, 20, 40, 40)

        r, g, b, a = surface.image.getpixel((40, 40))
        assert b > 200 and r < 50
        assert surface.image.getpixel((10, 10)) == WHITE

    def test_fill_pattern_then_tiled_lines(self, surface):
        tile = build_pattern_tile(PatternKind.GRID, "#000000")

        surface.fill_pattern(tile, 0, 0, 100, 100)

        assert surface.image.getpixel((10, 10)) == WHITE
        assert surface.image.getpixel((30, 0))[0] < 128
        assert surface.image.getpixel((0, 50))[0] < 128

    def test_draw_text_then_ink_near_baseline(self, surface):
        surface.draw_text("Hello", 10, 50, RichTextStyle(font_size=24, color="#000000"))

        box = ImageChops.difference(surface.image.convert("RGB"), Image.new("RGB", (100, 100), "white")).getbbox()
        assert box is not None
        assert box[1] < 50 <= box[3] + 1


class TestDeterminism:
    def test_same_page_twice_then_identical_bitmaps(self, empty_registry):
        page = PageDescription(
            width=300,
            height=200,
            background=BackgroundSpec(kind=BackgroundKind.PATTERN, pattern=PatternKind.DOTS),
            theme="rough",
            palette_id="test",
            elements=(
                ShapeElement(id="r-1700000000001", kind=ElementKind.RECT, x=20, y=20, width=120, height=80),
                TextElement(id="t-1700000000002", kind=ElementKind.FREE_TEXT, x=150, y=20, width=120, height=60,
                            text="Beach day"),
            ),
        )
        compositor = PageCompositor(registry=empty_registry)
        first, second = RasterSurface(), RasterSurface()

        compositor.render_page(page, first)
        compositor.render_page(page, second)

        assert first.image.tobytes() == second.image.tobytes()
