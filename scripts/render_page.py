"""
Render a page description JSON file to PNG or PDF.

Usage:
    python scripts/render_page.py page.json -o page.png --scale 2
    python scripts/render_page.py page.json -o page.pdf --images assets/
    python scripts/render_page.py --list-catalogue
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "src"))

from scrapbook_toolkit.core.schemas import ValidationError
from scrapbook_toolkit.core.utils.serialization import load_page_json
from scrapbook_toolkit.engine import PageCompositor, PdfSurface, RasterSurface, RenderConfig
from scrapbook_toolkit.engine.images import FileImageProvider
from scrapbook_toolkit.engine.registry import CatalogRegistry
from scrapbook_toolkit.engine.text import FontRegistry

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("render_page")


def list_catalogue(registry: CatalogRegistry) -> None:
    print("Themes:")
    for theme in registry.themes.values():
        print(f"  {theme.id:<12} palette={theme.palette_id}")
    print("Palettes:")
    for palette in registry.palettes.values():
        print(f"  {palette.id:<16} {palette.name}")
    print("Patterns:")
    for pattern in registry.patterns.values():
        aliases = f" (aliases: {', '.join(pattern.aliases)})" if pattern.aliases else ""
        print(f"  {pattern.id}{aliases}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a page description to PNG or PDF")
    parser.add_argument("page", type=Path, nargs="?", help="Page description JSON")
    parser.add_argument("--output", "-o", type=Path, help="Output .png or .pdf (default: page name + .png)")
    parser.add_argument("--scale", type=float, default=1.0, help="Raster pixels per page pixel")
    parser.add_argument("--dpi", type=int, default=96, help="Page pixels per inch for PDF output")
    parser.add_argument("--images", type=Path, help="Root directory for relative image sources")
    parser.add_argument("--fonts", type=Path, help="Directory of TTF/OTF fonts")
    parser.add_argument("--strict", action="store_true", help="Validate against the full JSON schema")
    parser.add_argument("--list-catalogue", action="store_true", help="List themes, palettes and patterns")
    parser.add_argument("--verbose", "-v", action="store_true", help="Per-element debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    registry = CatalogRegistry.load_default()
    if args.list_catalogue:
        list_catalogue(registry)
        return 0
    if args.page is None:
        parser.error("a page JSON file is required")

    try:
        config = RenderConfig(
            dpi=args.dpi,
            raster_scale=args.scale,
            fonts_dir=args.fonts,
            image_root=args.images or args.page.parent,
        )
        page = load_page_json(args.page, strict=args.strict)
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Cannot load {args.page}: {e}")
        return 1

    fonts = FontRegistry.from_directory(config.fonts_dir) if config.fonts_dir else FontRegistry()
    compositor = PageCompositor(registry, FileImageProvider(config.image_root), config)
    output = args.output or args.page.with_suffix(".png")

    if output.suffix.lower() == ".pdf":
        surface = PdfSurface.to_file(output, dpi=config.dpi, fonts=fonts)
        report = compositor.render_page(page, surface)
        surface.save()
    else:
        surface = RasterSurface(scale=config.raster_scale, background=config.raster_background, fonts=fonts)
        report = compositor.render_page(page, surface)
        surface.save(output)

    for message in report.diagnostics:
        logger.warning(f"  {message}")
    logger.info(f"Wrote {output} ({len(report.rendered)} elements, {len(report.skipped)} skipped)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
