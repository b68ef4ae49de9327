import logging

from domain.exceptions.valuation import RenderError

logger = logging.getLogger(__name__)


def svg_to_png(svg: str) -> bytes:
    """Rasterise an SVG document with cairosvg."""
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        # cairosvg raises OSError when the native cairo library is missing
        logger.error(f"PNG export unavailable: {e}")
        raise RenderError("PNG export requires cairosvg and the cairo library", status_code=500) from e

    try:
        return cairosvg.svg2png(bytestring=svg.encode("utf-8"))
    except Exception as e:
        logger.error(f"PNG rendering failed: {e}")
        raise RenderError("PNG rendering failed", status_code=500) from e
