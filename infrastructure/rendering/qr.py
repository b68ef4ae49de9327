import io
import logging
from dataclasses import dataclass

import qrcode
from PIL import Image, ImageColor

from domain.exceptions.valuation import RenderError

from .sanitize import clamp_int, escape_xml, sanitize_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QROptions:
    content: str
    output: str = "png"
    size: int = 256
    margin: int = 2
    dark: str = "#000000"
    light: str = "#ffffff"

    @classmethod
    def from_query(
        cls,
        content: str,
        output: str = "png",
        size: object = 256,
        margin: object = 2,
        dark: object = "#000000",
        light: object = "#ffffff",
    ) -> "QROptions":
        return cls(
            content=content,
            output=str(output).lower(),
            size=clamp_int(size, 256, 64, 1024),
            margin=clamp_int(margin, 2, 0, 10),
            dark=sanitize_color(dark) or "#000000",
            light=sanitize_color(light) or "#ffffff",
        )


def _module_matrix(content: str, margin: int) -> list[list[bool]]:
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=margin)
    qr.add_data(content)
    qr.make(fit=True)
    return qr.get_matrix()


def render_qr_svg(options: QROptions) -> str:
    matrix = _module_matrix(options.content, options.margin)
    count = len(matrix)
    path = "".join(
        f"M{x} {y}h1v1h-1z"
        for y, row in enumerate(matrix)
        for x, dark in enumerate(row)
        if dark
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{options.size}" height="{options.size}" '
        f'viewBox="0 0 {count} {count}" shape-rendering="crispEdges">'
        f'<path fill="{escape_xml(options.light)}" d="M0 0h{count}v{count}H0z"/>'
        f'<path fill="{escape_xml(options.dark)}" d="{path}"/>'
        "</svg>\n"
    )


def render_qr_png(options: QROptions) -> bytes:
    matrix = _module_matrix(options.content, options.margin)
    count = len(matrix)
    try:
        dark = ImageColor.getcolor(options.dark, "RGBA")
        light = ImageColor.getcolor(options.light, "RGBA")
    except ValueError as e:
        raise RenderError(f"Unsupported QR colour: {e}", status_code=500) from e

    image = Image.new("RGBA", (count, count), light)
    pixels = image.load()
    for y, row in enumerate(matrix):
        for x, is_dark in enumerate(row):
            if is_dark:
                pixels[x, y] = dark

    image = image.resize((options.size, options.size), Image.Resampling.NEAREST)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_qr(options: QROptions) -> tuple[bytes, str]:
    """Return the encoded QR image and its media type."""
    try:
        if options.output == "svg":
            return render_qr_svg(options).encode("utf-8"), "image/svg+xml"
        return render_qr_png(options), "image/png"
    except RenderError:
        raise
    except Exception as e:
        logger.error(f"QR code generation failed: {e}")
        raise RenderError("QR code generation failed", status_code=500) from e
