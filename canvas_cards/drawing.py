import io
import os
import re
from functools import lru_cache

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from .log import logger

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

BOLD_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]

SECONDARY_TEXT_COLOR = "#AAAAAA"
BADGE_BULLET = "\u2022"
BADGE_GAP = 10

_CJK_RANGES = re.compile(r'[\u4e00-\u9fff\u3000-\u303f\uff00-\uffef]')


@lru_cache(maxsize=None)
def _find_font(bold: bool) -> str | None:
    for p in BOLD_FONT_PATHS if bold else FONT_PATHS:
        if os.path.exists(p):
            return p
    if not bold:
        logger.warning("No TrueType font found, using Pillow's default font")
    return None


def load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    size = max(1, int(size))
    path = _find_font(bold) or _find_font(False)
    if path:
        return ImageFont.truetype(path, size)
    return ImageFont.load_default(size)


def text_width(font: ImageFont.FreeTypeFont, text: str) -> float:
    return font.getlength(text)


# Surface

def new_surface(width: int, height: int) -> Image.Image:
    return Image.new("RGBA", (width, height), (0, 0, 0, 0))


def fill_background(canvas: Image.Image, color: str):
    ImageDraw.Draw(canvas).rectangle((0, 0, canvas.width, canvas.height), fill=color)


def draw_background_image(canvas: Image.Image, bitmap: Image.Image, alpha: float):
    layer = bitmap.convert("RGBA").resize(canvas.size, Image.LANCZOS)
    layer.putalpha(layer.getchannel("A").point(lambda a: round(a * alpha)))
    canvas.alpha_composite(layer)


def draw_blurred_background(canvas: Image.Image, bitmap: Image.Image, radius: float):
    layer = bitmap.convert("RGBA").resize(canvas.size, Image.LANCZOS)
    layer = layer.filter(ImageFilter.GaussianBlur(radius=radius))
    canvas.alpha_composite(layer)


def draw_gradient_overlay(canvas: Image.Image, start_alpha: float, end_alpha: float, diagonal: bool = True):
    """Darken the canvas with a black linear gradient.

    The gradient runs from the top-left corner to the bottom-right one when
    ``diagonal`` is set, otherwise from top to bottom. Each pixel's position
    along that axis is its projection onto the axis vector.
    """
    w, h = canvas.size
    ramp = Image.linear_gradient("L")
    position = ramp.resize((w, h))
    if diagonal:
        weight = w * w / (w * w + h * h)
        across = ramp.transpose(Image.Transpose.TRANSPOSE).resize((w, h))
        position = ImageChops.add(
            across.point(lambda v: round(v * weight)),
            position.point(lambda v: round(v * (1 - weight))),
        )
    mask = position.point(lambda v: round(255 * (start_alpha + (end_alpha - start_alpha) * v / 255)))
    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    overlay.putalpha(mask)
    canvas.alpha_composite(overlay)


def _circle_mask(diameter: int) -> Image.Image:
    mask = Image.new("L", (diameter, diameter), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, diameter - 1, diameter - 1), fill=255)
    return mask


def draw_circular_avatar(canvas: Image.Image, bitmap: Image.Image, x: int, y: int, size: int,
                         halo: int, halo_color: str):
    cx, cy = x + size / 2, y + size / 2
    r = size / 2 + halo
    ImageDraw.Draw(canvas).ellipse((cx - r, cy - r, cx + r, cy + r), fill=halo_color)

    avatar = bitmap.convert("RGBA").resize((size, size), Image.LANCZOS)
    avatar.putalpha(ImageChops.multiply(_circle_mask(size), avatar.getchannel("A")))
    canvas.alpha_composite(avatar, (int(x), int(y)))


def draw_status_indicator(canvas: Image.Image, x: int, y: int, size: int, color: str):
    ImageDraw.Draw(canvas).ellipse((x, y, x + size, y + size), fill=color)


# Text layout

def wrap_text(text: str, font: ImageFont.FreeTypeFont, max_width: float) -> list[str]:
    lines = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        if _CJK_RANGES.search(paragraph):
            current = ""
            for char in paragraph:
                test = current + char
                if text_width(font, test) > max_width and current:
                    lines.append(current)
                    current = char
                else:
                    current = test
            if current:
                lines.append(current)
        else:
            current = ""
            for word in paragraph.split():
                test = f"{current} {word}" if current else word
                if text_width(font, test) > max_width and current:
                    lines.append(current)
                    current = word
                else:
                    current = test
            if current:
                lines.append(current)
    return lines


def layout_badges(badges, font: ImageFont.FreeTypeFont, start_x: float, max_x: float,
                  line_height: float) -> list[tuple[str, float, float]]:
    """Place bullet badges left to right, wrapping onto new rows.

    Returns ``(text, x, y_offset)`` for each badge, where ``y_offset`` is
    relative to the first row.
    """
    placed = []
    x, y = start_x, 0.0
    for badge in badges:
        label = f"{BADGE_BULLET} {badge}"
        width = text_width(font, label)
        if x + width > max_x and x > start_x:
            x = start_x
            y += line_height
        placed.append((label, x, y))
        x += width + BADGE_GAP
    return placed


# Decorations

def draw_progress_bar(canvas: Image.Image, x: float, y: float, width: float, height: float,
                      progress: float, fill: str, track: str, border: str, show_fill: bool = True):
    draw = ImageDraw.Draw(canvas)
    draw.rectangle((x, y, x + width, y + height), fill=track)
    fill_width = width * progress / 100
    if show_fill and fill_width >= 1:
        draw.rectangle((x, y, x + fill_width, y + height), fill=fill)
    draw.rectangle((x, y, x + width, y + height), outline=border, width=1)


def apply_rounded_corners(canvas: Image.Image, radius: int):
    if radius <= 0:
        return
    mask = Image.new("L", canvas.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, canvas.width - 1, canvas.height - 1), radius=radius, fill=255
    )
    canvas.putalpha(ImageChops.multiply(canvas.getchannel("A"), mask))


def encode_png(canvas: Image.Image) -> bytes:
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
