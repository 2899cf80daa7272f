from typing import Any, Mapping

import aiohttp
from PIL import Image, ImageDraw

from . import drawing
from .drawing import SECONDARY_TEXT_COLOR, load_font
from .loader import ImageLoader
from .log import logger
from .options import (
    Layout,
    ProfileCardOptions,
    RankCardOptions,
    WelcomeCardOptions,
    normalize_profile_options,
    normalize_rank_options,
    normalize_welcome_options,
)

PROFILE_SIZE = (800, 400)
WELCOME_SIZE = (1024, 500)
RANK_SIZE = (900, 300)

TEXT_GAP = 30
STATUS_SIZE = 16
RANK_AVATAR_SIZE = 80
PROGRESS_BAR_HEIGHT = 12
ACCENT_BAR_HEIGHT = 5


class _Card:
    """One render of one card.

    Subclasses set ``size`` and implement ``_draw``, which receives the canvas
    and the loader and runs the card's stages in order. The rounded-corner
    mask and PNG encoding are shared.
    """

    size: tuple[int, int]

    def __init__(self, options, session: aiohttp.ClientSession | None = None, timeout: float | None = None):
        self.options = options
        self._session = session
        self._timeout = timeout
        self._rendered = False

    async def to_buffer(self) -> bytes:
        if self._rendered:
            raise RuntimeError(f"{type(self).__name__} has already been rendered")
        self._rendered = True

        canvas = drawing.new_surface(*self.size)
        async with ImageLoader(self._session, self._timeout) as loader:
            await self._draw(canvas, loader)
        drawing.apply_rounded_corners(canvas, self.options.border_radius)
        logger.debug(f"Rendered {type(self).__name__} for {self.options.username}")
        return drawing.encode_png(canvas)

    async def _draw(self, canvas: Image.Image, loader: ImageLoader):
        raise NotImplementedError


class ProfileCard(_Card):
    size = PROFILE_SIZE

    def __init__(self, options: Mapping[str, Any], session: aiohttp.ClientSession | None = None,
                 timeout: float | None = None):
        super().__init__(normalize_profile_options(options), session, timeout)

    @property
    def avatar_size(self) -> int:
        return 100 if self.options.layout is Layout.HORIZONTAL else 120

    async def _draw(self, canvas, loader):
        opts: ProfileCardOptions = self.options
        drawing.fill_background(canvas, opts.background_color)
        background = await loader.load_optional(opts.background_image)
        if background is not None:
            drawing.draw_background_image(canvas, background, opts.background_alpha)
        drawing.draw_gradient_overlay(canvas, 0.3, 0.7)

        avatar = await loader.load(opts.avatar_url)
        self._draw_avatar(canvas, avatar)
        self._draw_text(canvas)

    def _draw_avatar(self, canvas, avatar):
        opts = self.options
        size = self.avatar_size
        x = opts.padding.left
        if opts.layout is Layout.HORIZONTAL:
            y = opts.padding.top
        else:
            y = opts.padding.top + (canvas.height - opts.padding.top - opts.padding.bottom - size) / 2
        drawing.draw_circular_avatar(canvas, avatar, x, y, size, 3, opts.accent_color)

        status_x = x + size - STATUS_SIZE / 2 - 2
        status_y = y + size - STATUS_SIZE / 2 - 2
        drawing.draw_status_indicator(canvas, status_x, status_y, STATUS_SIZE, opts.status_color)

    def _draw_text(self, canvas):
        opts = self.options
        fs = opts.font_size
        draw = ImageDraw.Draw(canvas)
        text_x = opts.padding.left + self.avatar_size + TEXT_GAP
        y = opts.padding.top

        if opts.layout is Layout.VERTICAL:
            draw.text((text_x, y + fs.username), opts.username,
                      font=load_font(fs.username, bold=True), fill=opts.text_color, anchor="ls")
            y += fs.username + 10
            small = fs.username - 8
            draw.text((text_x, y + small), opts.discriminator,
                      font=load_font(small), fill=SECONDARY_TEXT_COLOR, anchor="ls")
            y += fs.username + 20

        if opts.bio:
            font = load_font(fs.bio)
            max_width = canvas.width - (opts.padding.left + self.avatar_size + 60)
            for line in drawing.wrap_text(opts.bio, font, max_width):
                draw.text((text_x, y + fs.bio), line, font=font, fill=opts.text_color, anchor="ls")
                y += fs.bio + 5
            y += 15

        if opts.badges:
            font = load_font(fs.badges)
            max_x = canvas.width - opts.padding.right
            for label, x, dy in drawing.layout_badges(opts.badges, font, text_x, max_x, fs.badges + 5):
                draw.text((x, y + fs.badges + dy), label, font=font, fill=opts.accent_color, anchor="ls")


class WelcomeCard(_Card):
    size = WELCOME_SIZE

    def __init__(self, options: Mapping[str, Any], session: aiohttp.ClientSession | None = None,
                 timeout: float | None = None):
        super().__init__(normalize_welcome_options(options), session, timeout)

    async def _draw(self, canvas, loader):
        opts: WelcomeCardOptions = self.options
        drawing.fill_background(canvas, opts.background_color)
        avatar = await loader.load(opts.avatar_url)
        drawing.draw_blurred_background(canvas, avatar, opts.blur_radius)
        drawing.draw_gradient_overlay(canvas, 0.4, 0.7, diagonal=False)

        self._draw_text(canvas)
        self._draw_accent_bar(canvas)

    def _draw_text(self, canvas):
        opts = self.options
        fs = opts.font_size
        draw = ImageDraw.Draw(canvas)
        center_x = canvas.width / 2
        start_y = opts.padding.top + 100

        draw.text((center_x, start_y), opts.username,
                  font=load_font(fs.title, bold=True), fill=opts.text_color, anchor="ms")

        if opts.discriminator:
            draw.text((center_x, start_y + fs.subtitle + 5), opts.discriminator,
                      font=load_font(fs.subtitle), fill=SECONDARY_TEXT_COLOR, anchor="ms")

        server_y = start_y + fs.subtitle + (40 if opts.discriminator else 60)
        draw.text((center_x, server_y), f"Welcome to {opts.server_name}!",
                  font=load_font(fs.subtitle, bold=True), fill=opts.text_color, anchor="ms")

        if opts.member_count > 0:
            count_y = start_y + fs.subtitle + (80 if opts.discriminator else 100) + fs.member_count + 10
            draw.text((center_x, count_y), f"Member #{opts.member_count}",
                      font=load_font(fs.member_count), fill=SECONDARY_TEXT_COLOR, anchor="ms")

    def _draw_accent_bar(self, canvas):
        opts = self.options
        x = opts.padding.left
        y = canvas.height - opts.padding.bottom - ACCENT_BAR_HEIGHT
        width = canvas.width - (opts.padding.left + opts.padding.right)
        ImageDraw.Draw(canvas).rectangle(
            (x, y, x + width, y + ACCENT_BAR_HEIGHT), fill=opts.accent_color
        )


class RankCard(_Card):
    size = RANK_SIZE

    def __init__(self, options: Mapping[str, Any], session: aiohttp.ClientSession | None = None,
                 timeout: float | None = None):
        super().__init__(normalize_rank_options(options), session, timeout)

    async def _draw(self, canvas, loader):
        opts: RankCardOptions = self.options
        drawing.fill_background(canvas, opts.background_color)
        background = await loader.load_optional(opts.background_image)
        if background is not None:
            drawing.draw_background_image(canvas, background, opts.background_alpha)
        drawing.draw_gradient_overlay(canvas, 0.4, 0.6)

        avatar = await loader.load(opts.avatar_url)
        x = opts.padding.left
        y = opts.padding.top + (canvas.height - opts.padding.top - opts.padding.bottom - RANK_AVATAR_SIZE) / 2
        drawing.draw_circular_avatar(canvas, avatar, x, y, RANK_AVATAR_SIZE, 4, opts.accent_color)

        self._draw_rank_info(canvas)
        self._draw_xp_info(canvas)

    def _draw_rank_info(self, canvas):
        opts = self.options
        fs = opts.font_size
        draw = ImageDraw.Draw(canvas)
        text_x = opts.padding.left + RANK_AVATAR_SIZE + TEXT_GAP
        y = opts.padding.top

        draw.text((text_x, y + fs.username), opts.username,
                  font=load_font(fs.username, bold=True), fill=opts.text_color, anchor="ls")
        y += fs.username + 15
        small = fs.username - 8
        draw.text((text_x, y + small), opts.discriminator,
                  font=load_font(small), fill=SECONDARY_TEXT_COLOR, anchor="ls")
        y += fs.username + 25
        draw.text((text_x, y + fs.rank), f"Rank #{opts.rank}",
                  font=load_font(fs.rank, bold=True), fill=opts.rank_color, anchor="ls")
        y += fs.rank + 15
        draw.text((text_x, y + fs.level), f"Level {opts.level}",
                  font=load_font(fs.level), fill=opts.level_color, anchor="ls")

    def _draw_xp_info(self, canvas):
        opts = self.options
        draw = ImageDraw.Draw(canvas)
        text_x = opts.padding.left + RANK_AVATAR_SIZE + TEXT_GAP

        draw.text((text_x, canvas.height - opts.padding.bottom - 20),
                  f"{opts.current_xp:,} / {opts.next_level_xp:,} XP",
                  font=load_font(opts.font_size.xp), fill=opts.text_color, anchor="ls")

        bar_y = canvas.height - opts.padding.bottom - 40
        bar_width = canvas.width - (opts.padding.left + RANK_AVATAR_SIZE + 60) - opts.padding.right
        drawing.draw_progress_bar(
            canvas, text_x, bar_y, bar_width, PROGRESS_BAR_HEIGHT, opts.progress,
            fill=opts.progress_bar_color,
            track=opts.progress_bar_background_color,
            border=opts.accent_color,
            show_fill=opts.show_progress,
        )
