"""Option records for the three card types.

Callers describe a card with a plain mapping. The ``normalize_*`` functions
merge it with the defaults below and return a frozen record in which every
field is set, so the drawing code never has to guess at a missing value.
A key counts as omitted when it is absent or ``None``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

DEFAULT_DISCRIMINATOR = "#0000"
DEFAULT_BACKGROUND_COLOR = "#2C2F33"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_ACCENT_COLOR = "#7289DA"


class Status(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"


STATUS_COLORS = {
    Status.ONLINE: "#43B581",
    Status.IDLE: "#FAA61A",
    Status.DND: "#F04747",
    Status.OFFLINE: "#747F8D",
}
FALLBACK_STATUS_COLOR = STATUS_COLORS[Status.OFFLINE]


class Layout(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def get_status_color(status) -> str:
    try:
        return STATUS_COLORS[Status(status)]
    except ValueError:
        return FALLBACK_STATUS_COLOR


def calculate_progress(current_xp: float, next_level_xp: float) -> float:
    """Percentage of the way to the next level, clamped to [0, 100].

    A non-positive ``next_level_xp`` has no meaningful ratio and yields 0.
    """
    if next_level_xp <= 0:
        return 0.0
    return _clamp(current_xp / next_level_xp * 100, 0.0, 100.0)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


def _pick(options: Mapping[str, Any], key: str, default):
    value = options.get(key)
    return default if value is None else value


@dataclass(frozen=True)
class Padding:
    top: int
    right: int
    bottom: int
    left: int

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None, default: int) -> "Padding":
        raw = raw or {}
        return cls(
            top=_pick(raw, "top", default),
            right=_pick(raw, "right", default),
            bottom=_pick(raw, "bottom", default),
            left=_pick(raw, "left", default),
        )


@dataclass(frozen=True)
class ProfileFontSize:
    username: int = 32
    bio: int = 16
    badges: int = 14


@dataclass(frozen=True)
class WelcomeFontSize:
    title: int = 60
    subtitle: int = 28
    member_count: int = 20


@dataclass(frozen=True)
class RankFontSize:
    username: int = 32
    rank: int = 24
    level: int = 20
    xp: int = 16


def _layout(value) -> Layout:
    return Layout.HORIZONTAL if value == Layout.HORIZONTAL else Layout.VERTICAL


def _font_sizes(cls, raw: Mapping[str, Any] | None):
    raw = raw or {}
    defaults = cls()
    return cls(**{
        name: _pick(raw, name, getattr(defaults, name))
        for name in cls.__dataclass_fields__
    })


@dataclass(frozen=True)
class ProfileCardOptions:
    username: str
    avatar_url: str
    discriminator: str
    status: str
    status_color: str
    bio: str
    badges: tuple[str, ...]
    background_color: str
    text_color: str
    accent_color: str
    background_image: str
    background_alpha: float
    font_size: ProfileFontSize
    padding: Padding
    border_radius: int
    layout: Layout


@dataclass(frozen=True)
class WelcomeCardOptions:
    username: str
    avatar_url: str
    server_name: str
    discriminator: str
    member_count: int
    background_color: str
    text_color: str
    accent_color: str
    blur_radius: float
    font_size: WelcomeFontSize
    padding: Padding
    border_radius: int


@dataclass(frozen=True)
class RankCardOptions:
    username: str
    avatar_url: str
    rank: int
    level: int
    current_xp: float
    next_level_xp: float
    progress: float
    discriminator: str
    background_color: str
    text_color: str
    accent_color: str
    rank_color: str
    level_color: str
    progress_bar_color: str
    progress_bar_background_color: str
    background_image: str
    background_alpha: float
    font_size: RankFontSize
    padding: Padding
    border_radius: int
    show_progress: bool


def normalize_profile_options(options: Mapping[str, Any]) -> ProfileCardOptions:
    status = _pick(options, "status", Status.ONLINE.value)
    return ProfileCardOptions(
        username=options["username"],
        avatar_url=options["avatar_url"],
        discriminator=_pick(options, "discriminator", DEFAULT_DISCRIMINATOR),
        status=status,
        status_color=_pick(options, "status_color", get_status_color(status)),
        bio=_pick(options, "bio", ""),
        badges=tuple(_pick(options, "badges", ())),
        background_color=_pick(options, "background_color", DEFAULT_BACKGROUND_COLOR),
        text_color=_pick(options, "text_color", DEFAULT_TEXT_COLOR),
        accent_color=_pick(options, "accent_color", DEFAULT_ACCENT_COLOR),
        background_image=_pick(options, "background_image", ""),
        background_alpha=_pick(options, "background_alpha", 0.2),
        font_size=_font_sizes(ProfileFontSize, options.get("font_size")),
        padding=Padding.from_mapping(options.get("padding"), 30),
        border_radius=_pick(options, "border_radius", 10),
        layout=_layout(options.get("layout")),
    )


def normalize_welcome_options(options: Mapping[str, Any]) -> WelcomeCardOptions:
    return WelcomeCardOptions(
        username=options["username"],
        avatar_url=options["avatar_url"],
        server_name=options["server_name"],
        discriminator=_pick(options, "discriminator", DEFAULT_DISCRIMINATOR),
        member_count=_pick(options, "member_count", 0),
        background_color=_pick(options, "background_color", DEFAULT_BACKGROUND_COLOR),
        text_color=_pick(options, "text_color", DEFAULT_TEXT_COLOR),
        accent_color=_pick(options, "accent_color", DEFAULT_ACCENT_COLOR),
        blur_radius=_pick(options, "blur_radius", 8),
        font_size=_font_sizes(WelcomeFontSize, options.get("font_size")),
        padding=Padding.from_mapping(options.get("padding"), 60),
        border_radius=_pick(options, "border_radius", 15),
    )


def normalize_rank_options(options: Mapping[str, Any]) -> RankCardOptions:
    current_xp = options["current_xp"]
    next_level_xp = options["next_level_xp"]
    progress = options.get("progress")
    if progress is None:
        progress = calculate_progress(current_xp, next_level_xp)
    else:
        progress = _clamp(progress, 0.0, 100.0)

    return RankCardOptions(
        username=options["username"],
        avatar_url=options["avatar_url"],
        rank=options["rank"],
        level=options["level"],
        current_xp=current_xp,
        next_level_xp=next_level_xp,
        progress=progress,
        discriminator=_pick(options, "discriminator", DEFAULT_DISCRIMINATOR),
        background_color=_pick(options, "background_color", DEFAULT_BACKGROUND_COLOR),
        text_color=_pick(options, "text_color", DEFAULT_TEXT_COLOR),
        accent_color=_pick(options, "accent_color", DEFAULT_ACCENT_COLOR),
        rank_color=_pick(options, "rank_color", "#FFD700"),
        level_color=_pick(options, "level_color", DEFAULT_ACCENT_COLOR),
        progress_bar_color=_pick(options, "progress_bar_color", "#43B581"),
        progress_bar_background_color=_pick(options, "progress_bar_background_color", "#23272A"),
        background_image=_pick(options, "background_image", ""),
        background_alpha=_pick(options, "background_alpha", 0.15),
        font_size=_font_sizes(RankFontSize, options.get("font_size")),
        padding=Padding.from_mapping(options.get("padding"), 30),
        border_radius=_pick(options, "border_radius", 10),
        show_progress=bool(_pick(options, "show_progress", True)),
    )
