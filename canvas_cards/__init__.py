from .card_renderer import ProfileCard, RankCard, WelcomeCard
from .errors import CardError, FetchError, LoadError
from .loader import ImageLoader
from .options import (
    Layout,
    Status,
    calculate_progress,
    get_status_color,
    normalize_profile_options,
    normalize_rank_options,
    normalize_welcome_options,
)

__all__ = [
    "ProfileCard",
    "WelcomeCard",
    "RankCard",
    "CardError",
    "FetchError",
    "LoadError",
    "ImageLoader",
    "Layout",
    "Status",
    "calculate_progress",
    "get_status_color",
    "normalize_profile_options",
    "normalize_welcome_options",
    "normalize_rank_options",
]
