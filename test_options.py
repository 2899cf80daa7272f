import pytest

from canvas_cards.options import (
    Layout,
    Status,
    calculate_progress,
    get_status_color,
    normalize_profile_options,
    normalize_rank_options,
    normalize_welcome_options,
)

PROFILE = {"username": "Anya", "avatar_url": "./avatar.png"}
WELCOME = {"username": "Anya", "avatar_url": "./avatar.png", "server_name": "Eden"}
RANK = {
    "username": "Anya", "avatar_url": "./avatar.png",
    "rank": 3, "level": 7, "current_xp": 50, "next_level_xp": 100,
}


@pytest.mark.parametrize("field, expected", [
    ("discriminator", "#0000"),
    ("status", "online"),
    ("status_color", "#43B581"),
    ("bio", ""),
    ("badges", ()),
    ("background_color", "#2C2F33"),
    ("text_color", "#FFFFFF"),
    ("accent_color", "#7289DA"),
    ("background_image", ""),
    ("background_alpha", 0.2),
    ("border_radius", 10),
    ("layout", Layout.VERTICAL),
])
def test_profile_defaults(field, expected):
    assert getattr(normalize_profile_options(PROFILE), field) == expected


@pytest.mark.parametrize("field, expected", [
    ("discriminator", "#0000"),
    ("member_count", 0),
    ("background_color", "#2C2F33"),
    ("text_color", "#FFFFFF"),
    ("accent_color", "#7289DA"),
    ("blur_radius", 8),
    ("border_radius", 15),
])
def test_welcome_defaults(field, expected):
    assert getattr(normalize_welcome_options(WELCOME), field) == expected


@pytest.mark.parametrize("field, expected", [
    ("discriminator", "#0000"),
    ("background_color", "#2C2F33"),
    ("text_color", "#FFFFFF"),
    ("accent_color", "#7289DA"),
    ("rank_color", "#FFD700"),
    ("level_color", "#7289DA"),
    ("progress_bar_color", "#43B581"),
    ("progress_bar_background_color", "#23272A"),
    ("background_image", ""),
    ("background_alpha", 0.15),
    ("border_radius", 10),
    ("show_progress", True),
])
def test_rank_defaults(field, expected):
    assert getattr(normalize_rank_options(RANK), field) == expected


def test_font_sizes_and_padding_defaults():
    profile = normalize_profile_options(PROFILE)
    assert (profile.font_size.username, profile.font_size.bio, profile.font_size.badges) == (32, 16, 14)
    assert (profile.padding.top, profile.padding.right, profile.padding.bottom, profile.padding.left) == (30, 30, 30, 30)

    welcome = normalize_welcome_options(WELCOME)
    assert (welcome.font_size.title, welcome.font_size.subtitle, welcome.font_size.member_count) == (60, 28, 20)
    assert welcome.padding.left == 60 and welcome.padding.bottom == 60

    rank = normalize_rank_options(RANK)
    assert (rank.font_size.username, rank.font_size.rank, rank.font_size.level, rank.font_size.xp) == (32, 24, 20, 16)
    assert rank.padding.right == 30


def test_partial_nested_options_keep_other_defaults():
    opts = normalize_profile_options({
        **PROFILE,
        "font_size": {"bio": 20},
        "padding": {"left": 0, "top": None},
    })
    assert opts.font_size.bio == 20
    assert opts.font_size.username == 32
    assert opts.padding.left == 0
    assert opts.padding.top == 30


def test_caller_values_override_defaults():
    opts = normalize_profile_options({
        **PROFILE, "status": "idle", "accent_color": "#123456",
        "badges": ["Early", "Dev"], "layout": "horizontal",
    })
    assert opts.status_color == "#FAA61A"
    assert opts.accent_color == "#123456"
    assert opts.badges == ("Early", "Dev")
    assert opts.layout is Layout.HORIZONTAL


def test_explicit_status_color_wins():
    opts = normalize_profile_options({**PROFILE, "status": "dnd", "status_color": "#000000"})
    assert opts.status_color == "#000000"


def test_unknown_layout_falls_back_to_vertical():
    assert normalize_profile_options({**PROFILE, "layout": "diagonal"}).layout is Layout.VERTICAL


@pytest.mark.parametrize("status, color", [
    ("online", "#43B581"),
    ("idle", "#FAA61A"),
    ("dnd", "#F04747"),
    ("offline", "#747F8D"),
    (Status.DND, "#F04747"),
    ("invisible", "#747F8D"),
    ("", "#747F8D"),
    (None, "#747F8D"),
])
def test_status_color(status, color):
    assert get_status_color(status) == color


@pytest.mark.parametrize("current, total, expected", [
    (50, 100, 50.0),
    (150, 100, 100.0),
    (0, 100, 0.0),
    (-10, 100, 0.0),
    (1, 3, 100 / 3),
    (10, 0, 0.0),
    (0, 0, 0.0),
])
def test_calculate_progress(current, total, expected):
    assert calculate_progress(current, total) == pytest.approx(expected)


def test_rank_progress_derived_from_xp():
    assert normalize_rank_options({**RANK, "current_xp": 150}).progress == 100.0
    assert normalize_rank_options(RANK).progress == 50.0


def test_rank_explicit_progress_is_clamped_and_kept():
    assert normalize_rank_options({**RANK, "progress": 0}).progress == 0.0
    assert normalize_rank_options({**RANK, "progress": 250}).progress == 100.0
    assert normalize_rank_options({**RANK, "progress": -5}).progress == 0.0


def test_rank_zero_xp_with_explicit_progress():
    opts = normalize_rank_options({**RANK, "current_xp": 0, "next_level_xp": 0, "progress": 40})
    assert opts.progress == 40.0


def test_missing_required_field_raises_key_error():
    with pytest.raises(KeyError):
        normalize_welcome_options(PROFILE)


def test_options_are_immutable():
    opts = normalize_profile_options(PROFILE)
    with pytest.raises(AttributeError):
        opts.username = "Loid"
