import asyncio
import io
import json

from PIL import Image

from app import handle_input, load_defaults, parse_options


def test_parse_options_types_and_nesting():
    options = parse_options(
        'username=Anya bio="hello there" badges=Dev,Early rank=3 progress=12.5 '
        'font_size.username=40 padding.left=0 show_progress=false'
    )
    assert options == {
        "username": "Anya",
        "bio": "hello there",
        "badges": ["Dev", "Early"],
        "rank": 3,
        "progress": 12.5,
        "font_size": {"username": 40},
        "padding": {"left": 0},
        "show_progress": False,
    }


def test_parse_options_merges_over_defaults():
    defaults = {"accent_color": "#000000", "font_size": {"bio": 12}}
    options = parse_options("font_size.username=40", defaults)
    assert options["accent_color"] == "#000000"
    assert options["font_size"] == {"bio": 12, "username": 40}
    assert defaults["font_size"] == {"bio": 12}


def test_load_defaults(tmp_path):
    assert load_defaults(tmp_path / "missing.json") == {}
    path = tmp_path / "defaults.json"
    path.write_text(json.dumps({"rank": {"rank_color": "#FF0000"}}), encoding="utf-8")
    assert load_defaults(path) == {"rank": {"rank_color": "#FF0000"}}
    path.write_text("{broken", encoding="utf-8")
    assert load_defaults(path) == {}


def test_handle_input_writes_card(tmp_path):
    avatar = tmp_path / "avatar.png"
    Image.new("RGB", (32, 32), "purple").save(avatar)
    out = asyncio.run(handle_input(
        f"/rank username=Anya avatar_url={avatar} rank=1 level=2 current_xp=10 next_level_xp=40",
        {},
        output_dir=str(tmp_path / "output"),
    ))
    assert out.endswith("card_rank.png")
    with open(out, "rb") as f:
        assert Image.open(io.BytesIO(f.read())).size == (900, 300)


def test_handle_input_reports_errors(tmp_path, capsys):
    assert asyncio.run(handle_input("/welcome username=Anya", {}, str(tmp_path))) is None
    assert "Missing required option" in capsys.readouterr().out

    assert asyncio.run(handle_input("/nope", {}, str(tmp_path))) is None
    assert "Unknown command" in capsys.readouterr().out

    missing = tmp_path / "missing.png"
    assert asyncio.run(handle_input(f"/profile username=Anya avatar_url={missing}", {}, str(tmp_path))) is None
    assert "missing.png" in capsys.readouterr().out
