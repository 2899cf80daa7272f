import asyncio
import json
import logging
import os
import shlex
from pathlib import Path

from canvas_cards import CardError, ProfileCard, RankCard, WelcomeCard

logger = logging.getLogger("canvas_cards.app")

COMMANDS = {
    "/profile": ("profile", ProfileCard),
    "/welcome": ("welcome", WelcomeCard),
    "/rank": ("rank", RankCard),
}

LIST_KEYS = {"badges"}
NUMBER_KEYS = {
    "rank", "level", "current_xp", "next_level_xp", "progress", "member_count",
    "border_radius", "background_alpha", "blur_radius",
}

HELP_TEXT = """Commands:
  /profile username=NAME avatar_url=PATH [status=dnd] [bio="..."] [badges=a,b]
  /welcome username=NAME avatar_url=PATH server_name=NAME [member_count=42]
  /rank username=NAME avatar_url=PATH rank=1 level=5 current_xp=50 next_level_xp=100
Nested options use dots: font_size.username=40 padding.left=20
Defaults per card type are read from data/defaults.json."""


def load_defaults(path: str | Path = Path("data") / "defaults.json") -> dict:
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load defaults from {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _parse_value(key: str, raw: str):
    if key in LIST_KEYS:
        return [part.strip() for part in raw.split(",") if part.strip()]
    if key == "show_progress":
        return raw.lower() not in ("0", "false", "no", "off")
    if key in NUMBER_KEYS or "." in key:
        try:
            return int(raw)
        except ValueError:
            return float(raw)
    return raw


def parse_options(args: str, defaults: dict | None = None) -> dict:
    options = json.loads(json.dumps(defaults or {}))
    for token in shlex.split(args):
        if "=" not in token:
            raise ValueError(f"Expected key=value, got {token!r}")
        key, raw = token.split("=", 1)
        if "." in key:
            outer, inner = key.split(".", 1)
            options.setdefault(outer, {})[inner] = _parse_value(key, raw)
        else:
            options[key] = _parse_value(key, raw)
    return options


async def handle_input(user_input: str, defaults: dict, output_dir: str = "output") -> str | None:
    user_input = user_input.strip()
    if not user_input:
        return None

    parts = user_input.split(maxsplit=1)
    cmd = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    if cmd == "/help":
        print(HELP_TEXT)
        return None
    if cmd not in COMMANDS:
        print("❌ Unknown command. Type /help for usage.")
        return None

    name, card_cls = COMMANDS[cmd]
    try:
        options = parse_options(args, defaults.get(name))
        img_bytes = await card_cls(options).to_buffer()
    except KeyError as e:
        print(f"❌ Missing required option: {e}")
        return None
    except (ValueError, CardError) as e:
        print(f"❌ {e}")
        return None

    out_path = os.path.join(output_dir, f"card_{name}.png")
    os.makedirs(output_dir, exist_ok=True)
    with open(out_path, "wb") as f:
        f.write(img_bytes)
    print(f"🖼️ Saved {out_path} ({len(img_bytes)} bytes)")
    return out_path


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    defaults = load_defaults()

    print("🎨 canvas-cards - interactive mode")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print("Type /help for commands, quit or exit to leave")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print()

    while True:
        try:
            user_input = input(">>> ")
        except (EOFError, KeyboardInterrupt):
            break

        if user_input.strip().lower() in ("quit", "exit", "q"):
            break

        await handle_input(user_input, defaults)
        print()

    print("👋 Bye!")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
