"""PIL-based key images for the Memory Match deck."""

from PIL import Image, ImageDraw, ImageFont

from mindgym.memory import Phase, TileView

SIZE = (96, 96)
FONT_PATH = "/System/Library/Fonts/Helvetica.ttc"
HUD_BG = "#111827"

TOKEN_COLORS = {
    "star": "#eab308",
    "heart": "#ef4444",
    "feather": "#a855f7",
    "cloud": "#60a5fa",
    "zap": "#facc15",
    "coffee": "#92400e",
    "tractor": "#16a34a",
    "anchor": "#1d4ed8",
    "palette": "#ec4899",
    "gift": "#f97316",
    "moon": "#6366f1",
    "sun": "#fbbf24",
    "ball": "#ea580c",
    "diamond": "#06b6d4",
    "bone": "#a8a29e",
    "car": "#dc2626",
    "bike": "#84cc16",
    "plane": "#14b8a6",
}

STATUS_LINES = {
    Phase.MENU: ("READY?", "#2dd4bf"),
    Phase.PREVIEW: ("MEMORIZE", "#facc15"),
    Phase.PLAYING: ("FIND", "#2dd4bf"),
    Phase.WON: ("YOU WIN!", "#34d399"),
    Phase.LOST: ("TIME UP", "#f87171"),
}


def _font(size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(FONT_PATH, size)
    except OSError:
        return ImageFont.load_default()


def token_color(token: str) -> str:
    return TOKEN_COLORS.get(token, "#6b7280")


def format_time(seconds: int) -> str:
    """Seconds as mm:ss."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def render_face_down(size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "#0d9488")
    d = ImageDraw.Draw(img)
    d.rectangle([4, 4, size[0] - 5, size[1] - 5], outline="#0f766e", width=3)
    d.text((size[0] // 2, size[1] // 2), "?", font=_font(40), fill="#ccfbf1", anchor="mm")
    return img


def render_face_up(token: str, size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "white")
    d = ImageDraw.Draw(img)
    d.ellipse([24, 14, 72, 62], fill=token_color(token))
    d.text((size[0] // 2, 80), token.upper(), font=_font(13), fill="#3730a3", anchor="mm")
    return img


def render_matched(token: str, size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "#ccfbf1")
    d = ImageDraw.Draw(img)
    d.ellipse([24, 14, 72, 62], fill=token_color(token))
    d.text((size[0] // 2, 38), "✓", font=_font(30), fill="white", anchor="mm")
    d.text((size[0] // 2, 80), token.upper(), font=_font(13), fill="#0f766e", anchor="mm")
    return img


def render_tile(tile: TileView, size=SIZE) -> Image.Image:
    if tile.matched:
        return render_matched(tile.token, size)
    if tile.revealed:
        return render_face_up(tile.token, size)
    return render_face_down(size)


def render_stat(label: str, value: str, color: str = "#2dd4bf", size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, HUD_BG)
    d = ImageDraw.Draw(img)
    d.text((48, 20), label, font=_font(14), fill="#9ca3af", anchor="mt")
    d.text((48, 50), value, font=_font(22), fill=color, anchor="mt")
    return img


def render_hud_title(size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, HUD_BG)
    d = ImageDraw.Draw(img)
    d.text((48, 38), "MEMORY", font=_font(15), fill="#f59e0b", anchor="mm")
    d.text((48, 60), "MASTER", font=_font(12), fill="#fbbf24", anchor="mm")
    return img


def render_hud_score(score: int, size=SIZE) -> Image.Image:
    return render_stat("SCORE", str(score), size=size)


def render_hud_time(seconds: int, playing: bool = True, size=SIZE) -> Image.Image:
    color = "#ef4444" if playing and seconds <= 10 else "#818cf8"
    return render_stat("TIME", format_time(seconds), color, size=size)


def render_hud_cards_left(cards: int, size=SIZE) -> Image.Image:
    return render_stat("LEFT", str(cards), "#9ca3af", size=size)


def render_status(phase: Phase, size=SIZE) -> Image.Image:
    text, color = STATUS_LINES[phase]
    img = Image.new("RGB", size, "#374151")
    d = ImageDraw.Draw(img)
    d.text((48, 48), text, font=_font(14), fill=color, anchor="mm")
    return img


def render_hud_empty(size=SIZE) -> Image.Image:
    return Image.new("RGB", size, HUD_BG)


def render_start(label: str = "START", size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "#065f46")
    d = ImageDraw.Draw(img)
    d.text((48, 38), "PRESS", font=_font(16), fill="white", anchor="mm")
    d.text((48, 58), label, font=_font(16), fill="#34d399", anchor="mm")
    return img


def render_menu(size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "#374151")
    d = ImageDraw.Draw(img)
    d.text((48, 30), "<< BACK", font=_font(14), fill="#fbbf24", anchor="mt")
    d.text((48, 52), "MENU", font=_font(14), fill="#9ca3af", anchor="mt")
    return img


def render_restart(size=SIZE) -> Image.Image:
    img = Image.new("RGB", size, "#4338ca")
    d = ImageDraw.Draw(img)
    d.text((48, 38), "↻", font=_font(28), fill="white", anchor="mm")
    d.text((48, 70), "RESTART", font=_font(13), fill="#c7d2fe", anchor="mm")
    return img


def render_hud_bonus(bonus: int, size=SIZE) -> Image.Image:
    return render_stat("BONUS", f"+{bonus}", "#34d399", size=size)
