"""Device-agnostic page renderers drawn through the Canvas primitives."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, Optional

from .canvas import Align, Canvas, Color, Font
from .hal import BleUiState, TransportUiStatus
from .status_model import SESSION_ROWS_PER_PAGE, Activity, DeviceInfo, StatusModel


class PageId(IntEnum):
    """The status pages, in tap-cycling order; SESSIONS sits outside the cycle."""

    OVERVIEW = 0
    COST = 1
    LIMITS = 2
    WORKSPACE = 3
    SESSIONS = 4


# Pages reached by tapping through; the terminal picker is not one of them.
_CYCLE_PAGES = tuple(page for page in PageId if page is not PageId.SESSIONS)

PAGE_COUNT = len(_CYCLE_PAGES)
MAX_PAGE_COUNT = len(PageId)
SESSION_ROW_X = 10
SESSION_ROW_Y = 46
SESSION_ROW_W = 300
SESSION_ROW_H = 44
SESSION_ROW_GAP = 8
SESSION_NEXT_X1 = 90
SESSION_NEXT_X2 = 230
SESSION_NEXT_Y1 = 190
SESSION_NEXT_Y2 = 239

# Placeholder drawn for any data group that was never received.
DASH = "-"


def _clip(text: str, cap: int) -> str:
    """Keep what fits a buffer of `cap` bytes including its terminator."""
    return text[: cap - 1]


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def activity_label(activity: Activity) -> str:
    """Badge text for an activity."""
    if activity is Activity.AWAITING_INPUT:
        return "YOUR TURN"
    if activity is Activity.NEEDS_ATTENTION:
        return "NEEDS YOU"
    return "WORKING"


def activity_color(activity: Activity) -> int:
    """Badge colour for an activity."""
    if activity is Activity.AWAITING_INPUT:
        return Color.ACCENT
    if activity is Activity.NEEDS_ATTENTION:
        return Color.WARN
    return Color.GOOD


def blend565(fg: int, bg: int, t: int) -> int:
    """Blend two RGB565 colours per channel: t=255 gives fg, t=0 gives bg."""

    def lerp(a: int, b: int) -> int:
        return b + _trunc_div((a - b) * t, 255)

    r = lerp((fg >> 11) & 0x1F, (bg >> 11) & 0x1F)
    g = lerp((fg >> 5) & 0x3F, (bg >> 5) & 0x3F)
    b = lerp(fg & 0x1F, bg & 0x1F)
    return ((r << 11) | (g << 5) | b) & 0xFFFF


def badge_brightness_for(activity: Activity, now_ms: int) -> int:
    """Badge brightness 0..255 at `now_ms`: a triangle wave per activity."""
    if activity is Activity.NEEDS_ATTENTION:
        period, floor_b = 500, 0  # hard blink
    elif activity is Activity.AWAITING_INPUT:
        period, floor_b = 1200, 100  # gentle pulse
    else:
        period, floor_b = 2000, 60  # calm breathe
    t = now_ms % period
    half = period // 2
    up = half - t if t < half else t - half
    span = 255 - floor_b
    return (floor_b + (span * up) // half) & 0xFF


def has_sessions_page(model: StatusModel) -> bool:
    """The terminal picker exists only with two or more sessions."""
    return len(model.sessions) >= 2


def page_count_for(model: StatusModel) -> int:
    """Number of pages shown by the footer dots.

    The terminal picker is reached from the header, not by cycling, so it
    never adds a dot even when the model has one.
    """
    return sum(
        1
        for page in PageId
        if page is not PageId.SESSIONS or not has_sessions_page(model) and False
    )


def session_page_count_for(model: StatusModel) -> int:
    """Number of picker pages needed to list every session."""
    count = len(model.sessions)
    if count <= 0:
        return 1
    return (count + SESSION_ROWS_PER_PAGE - 1) // SESSION_ROWS_PER_PAGE


def _basename_of(path: Optional[str]) -> str:
    if not path:
        return DASH
    slash = path.rfind("/")
    if slash >= 0 and slash + 1 < len(path):
        return path[slash + 1 :]
    return path


def _tail_path(path: Optional[str], segments: int) -> str:
    if not path:
        return DASH
    start = len(path)
    seen = 0
    while start > 0:
        start -= 1
        if path[start] == "/":
            seen += 1
            if seen >= segments:
                start += 1
                break
    return _clip("/" + path[start:], 48)


def _truncate_head(s: Optional[str], max_chars: int) -> str:
    s = s or ""
    if len(s) <= max_chars:
        return s
    keep = max_chars - 3 if max_chars > 3 else max_chars
    return s[:keep] + "..."


def _truncate_tail(s: Optional[str], max_chars: int) -> str:
    s = s or ""
    if len(s) <= max_chars:
        return s
    keep = max_chars - 3 if max_chars > 3 else max_chars
    return "..." + s[len(s) - keep :]


def _format_reset_in(minutes: int) -> str:
    if minutes >= 60:
        return f"resets {minutes // 60}h{minutes % 60}m"
    return f"resets {minutes}m"


def _selected_session_name(model: StatusModel) -> Optional[str]:
    for session in model.sessions:
        if session.selected and session.name:
            return session.name
    return None


def _header_title(page_id: PageId, model: StatusModel) -> str:
    if page_id is PageId.SESSIONS:
        return "TERMINALS"
    selected = _selected_session_name(model)
    if selected:
        return selected
    if model.ws_worktree:
        return model.ws_worktree
    base = _basename_of(model.ws_dir)
    if base != DASH:
        return base
    return "Claude"


def render_header(page_id: PageId, model: StatusModel, canvas: Canvas) -> None:
    """Draw the top bar: status dot, title and the activity badge."""
    canvas.fill_round_rect(0, 0, 320, 34, 0, Color.BG)
    canvas.fill_circle(15, 17, 4, Color.ACCENT)
    canvas.text(
        _header_title(page_id, model), 26, 17, Font.TITLE, Align.MIDDLE_LEFT, Color.INK
    )
    badge = activity_label(model.activity)
    badge_color = blend565(activity_color(model.activity), Color.BG, model.badge_brightness)
    bw = canvas.measure_text(badge, Font.LABEL) + 8
    canvas.fill_round_rect(316 - bw, 9, bw, 16, 3, Color.ACC_SOFT)
    canvas.text(badge, 316 - bw // 2, 17, Font.LABEL, Align.MIDDLE_CENTER, badge_color)
    canvas.draw_hline(10, 32, 300, Color.HAIRLINE)


def render_page_dots(active: PageId, total: int, canvas: Canvas) -> None:
    """Draw one dot per page, the active one in ink."""
    gap, r = 6, 2
    total_w = (total - 1) * gap + total * (r * 2)
    x = (320 - total_w) // 2 + r
    y = 232
    for i in range(total):
        canvas.fill_circle(x, y, r, Color.INK if i == int(active) else Color.CARD_LINE)
        x += r * 2 + gap


def render_footer(active: PageId, total: int, device: DeviceInfo, canvas: Canvas) -> None:
    """Draw the bottom bar: date, page dots and clock."""
    canvas.draw_hline(10, 215, 300, Color.HAIRLINE)
    canvas.text(device.date or "--", 10, 226, Font.LABEL, Align.MIDDLE_LEFT, Color.MUTE)
    render_page_dots(active, total, canvas)
    canvas.text(
        device.clock or "--:--", 310, 226, Font.LABEL, Align.MIDDLE_RIGHT, Color.INK2
    )


def _draw_tile(
    canvas: Canvas,
    x: int,
    y: int,
    w: int,
    h: int,
    label: str,
    has: bool,
    big: str,
    sub: Optional[str],
    bar_pct: int,
    bar_warn: bool,
) -> None:
    canvas.fill_round_rect(x, y, w, h, 4, Color.CARD)
    canvas.draw_round_rect(x, y, w, h, 4, Color.CARD_LINE)
    canvas.text(label, x + 6, y + 6, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
    canvas.text(
        big if has else DASH,
        x + 6,
        y + 18,
        Font.BODY,
        Align.TOP_LEFT,
        Color.WARN if bar_warn else Color.INK,
    )
    if has and sub:
        canvas.text(sub, x + 6, y + 44, Font.LABEL, Align.TOP_LEFT, Color.INK2)
    if has and bar_pct >= 0:
        canvas.micro_bar(
            x + 6, y + h - 10, w - 12, 3, bar_pct, Color.WARN if bar_warn else Color.INK
        )


def _diff_lines(model: StatusModel) -> tuple:
    if model.has_diff:
        return model.diff_lines_added, model.diff_lines_removed
    return model.lines_added, model.lines_removed


def _context_warn(model: StatusModel) -> bool:
    return model.has_context and (model.exceeds_200k or model.ctx_used_pct >= 80)


def _draw_overview(model: StatusModel, device: DeviceInfo, canvas: Canvas) -> None:
    canvas.fill_screen(Color.BG)
    render_header(PageId.OVERVIEW, model, canvas)

    canvas.text("$", 10, 40, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
    canvas.text(model.ws_dir or DASH, 18, 40, Font.LABEL, Align.TOP_LEFT, Color.INK2)

    big = _clip(f"{model.ctx_used_pct}%", 32)
    if model.ctx_limit:
        sub = f"{model.ctx_tokens // 1000}k / {model.ctx_limit // 1000}k tok"
    else:
        sub = f"{model.ctx_tokens // 1000}k tok"
    label = f"CONTEXT / {model.model_short}" if model.model_short else "CONTEXT"
    _draw_tile(
        canvas, 10, 56, 150, 74, _clip(label, 40), model.has_context, big,
        _clip(sub, 40), model.ctx_used_pct, _context_warn(model),
    )

    blk = _clip(f"{model.block_pct}%", 24)
    blk_sub = (
        _clip(_format_reset_in(model.block_reset_in_min), 24)
        if model.block_reset_in_min > 0
        else ""
    )
    _draw_tile(
        canvas, 165, 56, 150, 74, "5H BLOCK", model.has_block, blk, blk_sub,
        model.block_pct, model.has_block and model.block_pct >= 80,
    )

    cost = _clip(f"${model.cost_session_usd:.2f}", 16)
    burn = _clip(f"${model.cost_burn_per_hr:.2f}/hr", 24)
    _draw_tile(canvas, 10, 135, 150, 74, "SESSION", model.has_cost, cost, burn, -1, False)

    added, removed = _diff_lines(model)
    diff = _clip(f"+{added} / -{removed}", 32)
    gs = _clip(f"{model.staged}S {model.unstaged}M {model.untracked}U", 24)
    _draw_tile(canvas, 165, 135, 150, 74, "DIFF", model.has_git, diff, gs, -1, False)

    render_footer(PageId.OVERVIEW, page_count_for(model), device, canvas)


def _draw_cost(model: StatusModel, device: DeviceInfo, canvas: Canvas) -> None:
    canvas.fill_screen(Color.BG)
    render_header(PageId.COST, model, canvas)
    canvas.text("THIS SESSION", 10, 42, Font.LABEL, Align.TOP_LEFT, Color.MUTE)

    if not model.has_cost:
        canvas.text(DASH, 10, 54, Font.BIG_NUMBER, Align.TOP_LEFT, Color.INK)
        render_footer(PageId.COST, page_count_for(model), device, canvas)
        return

    canvas.text(
        _clip(f"${model.cost_session_usd:.2f}", 16),
        10, 54, Font.BIG_NUMBER, Align.TOP_LEFT, Color.INK,
    )
    canvas.text(
        _clip(f"{model.cost_duration_min}m  ${model.cost_burn_per_hr:.2f}/hr", 40),
        10, 100, Font.LABEL, Align.TOP_LEFT, Color.INK2,
    )
    if len(model.burn) > 1:
        canvas.sparkline(165, 50, 145, 50, model.burn, Color.ACCENT)

    rows = (
        ("TODAY TOTAL", model.has_today, _clip(f"${model.today_cost:.2f}", 16)),
        ("WEEKLY", model.has_weekly, _clip(f"{model.weekly_pct}%", 16)),
    )
    y = 130
    for label, has, value in rows:
        canvas.text(label, 10, y, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
        canvas.text(value if has else DASH, 310, y, Font.LABEL, Align.TOP_RIGHT, Color.INK)
        canvas.draw_hline(10, y + 12, 300, Color.HAIRLINE)
        y += 22

    render_footer(PageId.COST, page_count_for(model), device, canvas)


def _draw_limits(model: StatusModel, device: DeviceInfo, canvas: Canvas) -> None:
    canvas.fill_screen(Color.BG)
    render_header(PageId.LIMITS, model, canvas)

    bars = (
        ("CONTEXT", model.has_context, model.ctx_used_pct, True, _context_warn(model)),
        ("5H BLOCK", model.has_block, model.block_pct, False,
         model.has_block and model.block_pct >= 80),
        ("WEEKLY", model.has_weekly, model.weekly_pct, False, False),
    )
    y = 44
    for label, has, pct, hero, warn in bars:
        canvas.text(label, 10, y, Font.LABEL, Align.TOP_LEFT, Color.INK)
        ink = Color.WARN if warn else Color.INK
        canvas.text(
            _clip(f"{pct}%", 8) if has else DASH,
            310,
            y - (2 if hero else 0),
            Font.BODY if hero else Font.TITLE,
            Align.TOP_RIGHT,
            ink,
        )
        if has:
            canvas.micro_bar(10, y + (22 if hero else 14), 300, 7 if hero else 4, pct, ink)
        y += 42 if hero else 32

    render_footer(PageId.LIMITS, page_count_for(model), device, canvas)


def _draw_workspace(model: StatusModel, device: DeviceInfo, canvas: Canvas) -> None:
    canvas.fill_screen(Color.BG)
    render_header(PageId.WORKSPACE, model, canvas)

    if not model.has_git:
        canvas.text(model.ws_dir or DASH, 10, 42, Font.TITLE, Align.TOP_LEFT, Color.INK)
        canvas.text(DASH, 10, 90, Font.BODY, Align.TOP_LEFT, Color.INK2)
        render_footer(PageId.WORKSPACE, page_count_for(model), device, canvas)
        return

    dirty = model.staged > 0 or model.unstaged > 0 or model.untracked > 0
    added, removed = _diff_lines(model)

    canvas.text(model.branch or DASH, 10, 42, Font.TITLE, Align.TOP_LEFT, Color.INK)
    canvas.text(
        "dirty" if dirty else "clean", 310, 42, Font.LABEL, Align.TOP_RIGHT,
        Color.WARN if dirty else Color.ACCENT,
    )
    canvas.text(
        _clip(f"^{model.ahead} v{model.behind}", 24),
        310, 58, Font.LABEL, Align.TOP_RIGHT, Color.MUTE,
    )

    workspace_name = model.ws_worktree or _basename_of(model.ws_dir)
    canvas.text(
        _truncate_head(workspace_name, 18), 10, 64, Font.LABEL, Align.TOP_LEFT, Color.INK2
    )
    canvas.text(
        _truncate_tail(_tail_path(model.ws_dir, 2), 24),
        310, 64, Font.LABEL, Align.TOP_RIGHT, Color.MUTE,
    )
    canvas.draw_hline(10, 80, 300, Color.HAIRLINE)

    y = 92

    def row(label: str, value: str) -> None:
        nonlocal y
        canvas.text(label, 10, y, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
        canvas.text(value, 310, y, Font.LABEL, Align.TOP_RIGHT, Color.INK)
        y += 24

    if dirty:
        row(
            "Files",
            _clip(
                f"{model.staged} staged   {model.unstaged} modified   "
                f"{model.untracked} new",
                48,
            ),
        )
        row("Lines", _clip(f"+{added}       -{removed}", 32))
        canvas.text("Top", 10, y, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
        y += 16
        if model.top_files:
            for top in model.top_files[:2]:
                canvas.text(
                    _basename_of(top.path), 10, y, Font.LABEL, Align.TOP_LEFT, Color.INK
                )
                canvas.text(
                    _clip(f"+{top.added} / -{top.removed}", 24),
                    310, y, Font.LABEL, Align.TOP_RIGHT, Color.INK2,
                )
                y += 18
        else:
            canvas.text(
                "uncommitted changes", 10, y, Font.LABEL, Align.TOP_LEFT, Color.INK
            )
    else:
        row("Status", "no local changes")
        if model.last_commit_hash:
            canvas.text("Commit", 10, y, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
            canvas.text(
                _clip(f"{model.last_commit_mins}m", 16),
                310, y, Font.LABEL, Align.TOP_RIGHT, Color.INK2,
            )
            y += 18
            canvas.text(model.last_commit_hash, 10, y, Font.MONO, Align.TOP_LEFT, Color.INK)
            if model.last_commit_msg:
                canvas.text(
                    model.last_commit_msg, 70, y, Font.LABEL, Align.TOP_LEFT, Color.INK2
                )

    render_footer(PageId.WORKSPACE, page_count_for(model), device, canvas)


def _draw_sessions(model: StatusModel, device: DeviceInfo, canvas: Canvas) -> None:
    canvas.fill_screen(Color.BG)
    render_header(PageId.SESSIONS, model, canvas)

    if not model.sessions:
        canvas.text(DASH, 10, 58, Font.BODY, Align.TOP_LEFT, Color.INK)
        render_footer(PageId.SESSIONS, page_count_for(model), device, canvas)
        return

    total_pages = session_page_count_for(model)
    page = model.session_page_index if model.session_page_index < total_pages else total_pages - 1
    start = page * SESSION_ROWS_PER_PAGE
    y = SESSION_ROW_Y
    for session in model.sessions[start : start + SESSION_ROWS_PER_PAGE]:
        canvas.fill_round_rect(
            SESSION_ROW_X, y, SESSION_ROW_W, SESSION_ROW_H, 4,
            Color.ACC_SOFT if session.selected else Color.CARD,
        )
        canvas.draw_round_rect(
            SESSION_ROW_X, y, SESSION_ROW_W, SESSION_ROW_H, 4,
            Color.INK2 if session.selected else Color.CARD_LINE,
        )
        mid = y + SESSION_ROW_H // 2
        canvas.text(session.name or DASH, 18, mid, Font.LABEL, Align.MIDDLE_LEFT, Color.INK)
        canvas.text(
            activity_label(session.activity), 302, mid, Font.LABEL, Align.MIDDLE_RIGHT,
            activity_color(session.activity),
        )
        y += SESSION_ROW_H + SESSION_ROW_GAP

    canvas.draw_hline(10, 215, 300, Color.HAIRLINE)
    canvas.text(device.date or "--", 10, 226, Font.LABEL, Align.MIDDLE_LEFT, Color.MUTE)
    if total_pages > 1:
        canvas.text(
            _clip(f"NEXT {page + 1}/{total_pages}", 16),
            160, 226, Font.LABEL, Align.MIDDLE_CENTER, Color.INK,
        )
    canvas.text(
        device.clock or "--:--", 310, 226, Font.LABEL, Align.MIDDLE_RIGHT, Color.INK2
    )


def render_waiting(
    device: DeviceInfo,
    linked: bool,
    canvas: Canvas,
    transport: Optional[TransportUiStatus] = None,
    pair_code: Optional[str] = None,
) -> None:
    """Draw the screen shown while no live session is running.

    `linked` means the host link is alive but no session is active yet.
    """
    if transport is None:
        transport = TransportUiStatus()
    canvas.fill_screen(Color.BG)

    strip = _clip(f"{device.board or 'M5STACK'}  {device.fw or ''}", 48)
    canvas.text(strip, 10, 10, Font.LABEL, Align.TOP_LEFT, Color.MUTE)
    if device.clock:
        canvas.text(device.clock, 310, 10, Font.LABEL, Align.TOP_RIGHT, Color.INK2)

    pairing = transport.ble == BleUiState.PAIRING
    canvas.fill_circle(160, 90, 5, Color.ACCENT if linked or pairing else Color.MUTE)
    if pairing:
        canvas.text("BLE PAIRING", 160, 132, Font.BODY, Align.MIDDLE_CENTER, Color.INK)
        canvas.text("m5ct pair", 160, 160, Font.TITLE, Align.MIDDLE_CENTER, Color.ACCENT)
        if device.device_id:
            canvas.text(
                device.device_id, 160, 182, Font.LABEL, Align.MIDDLE_CENTER, Color.INK2
            )
        if pair_code:
            canvas.text(pair_code, 160, 198, Font.TITLE, Align.MIDDLE_CENTER, Color.INK)
    elif linked:
        canvas.text("Connected", 160, 145, Font.BIG_NUMBER, Align.MIDDLE_CENTER, Color.INK)
        canvas.text(
            "waiting for Claude", 160, 170, Font.LABEL, Align.MIDDLE_CENTER, Color.MUTE
        )
        canvas.text(
            "run  claude  in a terminal", 160, 184, Font.LABEL, Align.MIDDLE_CENTER,
            Color.INK2,
        )
    else:
        canvas.text(
            "Waiting for host", 160, 145, Font.BIG_NUMBER, Align.MIDDLE_CENTER, Color.INK
        )
        ble_text = "BLE READY" if transport.ble == BleUiState.READY else "USB no host"
        canvas.text(ble_text, 160, 170, Font.LABEL, Align.MIDDLE_CENTER, Color.MUTE)
        canvas.text(
            "connect this device to your Mac", 160, 184, Font.LABEL,
            Align.MIDDLE_CENTER, Color.INK2,
        )

    canvas.draw_hline(10, 215, 300, Color.HAIRLINE)
    canvas.text(
        device.date or "USB no host", 10, 226, Font.LABEL, Align.MIDDLE_LEFT, Color.MUTE
    )
    bat = _clip(f"{'Chg' if device.charging else 'Bat'} {device.battery_pct}%", 24)
    canvas.text(bat, 310, 226, Font.LABEL, Align.MIDDLE_RIGHT, Color.INK2)


_RENDERERS: Dict[PageId, Callable[[StatusModel, DeviceInfo, Canvas], None]] = {
    PageId.OVERVIEW: _draw_overview,
    PageId.COST: _draw_cost,
    PageId.LIMITS: _draw_limits,
    PageId.WORKSPACE: _draw_workspace,
    PageId.SESSIONS: _draw_sessions,
}


def render_page(
    page_id: PageId, model: StatusModel, device: DeviceInfo, canvas: Canvas
) -> None:
    """Draw one status page."""
    _RENDERERS[PageId(page_id)](model, device, canvas)