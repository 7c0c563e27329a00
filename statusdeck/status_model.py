"""The status model shown on the device and the parser for status payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

MAX_BURN_SAMPLES = 16
MAX_TOP_FILES = 3
MAX_SESSIONS = 8
SESSION_ROWS_PER_PAGE = 3

_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1
_UINT_MAX = (1 << 32) - 1


class Activity(Enum):
    """What the assistant is doing right now."""

    WORKING = 0
    AWAITING_INPUT = 1
    NEEDS_ATTENTION = 2


class StatusParseError(ValueError):
    """A status payload was not valid JSON."""


@dataclass
class TopFile:
    path: str = ""
    added: int = 0
    removed: int = 0


@dataclass
class SessionSummary:
    index: int = 0
    id: str = ""
    name: str = ""
    activity: Activity = Activity.WORKING
    selected: bool = False


@dataclass
class StatusModel:
    """Everything the status pages draw; `has_*` flags mark groups received."""

    session_active: bool = True
    activity: Activity = Activity.WORKING
    badge_brightness: int = 255

    model_short: str = ""

    has_context: bool = False
    ctx_used_pct: int = 0
    ctx_tokens: int = 0
    ctx_limit: int = 0
    exceeds_200k: bool = False

    has_cost: bool = False
    cost_session_usd: float = 0.0
    cost_burn_per_hr: float = 0.0
    cost_duration_min: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    has_block: bool = False
    block_pct: int = 0
    block_reset_in_min: int = 0

    has_weekly: bool = False
    weekly_pct: int = 0

    has_today: bool = False
    today_cost: float = 0.0
    today_sessions: int = 0

    burn: List[float] = field(default_factory=list)

    ws_dir: str = ""
    ws_worktree: str = ""

    has_git: bool = False
    branch: str = ""
    ahead: int = 0
    behind: int = 0
    staged: int = 0
    unstaged: int = 0
    untracked: int = 0
    last_commit_hash: str = ""
    last_commit_msg: str = ""
    last_commit_mins: int = 0
    has_diff: bool = False
    diff_files_changed: int = 0
    diff_lines_added: int = 0
    diff_lines_removed: int = 0
    top_files: List[TopFile] = field(default_factory=list)

    has_pr: bool = False
    pr_number: int = 0
    pr_review: str = ""

    sessions: List[SessionSummary] = field(default_factory=list)
    session_page_index: int = 0


@dataclass
class DeviceInfo:
    """Board identity, clock and battery shown around the pages."""

    board: str = "CoreS3"
    fw: str = ""
    device_id: str = ""
    clock: str = "--:--"
    date: str = ""
    battery_pct: int = 0
    charging: bool = False


def parse_activity(value: Any) -> Activity:
    """Map a wire activity string to Activity; unknown values mean WORKING."""
    if value == "needs_attention":
        return Activity.NEEDS_ATTENTION
    if value == "awaiting_input":
        return Activity.AWAITING_INPUT
    return Activity.WORKING


def _obj(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _field(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, Mapping) else None


def _str(value: Any, default: str = "", limit: Optional[int] = None) -> str:
    text = value if isinstance(value, str) else default
    return text[:limit] if limit is not None else text


def _int(value: Any, default: int = 0) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and _INT_MIN <= value <= _INT_MAX:
        return value
    return default


def _uint(value: Any, default: int = 0) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _UINT_MAX:
        return value
    return default


def _float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return default


def _bool(value: Any, default: bool = False) -> bool:
    return value if isinstance(value, bool) else default


def parse_status_frame(
    payload: Union[str, bytes, bytearray, Mapping[str, Any]],
    model: Optional[StatusModel] = None,
) -> StatusModel:
    """Apply a `status` payload to `model` (a new one if None) and return it.

    A JSON text is parsed first; invalid JSON raises StatusParseError.
    Groups missing from the payload leave the model's values alone.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            doc = json.loads(payload)
        except ValueError as exc:
            raise StatusParseError(f"invalid status JSON: {exc}") from exc
    else:
        doc = payload
    if model is None:
        model = StatusModel()
    root: Mapping[str, Any] = doc if isinstance(doc, Mapping) else {}

    model.session_active = _str(root.get("state"), "active") != "idle"
    model.activity = parse_activity(_str(root.get("activity"), "working"))

    short = _field(root.get("model"), "short")
    if isinstance(short, str):
        model.model_short = short[:23]

    ctx = _obj(root.get("context"))
    if ctx is not None:
        model.has_context = True
        model.ctx_used_pct = _int(ctx.get("usedPct"))
        model.ctx_tokens = _uint(ctx.get("tokens"))
        model.ctx_limit = _uint(ctx.get("limit"))
        model.exceeds_200k = _bool(ctx.get("exceeds200k"))

    cost = _obj(root.get("cost"))
    if cost is not None:
        model.has_cost = True
        model.cost_session_usd = _float(cost.get("sessionUsd"))
        model.cost_burn_per_hr = _float(cost.get("burnPerHr"))
        model.cost_duration_min = _int(cost.get("durationMin"))
        model.lines_added = _int(cost.get("linesAdded"))
        model.lines_removed = _int(cost.get("linesRemoved"))

    block = _obj(root.get("block"))
    if block is not None:
        model.has_block = True
        model.block_pct = _int(block.get("usedPct"))
        model.block_reset_in_min = _int(block.get("resetInMin"))

    weekly = _obj(root.get("weekly"))
    if weekly is not None:
        model.has_weekly = True
        model.weekly_pct = _int(weekly.get("usedPct"))

    today = _obj(root.get("today"))
    if today is not None:
        model.has_today = True
        model.today_cost = _float(today.get("costUsd"))
        model.today_sessions = _int(today.get("sessions"))

    history = root.get("burnHistory")
    if isinstance(history, list):
        model.burn = [_float(v) for v in history[-MAX_BURN_SAMPLES:]]

    workspace = _obj(root.get("workspace"))
    if workspace is not None:
        model.ws_dir = _str(workspace.get("dir"), limit=95)
        model.ws_worktree = _str(workspace.get("worktree"), limit=39)

    git = _obj(root.get("git"))
    if git is not None:
        _apply_git(git, model)

    pr = _obj(root.get("pr"))
    if pr is not None:
        model.has_pr = True
        model.pr_number = _int(pr.get("number"))
        model.pr_review = _str(pr.get("reviewState"), limit=15)

    sessions = root.get("sessions")
    if isinstance(sessions, list):
        model.sessions = [_parse_session(item) for item in sessions[:MAX_SESSIONS]]
        count = len(model.sessions)
        max_page = (count - 1) // SESSION_ROWS_PER_PAGE if count > 0 else 0
        if model.session_page_index > max_page:
            model.session_page_index = max_page
    else:
        model.sessions = []
        model.session_page_index = 0
    return model


def _apply_git(git: Mapping[str, Any], model: StatusModel) -> None:
    model.has_git = True
    model.branch = _str(git.get("branch"), limit=39)
    model.ahead = _int(git.get("ahead"))
    model.behind = _int(git.get("behind"))
    model.staged = _int(git.get("staged"))
    model.unstaged = _int(git.get("unstaged"))
    model.untracked = _int(git.get("untracked"))
    last = git.get("lastCommit")
    model.last_commit_hash = _str(_field(last, "hash"), limit=9)
    model.last_commit_msg = _str(_field(last, "msg"), limit=47)
    model.last_commit_mins = _int(_field(last, "minsAgo"))
    diff = _obj(git.get("diff"))
    if diff is None:
        return
    model.has_diff = True
    model.diff_files_changed = _int(diff.get("filesChanged"))
    model.diff_lines_added = _int(diff.get("linesAdded"))
    model.diff_lines_removed = _int(diff.get("linesRemoved"))
    top = diff.get("topFiles")
    if isinstance(top, list):
        model.top_files = [
            TopFile(
                path=_str(_field(item, "path"), limit=39),
                added=_int(_field(item, "added")),
                removed=_int(_field(item, "removed")),
            )
            for item in top[:MAX_TOP_FILES]
        ]


def _parse_session(item: Any) -> SessionSummary:
    return SessionSummary(
        index=_int(_field(item, "index")),
        id=_str(_field(item, "id"), limit=31),
        name=_str(_field(item, "name"), limit=39),
        activity=parse_activity(_str(_field(item, "activity"), "working")),
        selected=_bool(_field(item, "selected")),
    )