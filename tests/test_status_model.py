import pytest

from statusdeck.status_model import (
    Activity,
    DeviceInfo,
    SessionSummary,
    StatusModel,
    StatusParseError,
    parse_activity,
    parse_status_frame,
)


def test_minimal_frame_sets_session_active():
    m = StatusModel()
    parse_status_frame('{"state":"active"}', m)
    assert m.session_active is True
    assert m.has_context is False
    assert m.has_git is False


def test_full_frame_populates_groups():
    j = (
        '{"state":"active","model":{"short":"Sonnet 4.6"},'
        '"context":{"usedPct":47,"tokens":94000,"limit":200000,"exceeds200k":false},'
        '"block":{"usedPct":22,"resetInMin":132},"weekly":{"usedPct":18},'
        '"git":{"branch":"feat/x","ahead":3,"staged":2}}'
    )
    m = parse_status_frame(j, StatusModel())
    assert m.model_short == "Sonnet 4.6"
    assert m.has_context and m.ctx_used_pct == 47
    assert m.ctx_tokens == 94000 and m.ctx_limit == 200000
    assert m.has_block and m.block_reset_in_min == 132
    assert m.has_weekly and m.weekly_pct == 18
    assert m.has_git and m.branch == "feat/x"
    assert m.ahead == 3
    assert m.staged == 2


def test_rejects_bad_json():
    with pytest.raises(StatusParseError):
        parse_status_frame("{not json", StatusModel())


def test_burn_history_keeps_most_recent_16():
    j = '{"state":"active","burnHistory":[0,1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16,17,18,19]}'
    m = parse_status_frame(j, StatusModel())
    assert len(m.burn) == 16
    assert m.burn[0] == 4.0
    assert m.burn[15] == 19.0


def test_state_active_and_idle_map_to_session_active():
    assert parse_status_frame('{"state":"active"}', StatusModel()).session_active is True
    assert parse_status_frame('{"state":"idle"}', StatusModel()).session_active is False


def test_git_diff_parses_summary_and_clamps_top_files():
    j = (
        '{"state":"active","git":{"branch":"feat/diff",'
        '"diff":{"filesChanged":8,"linesAdded":120,"linesRemoved":45,'
        '"topFiles":['
        '{"path":"firmware/src/main.cpp","added":40,"removed":5},'
        '{"path":"lib/m5render/status_model.cpp","added":30,"removed":20},'
        '{"path":"test/status_model/test_main.cpp","added":25,"removed":10},'
        '{"path":"daemon/src/status.ts","added":100,"removed":100}'
        "]}}}"
    )
    m = parse_status_frame(j, StatusModel())
    assert m.has_git and m.has_diff
    assert m.diff_files_changed == 8
    assert m.diff_lines_added == 120
    assert m.diff_lines_removed == 45
    assert len(m.top_files) == 3
    assert (m.top_files[0].path, m.top_files[0].added, m.top_files[0].removed) == (
        "firmware/src/main.cpp",
        40,
        5,
    )
    assert (m.top_files[1].path, m.top_files[1].added, m.top_files[1].removed) == (
        "lib/m5render/status_model.cpp",
        30,
        20,
    )
    assert (m.top_files[2].path, m.top_files[2].added, m.top_files[2].removed) == (
        "test/status_model/test_main.cpp",
        25,
        10,
    )


def test_activity_defaults_to_working_when_absent():
    m = parse_status_frame('{"state":"active"}', StatusModel())
    assert m.activity is Activity.WORKING


@pytest.mark.parametrize(
    "wire, expected",
    [
        ("working", Activity.WORKING),
        ("awaiting_input", Activity.AWAITING_INPUT),
        ("needs_attention", Activity.NEEDS_ATTENTION),
    ],
)
def test_activity_parses_all_three_values(wire, expected):
    m = parse_status_frame(f'{{"state":"active","activity":"{wire}"}}', StatusModel())
    assert m.activity is expected


def test_parse_sessions_without_auto_pin():
    m = parse_status_frame(
        '{"state":"active","sessions":['
        '{"index":1,"id":"pid:111","name":"repo-a","activity":"awaiting_input",'
        '"selected":true,"pinned":true},'
        '{"index":2,"id":"pid:222","name":"repo-b","activity":"needs_attention","auto":true}'
        "]}",
        StatusModel(),
    )
    assert len(m.sessions) == 2
    assert m.sessions[0].id == "pid:111"
    assert m.sessions[0].name == "repo-a"
    assert m.sessions[0].selected is True
    assert m.sessions[0].activity is Activity.AWAITING_INPUT
    assert m.sessions[1].id == "pid:222"
    assert m.sessions[1].name == "repo-b"
    assert m.sessions[1].activity is Activity.NEEDS_ATTENTION


def test_session_page_index_clamps_after_sessions_parse():
    m = StatusModel()
    m.session_page_index = 4
    parse_status_frame(
        '{"state":"active","sessions":['
        '{"index":1,"id":"s1","name":"repo-a","activity":"working"},'
        '{"index":2,"id":"s2","name":"repo-b","activity":"working"}'
        "]}",
        m,
    )
    assert m.session_page_index == 0


def test_missing_sessions_resets_list_and_page():
    m = StatusModel(sessions=[SessionSummary(name="x")], session_page_index=2)
    parse_status_frame({"state": "active"}, m)
    assert m.sessions == []
    assert m.session_page_index == 0


def test_sessions_capped_at_eight():
    items = [{"id": f"s{i}", "name": f"n{i}"} for i in range(12)]
    m = parse_status_frame({"sessions": items})
    assert [s.id for s in m.sessions] == [f"s{i}" for i in range(8)]


def test_groups_persist_when_absent_from_later_frame():
    m = parse_status_frame({"weekly": {"usedPct": 18}})
    parse_status_frame({"state": "active"}, m)
    assert m.has_weekly is True
    assert m.weekly_pct == 18


def test_wrongly_typed_values_fall_back_to_defaults():
    m = parse_status_frame({"state": 5, "context": {"usedPct": "47", "exceeds200k": 1}})
    assert m.session_active is True
    assert m.ctx_used_pct == 0
    assert m.exceeds_200k is False


def test_long_workspace_dir_is_truncated_to_field_size():
    m = parse_status_frame({"workspace": {"dir": "d" * 200}})
    assert m.ws_dir == "d" * 95
    assert m.ws_worktree == ""


def test_non_object_payload_uses_defaults():
    m = parse_status_frame("[1,2,3]")
    assert m.session_active is True
    assert m.activity is Activity.WORKING


def test_parse_activity_unknown_is_working():
    assert parse_activity("sleeping") is Activity.WORKING
    assert parse_activity(None) is Activity.WORKING


def test_device_info_defaults():
    d = DeviceInfo()
    assert d.board == "CoreS3"
    assert d.clock == "--:--"