import json

import pytest

from factchart import config
from factchart.errors import ChartDataError
from factchart.model.chart_layout import generate_chart_layout
from factchart.model.io import index_entries, load_chart_entries, parse_chart_entries

VALID = {
    "id": "1-DOF-1",
    "dof": 1,
    "row": 1,
    "freedomSpace": {"elements": [{"type": "line", "options": {"end": [0, 1, 0]}}]},
    "constraintSpace": {"elements": []},
}


def test_parse_valid_entry():
    [entry] = parse_chart_entries([VALID])
    assert entry.id == "1-DOF-1"
    assert len(entry.freedom_space) == 1
    assert len(entry.constraint_space) == 0
    assert entry.freedom_space.elements[0].options == {"end": [0, 1, 0]}


def test_missing_id_is_derived():
    [entry] = parse_chart_entries([{"dof": 2, "row": 3}])
    assert entry.id == "2-DOF-3"


def test_bad_entries_are_skipped(caplog):
    raw = [
        {**VALID, "id": "1-DOF-2"},  # id does not match dof/row
        {"id": "x", "dof": "one", "row": 1},
        "not an object",
        VALID,
        VALID,  # duplicate
    ]
    entries = parse_chart_entries(raw)
    assert [e.id for e in entries] == ["1-DOF-1"]
    assert "duplicate id" in caplog.text


def test_malformed_elements_are_skipped():
    raw = {**VALID, "freedomSpace": {"elements": [{"options": {}}, 42, {"type": "hoop"}]}}
    [entry] = parse_chart_entries([raw])
    assert [e.type for e in entry.freedom_space] == ["hoop"]


def test_malformed_space_is_empty():
    [entry] = parse_chart_entries([{**VALID, "constraintSpace": ["line"], "freedomSpace": {"elements": "line"}}])
    assert len(entry.freedom_space) == 0
    assert len(entry.constraint_space) == 0


def test_non_list_raises():
    with pytest.raises(ChartDataError):
        parse_chart_entries({"entries": []})


def test_load_from_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps([VALID]), encoding="utf-8")
    assert [e.id for e in load_chart_entries(str(path))] == ["1-DOF-1"]


def test_load_errors(tmp_path):
    with pytest.raises(ChartDataError):
        load_chart_entries(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(ChartDataError):
        load_chart_entries(str(broken))


def test_bundled_data_matches_layout(registry):
    entries = load_chart_entries(config.DEFAULT_DATA_PATH)
    assert entries
    slot_ids = {slot.id for slot in generate_chart_layout()}
    for entry in entries:
        assert entry.id in slot_ids
        for element in [*entry.freedom_space, *entry.constraint_space]:
            assert element.type in registry


def test_index_entries():
    entries = parse_chart_entries([VALID, {"dof": 0, "row": 1}])
    index = index_entries(entries)
    assert set(index) == {"1-DOF-1", "0-DOF-1"}
    assert index["0-DOF-1"].dof == 0


@pytest.mark.parametrize("bad", [
    {"dof": float("inf"), "row": 1},
    {"dof": 1, "row": float("nan")},
    {"dof": 10 ** 400, "row": 1},
    {"dof": 1.5, "row": 1},
])
def test_non_integral_dof_or_row_skips_only_that_entry(bad):
    entries = parse_chart_entries([VALID, bad])
    assert [e.id for e in entries] == ["1-DOF-1"]


def test_infinity_in_json_file_skips_entry(tmp_path):
    path = tmp_path / "data.json"
    # json.dumps writes Infinity, which json.load reads back as float('inf')
    path.write_text(json.dumps([VALID, {"dof": float("inf"), "row": 1}]), encoding="utf-8")
    assert [e.id for e in load_chart_entries(str(path))] == ["1-DOF-1"]


def test_out_of_range_transform_is_ignored():
    raw = {**VALID, "freedomSpace": {"elements": [
        {"type": "line", "position": [10 ** 400, 0, 0], "rotation": [0, float("inf"), 0]},
    ]}}
    [entry] = parse_chart_entries([raw])
    [element] = entry.freedom_space
    assert element.position is None
    assert element.rotation is None
