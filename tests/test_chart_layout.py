from collections import Counter

from factchart.model.chart_layout import (
    COLUMN_COUNTS, PARALLEL_PYRAMID_LIMITS, GridCell, SlotRegion,
    generate_chart_layout, group_by_grid_cell
)


def test_fifty_unique_slots():
    slots = generate_chart_layout()
    assert len(slots) == 50
    assert len({s.id for s in slots}) == 50


def test_rows_per_dof_match_column_counts():
    counts = Counter(s.dof for s in generate_chart_layout())
    assert [counts[dof] for dof in range(7)] == list(COLUMN_COUNTS)


def test_ids_follow_dof_row_pattern():
    for slot in generate_chart_layout():
        assert slot.id == f"{slot.dof}-DOF-{slot.row}"
        assert 1 <= slot.row <= COLUMN_COUNTS[slot.dof]


def test_parallel_pyramid_flag():
    for slot in generate_chart_layout():
        assert slot.is_parallel_pyramid == (slot.row <= PARALLEL_PYRAMID_LIMITS[slot.dof])
    # dof 6 has a limit of 0: its only slot is outside the pyramid
    six = [s for s in generate_chart_layout() if s.dof == 6]
    assert [s.is_parallel_pyramid for s in six] == [False]


def test_region_classification():
    for slot in generate_chart_layout():
        if slot.dof == 3 and 11 <= slot.row <= 16:
            assert slot.region == SlotRegion.LEFT_EAR
        elif slot.dof == 3 and 17 <= slot.row <= 22:
            assert slot.region == SlotRegion.RIGHT_EAR
        else:
            assert slot.region == SlotRegion.DEFAULT


def test_default_grid_mapping_is_injective():
    cells = [s.grid for s in generate_chart_layout() if s.region == SlotRegion.DEFAULT]
    assert len(cells) == len(set(cells))


def test_default_grid_rows_put_row_one_at_base():
    by_id = {s.id: s for s in generate_chart_layout()}
    assert by_id["0-DOF-1"].grid == GridCell(column=2, row=10)
    assert by_id["3-DOF-10"].grid == GridCell(column=5, row=1)
    assert by_id["6-DOF-1"].grid == GridCell(column=8, row=10)


def test_ear_placement():
    slots = generate_chart_layout()
    left = [s.grid for s in slots if s.region == SlotRegion.LEFT_EAR]
    right = {s.row: s.grid for s in slots if s.region == SlotRegion.RIGHT_EAR}

    assert left == [GridCell(column=2, row=0)] * 6
    assert right == {row: GridCell(column=8, row=row - 16) for row in range(17, 23)}


def test_layout_is_reproducible():
    assert generate_chart_layout() == generate_chart_layout()


def test_group_by_grid_cell_stacks_left_ear():
    groups = group_by_grid_cell(generate_chart_layout())
    left_ear = groups[GridCell(column=2, row=0)]
    assert [s.row for s in left_ear] == list(range(11, 17))
    assert sum(len(g) for g in groups.values()) == 50
