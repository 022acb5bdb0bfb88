import pytest

from factchart.model.entries import ChartEntry
from factchart.shapes import ShapeRegistry


@pytest.fixture
def registry() -> ShapeRegistry:
    return ShapeRegistry.with_builtins()


@pytest.fixture
def make_entry():
    def _make(entry_id: str = "1-DOF-1", freedom=None, constraint=None) -> ChartEntry:
        dof, _, row = entry_id.split("-")
        return ChartEntry.from_dict({
            "id": entry_id,
            "dof": int(dof),
            "row": int(row),
            "freedomSpace": {"elements": freedom or []},
            "constraintSpace": {"elements": constraint or []},
        })
    return _make
