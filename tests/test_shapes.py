import numpy as np
import pytest

from factchart.errors import UnknownShapeType
from factchart.shapes import ShapeKind
from factchart.shapes.basic import box_grid_positions, cube_edges, sphere_endpoints
from factchart.shapes.glyphs import GLYPH_AXIS
from factchart.shapes.options import (
    CylindroidOptions, HyperbolicParaboloidOptions, HyperboloidOptions, SphereOptions,
    build_options
)
from factchart.shapes.registry import LEGACY_ALIASES
from factchart.shapes.ruled_surfaces import (
    cylindroid_rulings, hyperboloid_rulings, hyperboloid_surface, saddle_connectors, saddle_rulings
)

MALFORMED = {
    "radius": "x",
    "lineCount": None,
    "start": [1, 2],
    "end": "far",
    "color": {},
    "size": -1,
    "divisions": 0,
    "normal": [0, 0, 0],
    "lineType": "bogus",
    "twistAngle": float("nan"),
}


# --- Registry ---

def test_registry_holds_all_kinds_and_aliases(registry):
    for kind in ShapeKind:
        assert str(kind) in registry
    for alias in LEGACY_ALIASES:
        assert alias in registry
    assert len(ShapeKind) == 12


def test_unknown_type(registry):
    assert registry.resolve("doesNotExist") is None
    with pytest.raises(UnknownShapeType) as exc_info:
        registry.create("doesNotExist", {})
    assert "doesNotExist" in str(exc_info.value)


def test_alias_builds_same_shape(registry):
    a = registry.create("createHoop", {"lineCount": 5})
    b = registry.create("hoop", {"lineCount": 5})
    assert len(a.children) == len(b.children) == 5


@pytest.mark.parametrize("kind", list(ShapeKind))
def test_malformed_options_never_raise(registry, kind):
    node = registry.create(str(kind), MALFORMED)
    assert node.name


# --- Lines and glyphs ---

def test_line_spans_start_to_end(registry):
    node = registry.create("line", {"start": [0, 0, 0], "end": [2, 0, 0], "radius": 0.05})
    assert len(node.parts) == 1
    pts = node.world_points()
    assert pts[:, 0].min() == pytest.approx(0.0, abs=1e-6)
    assert pts[:, 0].max() == pytest.approx(2.0, abs=1e-6)


def test_zero_length_line_is_empty(registry):
    node = registry.create("line", {"start": [1, 1, 1], "end": [1, 1, 1]})
    assert node.parts == []
    assert node.world_points().shape == (0, 3)


def test_translation_arrowheads(registry):
    node = registry.create("translation", {"start": [0, 0, 0], "end": [1, 0, 0]})
    assert len(node.children) == 2
    tip = node.children[0].world_points()
    assert tip[:, 0].max() == pytest.approx(1.0, abs=1e-6)
    tail = node.children[1].world_points()
    assert tail[:, 0].min() == pytest.approx(0.0, abs=1e-6)


def test_translation_only_end_and_neutral_color(registry):
    node = registry.create("translation", {"end": [0, 2, 0], "only_end": True, "color": "red"})
    assert len(node.children) == 1
    colors = {part.color for part, _ in node.world_parts()}
    assert colors == {(0.2, 0.2, 0.2)}


def test_moment_symbols_align_with_line(registry):
    node = registry.create("moment", {"start": [0, 0, 0], "end": [0, 0, 3]})
    assert len(node.children) == 2
    far, near = node.children
    np.testing.assert_allclose(far.orientation @ GLYPH_AXIS, [0, 0, 1], atol=1e-9)
    np.testing.assert_allclose(near.orientation @ GLYPH_AXIS, [0, 0, -1], atol=1e-9)
    np.testing.assert_allclose(far.position, [0, 0, 3])
    # arc tube plus two arrowheads
    assert len(far.parts) == 1 and len(far.children) == 2

    only_end = registry.create("moment", {"end": [0, 0, 3], "only_end": True})
    assert len(only_end.children) == 1


# --- Planar shapes ---

def test_disk_spokes_and_normal(registry):
    node = registry.create("disk", {"lineCount": 8, "normal": [1, 0, 0]})
    assert len(node.children) == 8
    np.testing.assert_allclose(node.orientation @ [0, 0, 1], [1, 0, 0], atol=1e-9)


def test_disk_with_glyph_spokes(registry):
    node = registry.create("disk", {"lineCount": 4, "lineType": "translation"})
    assert [child.name for child in node.children] == ["translation"] * 4
    # glyph spokes carry a single (outer) arrowhead
    assert all(len(child.children) == 1 for child in node.children)


def test_disk_antiparallel_normal(registry):
    node = registry.create("disk", {"normal": [0, 0, -1]})
    assert np.all(np.isfinite(node.orientation))
    np.testing.assert_allclose(node.orientation @ [0, 0, 1], [0, 0, -1], atol=1e-9)


def test_plane_parts(registry):
    node = registry.create("plane", {"size": 3})
    assert [p.label for p in node.parts] == ["fill", "border"]
    pts = node.world_points()
    assert np.abs(pts[:, :2]).max() == pytest.approx(1.5)


def test_plane_of_parallel_lines(registry):
    node = registry.create("planeOfParallelLines", {"divisions": 4, "size": 2})
    assert len(node.children) == 5
    xs = sorted(round(c.world_points()[:, 0].mean(), 6) for c in node.children)
    assert xs == pytest.approx([-1.0, -0.5, 0.0, 0.5, 1.0])


@pytest.mark.parametrize("divisions", [1, 2, 5, 10])
def test_box_grid_skips_corners(divisions):
    positions = box_grid_positions(divisions, 2.0)
    assert len(positions) == (divisions + 1) ** 2 - 4
    for corner in [(-1.0, -1.0), (-1.0, 1.0), (1.0, -1.0), (1.0, 1.0)]:
        assert corner not in positions


def test_cube_edges():
    starts, ends = cube_edges(2.0)
    assert starts.shape == ends.shape == (12, 3)
    np.testing.assert_allclose(np.linalg.norm(ends - starts, axis=1), 2.0)


def test_box_of_parallel_lines(registry):
    node = registry.create("boxOfParallelLines", {"divisions": 3})
    assert len(node.children) == 16 - 4
    assert node.parts[0].label == "wireframe"


def test_hoop(registry):
    node = registry.create("hoop", {"radius": 2, "height": 4, "lineCount": 6})
    assert len(node.children) == 6
    for child in node.children:
        pts = child.world_points()
        assert pts[:, 1].min() == pytest.approx(-2.0, abs=1e-6)
        assert pts[:, 1].max() == pytest.approx(2.0, abs=1e-6)
        radial = np.hypot(pts[:, 0].mean(), pts[:, 2].mean())
        assert radial == pytest.approx(2.0, abs=1e-6)


# --- Sphere ---

def test_sphere_children_and_mirroring(registry):
    node = registry.create("sphere", {"lineCount": 10})
    assert len(node.children) == 10
    assert len(node.parts) == 3

    mirrored = registry.create("sphere", {"lineCount": 10, "mirrored": True})
    assert len(mirrored.children) == 20


def test_sphere_endpoints_mirrored_are_antipodal():
    points = sphere_endpoints(build_options(SphereOptions, {"lineCount": 7, "radius": 2, "mirrored": True}))
    assert points.shape == (14, 3)
    np.testing.assert_allclose(points[7:], -points[:7])
    np.testing.assert_allclose(np.linalg.norm(points, axis=1), 2.0)


# --- Ruled surfaces ---

def test_cylindroid_rulings_follow_height_formula():
    opts = build_options(CylindroidOptions, {"width": 1.5, "height": 0.8, "lineCount": 12})
    starts, ends = cylindroid_rulings(opts)
    theta = 2 * np.pi * np.arange(12) / 12
    z = 0.4 * np.sin(2 * theta)
    np.testing.assert_allclose(starts, np.c_[np.zeros(12), np.zeros(12), z], atol=1e-12)
    np.testing.assert_allclose(ends, np.c_[1.5 * np.cos(theta), 1.5 * np.sin(theta), z], atol=1e-12)


def test_cylindroid_color_ramp(registry):
    node = registry.create("cylindroid", {"lineCount": 6, "color": [1.0, 1.0, 1.0], "darken": 0.5})
    colors = [child.parts[0].color for child in node.children if child.parts]
    assert colors[0] == pytest.approx((1.0, 1.0, 1.0))
    assert colors[-1] == pytest.approx((0.5, 0.5, 0.5))
    assert {p.label for p in node.parts} == {"centerline", "boundary"}


def test_saddle_rulings_lie_on_surface():
    opts = build_options(HyperbolicParaboloidOptions, {"size": 2, "divisions": 4})
    starts_u, ends_u, starts_v, ends_v = saddle_rulings(opts)
    for pts in (starts_u, ends_u, starts_v, ends_v):
        assert pts.shape == (5, 3)
        np.testing.assert_allclose(pts[:, 2], pts[:, 0] * pts[:, 1] * 0.5, atol=1e-12)


def test_saddle_non_orthogonal_is_sheared():
    ortho = saddle_rulings(build_options(HyperbolicParaboloidOptions, {"divisions": 4}))
    skew = saddle_rulings(build_options(HyperbolicParaboloidOptions, {"divisions": 4, "isOrthogonal": False}))
    for a, b in zip(ortho, skew):
        np.testing.assert_allclose(b[:, 0], a[:, 0])
        np.testing.assert_allclose(b[:, 1], a[:, 1] + 0.5 * a[:, 0])
        np.testing.assert_allclose(b[:, 2], a[:, 2])


def test_hyperbolic_paraboloid_has_no_surface(registry):
    node = registry.create("hyperbolicParaboloid", {"divisions": 3})
    assert len(node.children) == 8
    assert "surface" not in {p.label for p in node.parts}


@pytest.mark.parametrize("n", [1, 3, 24])
def test_hyperboloid_surface_topology(n):
    opts = build_options(HyperboloidOptions, {"lineCount": n})
    vertices, triangles = hyperboloid_surface(opts)
    assert vertices.shape == (2 * (n + 1), 3)
    assert triangles.shape == (2 * n, 3)
    assert triangles.min() >= 0
    assert triangles.max() < len(vertices)


def test_hyperboloid_seam_ruling_is_repeated():
    starts, ends = hyperboloid_rulings(build_options(HyperboloidOptions, {"lineCount": 8}))
    assert len(starts) == len(ends) == 9
    np.testing.assert_allclose(starts[0], starts[-1], atol=1e-12)
    np.testing.assert_allclose(ends[0], ends[-1], atol=1e-12)


def test_hyperboloid_negative_twist_swaps_emission_order():
    positive, _ = hyperboloid_surface(build_options(HyperboloidOptions, {"twistAngle": 0.5, "height": 2}))
    negative, _ = hyperboloid_surface(build_options(HyperboloidOptions, {"twistAngle": -0.5, "height": 2}))
    assert positive[0, 1] == pytest.approx(1.0)
    assert positive[1, 1] == pytest.approx(-1.0)
    assert negative[0, 1] == pytest.approx(-1.0)
    assert negative[1, 1] == pytest.approx(1.0)


def test_hyperboloid_node(registry):
    node = registry.create("hyperboloid", {"lineCount": 6})
    assert len(node.children) == 7
    surface = next(p for p in node.parts if p.label == "surface")
    assert surface.mesh.n_cells == 12
    assert surface.opacity == pytest.approx(0.2)


@pytest.mark.parametrize("twist", [0.5, 1.0, -0.5, -1.0])
def test_hyperboloid_normals_point_outward_for_either_twist(twist):
    opts = build_options(HyperboloidOptions, {"lineCount": 24, "twistAngle": twist, "radiusX": 1.5})
    vertices, triangles = hyperboloid_surface(opts)
    v0, v1, v2 = (vertices[triangles[:, k]] for k in range(3))
    normals = np.cross(v1 - v0, v2 - v0)
    centroids = (v0 + v1 + v2) / 3.0
    radial = centroids * [1.0, 0.0, 1.0]
    assert np.all(np.einsum("ij,ij->i", normals, radial) > 0.0)


def test_hyperbolic_paraboloid_connectors_leave_the_rulings():
    opts = build_options(HyperbolicParaboloidOptions, {"size": 2, "divisions": 4})
    starts_u, ends_u, _, _ = saddle_rulings(opts)
    raised, lowered = saddle_connectors(starts_u, ends_u)

    np.testing.assert_allclose(raised, [[-1, -1, 0.5], [1, 1, 0.5]])
    np.testing.assert_allclose(lowered, [[-1, 1, -0.5], [1, -1, -0.5]])
    # the saddle is z = 0 at its centre, the chords are not
    assert raised.mean(axis=0) == pytest.approx([0.0, 0.0, 0.5])
    assert lowered.mean(axis=0) == pytest.approx([0.0, 0.0, -0.5])


def test_hyperbolic_paraboloid_overlay_parts(registry):
    node = registry.create("hyperbolicParaboloid", {})
    assert [p.label for p in node.parts] == ["axis", "connector-raised", "connector-lowered"]


def test_registry_names_lists_registrations(registry):
    names = registry.names()
    assert names[:12] == [str(kind) for kind in ShapeKind]
    assert len(names) == 12 + len(LEGACY_ALIASES)

    registry.register("custom", lambda options: None)
    assert registry.names()[-1] == "custom"


def test_iter_nodes_walks_the_tree_depth_first(registry):
    node = registry.create("translation", {"end": [1, 0, 0]})
    assert [n.name for n in node.iter_nodes()] == ["translation", "arrowhead", "arrowhead"]

    moment = registry.create("moment", {"end": [1, 0, 0], "only_end": True})
    assert [n.name for n in moment.iter_nodes()] == ["moment", "moment-symbol", "arrowhead", "arrowhead"]


@pytest.mark.parametrize("kind, options", [
    ("hoop", {"lineCount": 10 ** 400}),
    ("hoop", {"radius": 10 ** 400, "height": float("inf")}),
    ("disk", {"radius": -float("inf"), "normal": [10 ** 400, 0, 0]}),
    ("line", {"start": [float("nan"), 0, 0], "color": [10 ** 400, 0, 0]}),
])
def test_out_of_range_numbers_fall_back_to_defaults(registry, kind, options):
    node = registry.create(kind, options)
    assert node.name == kind
    if kind == "hoop":
        assert len(node.children) == 24
