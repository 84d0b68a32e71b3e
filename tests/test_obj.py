import io

import pytest

from helpers import hxa_bytes as hb
from libhxa import HxaConventionError, parse_hxa
from libhxa.obj import write_obj, write_obj_stream


def test_write_obj_stream():
    hxa = parse_hxa(hb.quad_and_triangle())
    out = io.StringIO()
    assert write_obj_stream(hxa, out) == 1
    lines = out.getvalue().splitlines()
    assert lines[0] == "o node0"
    assert lines[1] == "v 0.000000 0.000000 0.000000"
    assert lines[5] == "v 2.000000 0.000000 0.000000"
    assert lines[6:] == ["f 1 2 3 4", "f 2 5 3"]


def test_vertex_indices_continue_across_objects():
    node = hb.quad_and_triangle()[12:]
    hxa = parse_hxa(hb.document(3, node, hb.meta_node_record(), node))
    out = io.StringIO()
    assert write_obj_stream(hxa, out, scale=2.0) == 2
    lines = out.getvalue().splitlines()
    assert "o node2" in lines
    assert "v 4.000000 0.000000 0.000000" in lines
    assert lines[-2:] == ["f 6 7 8 9", "f 7 10 8"]


def test_images_are_skipped(tmp_path):
    image = hb.image_node(1, (2,), hb.stack(hb.layer("albedo", 1, 0, [1, 2])))
    hxa = parse_hxa(hb.document(1, image))
    path = tmp_path / "out.obj"
    assert write_obj(hxa, str(path)) == 0
    assert path.read_text(encoding="utf-8") == "# exported from HxA\n"


def test_bad_geometry_raises():
    data = hb.document(1, hb.geometry_node(1, hb.stack(hb.layer("vertex", 3, 0, [1, 2, 3])), 0, hb.stack()))
    with pytest.raises(HxaConventionError):
        write_obj_stream(parse_hxa(data), io.StringIO())


def test_failed_export_leaves_no_file(tmp_path):
    good = hb.quad_and_triangle(version=1)[12:]
    bad = hb.geometry_node(
        3,
        hb.stack(hb.layer("vertex", 3, 0, [0] * 9)),
        3,
        hb.stack(hb.layer("reference", 1, 1, [0, 1, -3])),
    )
    hxa = parse_hxa(hb.document(1, good, bad))
    path = tmp_path / "x.obj"
    with pytest.raises(HxaConventionError):
        write_obj(hxa, str(path))
    assert not path.exists()


def test_reference_past_last_vertex(tmp_path):
    data = hb.document(
        1,
        hb.geometry_node(
            3,
            hb.stack(hb.layer("vertex", 3, 2, [0.0] * 9)),
            3,
            hb.stack(hb.layer("reference", 1, 1, [0, 1, -10])),
        ),
    )
    path = tmp_path / "x.obj"
    with pytest.raises(HxaConventionError):
        write_obj(parse_hxa(data), str(path))
    assert not path.exists()
