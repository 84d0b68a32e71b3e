from helpers import hxa_bytes as hb
from libhxa import parse_hxa
from libhxa.summary import summarize_hxa


def test_summarize_parsed_file():
    image = hb.image_node(0, (2, 2), hb.stack(hb.layer("albedo", 4, 0, [0] * 96)))
    hxa = parse_hxa(hb.document(3, hb.quad_and_triangle()[12:], image))
    s = summarize_hxa(hxa)
    assert s.path is None
    assert s.version == 3
    geom, img = s.nodes
    assert geom.kind == "GEOMETRY"
    assert [st.name for st in geom.stacks] == ["vertex", "corner", "edge", "face"]
    assert geom.stacks[0].layers[0].elements == 5
    assert img.image_kind == "CUBE"
    assert img.resolution == (2, 2, 1)
    assert img.stacks[0].length == 24
    assert img.stacks[0].layers[0].components == 4


def test_summarize_path(tmp_path):
    path = tmp_path / "empty.hxa"
    data = hb.document(1, hb.meta_node_record())
    path.write_bytes(data)
    s = summarize_hxa(str(path))
    assert s.file_size == len(data)
    assert s.nodes[0].stacks == []
