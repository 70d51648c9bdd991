"""SVG export（`chaosgame.export.svg.export_svg`）のテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np
import pytest

from chaosgame.core.engine import ChaosGameEngine
from chaosgame.core.frame import RenderFrame
from chaosgame.export.svg import default_svg_output_path, export_svg

_SVG_NS = "http://www.w3.org/2000/svg"
_NS = {"svg": _SVG_NS}


def _parse_svg(text: str) -> ET.Element:
    root = ET.fromstring(text)
    assert root.tag == f"{{{_SVG_NS}}}svg"
    return root


def test_export_svg_writes_outline_and_points(tmp_path) -> None:
    frame = RenderFrame(
        vertices=np.array([[200, 200], [600, 200], [400, 546]]),
        points=np.array([[400, 315], [300, 257]]),
    )
    out_path = tmp_path / "nested" / "out.svg"

    returned = export_svg(
        frame,
        out_path,
        canvas_size=(800, 800),
        line_color=(1.0, 0.0, 0.0),
        point_color=(0.0, 0.0, 1.0),
    )
    assert returned == out_path
    assert out_path.exists()

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    assert root.attrib["viewBox"] == "0 0 800 800"

    paths = root.findall("svg:path", _NS)
    assert len(paths) == 1
    assert paths[0].attrib["d"] == "M 200.000 200.000 L 600.000 200.000 L 400.000 546.000 Z"
    assert paths[0].attrib["stroke"] == "#FF0000"
    assert paths[0].attrib["fill"] == "none"

    group = root.find("svg:g", _NS)
    assert group is not None
    assert group.attrib["fill"] == "#0000FF"
    circles = group.findall("svg:circle", _NS)
    assert [(c.attrib["cx"], c.attrib["cy"], c.attrib["r"]) for c in circles] == [
        ("401.000", "316.000", "1.000"),
        ("301.000", "258.000", "1.000"),
    ]


def test_export_svg_without_points_omits_group(tmp_path) -> None:
    engine = ChaosGameEngine(4, 0.5, seed=0)
    frame = engine.render(800, 800)

    out_path = export_svg(frame, tmp_path / "empty.svg", canvas_size=(800, 800))
    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    assert root.find("svg:g", _NS) is None
    assert len(root.findall("svg:path", _NS)) == 1


def test_export_svg_from_engine_has_one_circle_per_point(tmp_path) -> None:
    engine = ChaosGameEngine(3, 0.5, seed=1)
    engine.render(800, 800)
    engine.advance_many(25)

    out_path = export_svg(engine.render(800, 800), tmp_path / "g.svg", canvas_size=(800, 800))
    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    assert len(root.findall("svg:g/svg:circle", _NS)) == 25


def test_export_svg_rejects_non_positive_canvas(tmp_path) -> None:
    frame = RenderFrame(vertices=np.zeros((3, 2)), points=np.zeros((0, 2)))
    with pytest.raises(ValueError):
        export_svg(frame, tmp_path / "x.svg", canvas_size=(0, 100))


def test_default_svg_output_path() -> None:
    path = default_svg_output_path(Path("data") / "output", sides=3, contraction_fraction=0.5)
    assert path == Path("data") / "output" / "svg" / "chaosgame_3_0p5.svg"
