"""RenderFrame の検証と派生配列のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from chaosgame.core.frame import RenderFrame


def test_frame_freezes_and_casts_arrays() -> None:
    vertices = np.array([[0, 0], [10, 0], [5, 8]], dtype=np.int64)
    points = [[1, 1], [2, 3]]

    frame = RenderFrame(vertices=vertices, points=np.asarray(points))

    assert frame.vertices.dtype == np.int32
    assert frame.points.dtype == np.int32
    assert not frame.vertices.flags.writeable
    assert not frame.points.flags.writeable
    # 呼び出し元の配列は凍結しない。
    assert vertices.flags.writeable
    assert frame.n_points == 2


def test_frame_accepts_empty_points() -> None:
    frame = RenderFrame(vertices=np.zeros((3, 2), dtype=np.int32), points=np.zeros((0,)))
    assert frame.points.shape == (0, 2)
    assert frame.marker_centers().shape == (0, 2)


def test_frame_rejects_bad_shapes() -> None:
    with pytest.raises(ValueError):
        RenderFrame(vertices=np.zeros((3, 3)), points=np.zeros((0, 2)))
    with pytest.raises(ValueError):
        RenderFrame(vertices=np.zeros((3, 2)), points=np.zeros((4,)))


def test_marker_centers_are_offset_by_radius() -> None:
    """マーカーは (x, y) を左上とする直径 2 の円なので、中心は +1 ずれる。"""
    frame = RenderFrame(vertices=np.zeros((3, 2)), points=np.array([[10, 20], [0, 0]]))
    np.testing.assert_allclose(frame.marker_centers(), [[11.0, 21.0], [1.0, 1.0]])
