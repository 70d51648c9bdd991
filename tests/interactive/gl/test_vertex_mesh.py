"""VertexMesh の転送ロジックを、GL コンテキスト無しのフェイクで検証する。"""

from __future__ import annotations

import numpy as np

from chaosgame.interactive.gl.utils import build_projection
from chaosgame.interactive.gl.vertex_mesh import VertexMesh


class FakeBuffer:
    def __init__(self, reserve: int) -> None:
        self.size = int(reserve)
        self.data = bytearray(self.size)
        self.writes: list[tuple[int, int]] = []
        self.released = False

    def orphan(self) -> None:
        self.data = bytearray(self.size)

    def write(self, data, offset: int = 0) -> None:
        blob = np.ascontiguousarray(data).tobytes()
        self.data[offset : offset + len(blob)] = blob
        self.writes.append((int(offset), len(blob)))

    def release(self) -> None:
        self.released = True


class FakeVAO:
    def __init__(self) -> None:
        self.renders: list[tuple[int, int]] = []
        self.released = False

    def render(self, mode: int, vertices: int) -> None:
        self.renders.append((mode, vertices))

    def release(self) -> None:
        self.released = True


class FakeContext:
    def __init__(self) -> None:
        self.buffers: list[FakeBuffer] = []

    def buffer(self, reserve: int, dynamic: bool = False) -> FakeBuffer:
        buf = FakeBuffer(reserve)
        self.buffers.append(buf)
        return buf

    def simple_vertex_array(self, program, vbo, *attrs) -> FakeVAO:
        return FakeVAO()


def _decoded(mesh: VertexMesh) -> np.ndarray:
    n = mesh.vertex_count
    return np.frombuffer(bytes(mesh.vbo.data[: n * 8]), dtype=np.float32).reshape(n, 2)


def test_sync_append_only_writes_only_new_tail() -> None:
    mesh = VertexMesh(FakeContext(), program=None, initial_reserve=1024)
    points = np.arange(20, dtype=np.float32).reshape(10, 2)

    mesh.sync_append_only(points[:4])
    mesh.sync_append_only(points[:10])

    assert mesh.vertex_count == 10
    # 2 回目は 4 頂点目以降（offset 4*8 バイト）だけを書く。
    assert mesh.vbo.writes[-1] == (32, 48)
    np.testing.assert_array_equal(_decoded(mesh), points)


def test_sync_append_only_converts_only_new_int_rows_with_shift() -> None:
    mesh = VertexMesh(FakeContext(), program=None, initial_reserve=1024)
    points = np.array([[0, 0], [10, 20], [30, 40], [50, 60]], dtype=np.int32)

    mesh.sync_append_only(points[:2], shift=1.0)
    mesh.sync_append_only(points, shift=1.0)

    assert mesh.vertex_count == 4
    assert mesh.vbo.writes[-1] == (16, 16)
    np.testing.assert_array_equal(_decoded(mesh), points.astype(np.float32) + 1.0)


def test_sync_append_only_reallocates_when_capacity_is_exceeded() -> None:
    ctx = FakeContext()
    mesh = VertexMesh(ctx, program=None, initial_reserve=64)
    points = np.arange(200, dtype=np.float32).reshape(100, 2)

    mesh.sync_append_only(points[:5])
    first_vbo = mesh.vbo
    mesh.sync_append_only(points)

    assert first_vbo.released
    assert mesh.vbo is not first_vbo
    assert mesh.vbo.size >= points.nbytes
    np.testing.assert_array_equal(_decoded(mesh), points)


def test_render_skips_empty_mesh() -> None:
    mesh = VertexMesh(FakeContext(), program=None, initial_reserve=64)
    mesh.render(0)
    assert mesh.vao.renders == []

    mesh.upload(np.array([[1.0, 2.0], [3.0, 4.0]]))
    mesh.render(0)
    assert mesh.vao.renders == [(0, 2)]


def test_projection_maps_canvas_corners_to_clip_space() -> None:
    proj = build_projection(800.0, 600.0).T
    top_left = proj @ np.array([0.0, 0.0, 0.0, 1.0])
    bottom_right = proj @ np.array([800.0, 600.0, 0.0, 1.0])
    np.testing.assert_allclose(top_left[:2], [-1.0, 1.0])
    np.testing.assert_allclose(bottom_right[:2], [1.0, -1.0])
