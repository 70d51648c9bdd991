"""
どこで: `src/chaosgame/interactive/gl/vertex_mesh.py`。
何を: 2D 頂点用 VBO/VAO の確保・更新・解放を担当する。
なぜ: 点列は毎フレーム伸びるため、再確保と VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np


class VertexMesh:
    """
    GPU に 2D 頂点（float32 x, y）を送り込む作業を管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期GPUメモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ):
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = ctx.simple_vertex_array(program, self.vbo, "in_vert")
        self.vertex_count: int = 0

    def _ensure_capacity(self, vbo_size: int) -> None:
        """データが大きくなったらGPUのバッファを倍々で再確保"""
        if vbo_size <= self.vbo.size:
            return
        new_size = max(vbo_size, self.vbo.size * 2, self.initial_reserve)
        self.vbo.release()
        self.vbo = self.ctx.buffer(reserve=new_size, dynamic=True)
        # VAO は VBO が差し替わるときだけ張り直す。
        self.vao.release()
        self.vao = self.ctx.simple_vertex_array(self.program, self.vbo, "in_vert")

    def upload(self, vertices: np.ndarray) -> None:
        """shape (N,2) の頂点を GPU へ送る"""
        vertices_f32 = np.ascontiguousarray(vertices, dtype=np.float32).reshape(-1, 2)
        self.vertex_count = int(vertices_f32.shape[0])
        if self.vertex_count == 0:
            return
        self._ensure_capacity(vertices_f32.nbytes)
        self.vbo.orphan()
        self.vbo.write(vertices_f32)

    def sync_append_only(self, vertices: np.ndarray, *, shift: float = 0.0) -> None:
        """追記専用の頂点列を、前回以降に増えた末尾だけ転送して同期する。

        float32 への変換と `shift` の加算は転送する行にだけ行う。
        """
        src = np.asarray(vertices).reshape(-1, 2)
        n = int(src.shape[0])
        stride = np.dtype(np.float32).itemsize * 2
        if n < self.vertex_count or n * stride > self.vbo.size:
            # 縮んだ、または容量超過のときは全体を送り直す。
            self.upload(src.astype(np.float32) + np.float32(shift))
            return
        if n == self.vertex_count:
            return
        tail = src[self.vertex_count :].astype(np.float32) + np.float32(shift)
        self.vbo.write(np.ascontiguousarray(tail), offset=self.vertex_count * stride)
        self.vertex_count = n

    def render(self, mode: int) -> None:
        if self.vertex_count == 0:
            return
        self.vao.render(mode=mode, vertices=self.vertex_count)

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.vao.release()
