# src/chaosgame/core/frame.py
# render() が返す描画スナップショット（多角形頂点 + 点列）のモデルと検証ロジック。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# 点マーカーの直径。マーカーは (x, y) を左上とする 2x2 の円。
POINT_DIAMETER = 2


def _as_int_xy(value: np.ndarray, *, name: str) -> np.ndarray:
    arr = np.asarray(value)
    if arr.ndim == 1 and arr.size == 0:
        arr = arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"{name} は shape (N,2) の 2 次元配列である必要がある")
    if arr.dtype != np.int32:
        arr = arr.astype(np.int32, copy=False)
    if arr.flags.writeable:
        # 呼び出し元の配列を凍結しないよう、書き込み可能なら複製してから固定する。
        arr = arr.copy()
        arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class RenderFrame:
    """1 回の render で描く内容を表現する。

    Parameters
    ----------
    vertices : np.ndarray
        int32 型 shape (S, 2) の多角形頂点。
    points : np.ndarray
        int32 型 shape (M, 2) の生成点（挿入順）。

    Notes
    -----
    配列は writeable=False で保持する。
    """

    vertices: np.ndarray
    points: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", _as_int_xy(self.vertices, name="vertices"))
        object.__setattr__(self, "points", _as_int_xy(self.points, name="points"))

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    def marker_centers(self) -> np.ndarray:
        """各点マーカーの中心座標（float32, shape (M, 2)）を返す。"""
        radius = np.float32(POINT_DIAMETER / 2.0)
        return self.points.astype(np.float32) + radius
