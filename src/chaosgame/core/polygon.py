"""
どこで: `src/chaosgame/core/polygon.py`。多角形ジオメトリの純粋関数群。
何を: 累積ウォークによる頂点計算・bbox・重心・内部判定を提供する。
なぜ: engine / sampling / export が同じ幾何定義を共有し、単体テストしやすくするため。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[attr-defined]


def compute_polygon_vertices(
    sides: int,
    circumradius: float,
    center: tuple[int, int],
) -> np.ndarray:
    """累積オフセットの漸化式で多角形の頂点列を生成する。

    Parameters
    ----------
    sides : int
        辺の数。検証しない（3 未満でもそのまま計算する）。
    circumradius : float
        1 ステップで進む距離 R。
    center : tuple[int, int]
        基準点。各頂点には `center // 2` が加算される。

    Returns
    -------
    np.ndarray
        int32 型 shape (sides, 2) の頂点配列。

    Notes
    -----
    `x[i+1] = x[i] + R*cos(θ*i)`, `y[i+1] = y[i] + R*sin(θ*i)`（θ = 2π/sides）。
    頂点 i は `(trunc(x[i]) + cx//2, trunc(y[i]) + cy//2)`。
    オフセットは center ではなく center/2。互換性のためこのまま保つ。
    """
    n = int(sides)
    if n <= 0:
        return np.zeros((0, 2), dtype=np.int32)

    theta = 2.0 * math.pi / float(n)
    r = float(circumradius)
    cx = int(center[0]) // 2
    cy = int(center[1]) // 2

    out = np.empty((n, 2), dtype=np.int32)
    x = 0.0
    y = 0.0
    for i in range(n):
        # int() は 0 方向への切り捨て。
        out[i, 0] = int(x) + cx
        out[i, 1] = int(y) + cy
        x += r * math.cos(theta * i)
        y += r * math.sin(theta * i)
    out.setflags(write=False)
    return out


def polygon_bounds(vertices: np.ndarray) -> tuple[float, float, float, float]:
    """頂点列の軸平行 bbox `(min_x, min_y, max_x, max_y)` を返す。"""
    v = np.asarray(vertices, dtype=np.float64)
    if v.ndim != 2 or v.shape[0] == 0:
        raise ValueError("vertices は shape (N,2) かつ N>=1 である必要がある")
    mins = np.min(v[:, :2], axis=0)
    maxs = np.max(v[:, :2], axis=0)
    return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])


def polygon_centroid(vertices: np.ndarray) -> tuple[float, float]:
    """多角形の面積重心を返す。面積 0 の場合は頂点平均を返す。"""
    v = np.asarray(vertices, dtype=np.float64)
    if v.ndim != 2 or v.shape[0] == 0:
        raise ValueError("vertices は shape (N,2) かつ N>=1 である必要がある")

    x = v[:, 0]
    y = v[:, 1]
    xn = np.roll(x, -1)
    yn = np.roll(y, -1)
    cross = x * yn - xn * y
    a2 = float(np.sum(cross))
    if v.shape[0] < 3 or abs(a2) <= 1e-12:
        mean = np.mean(v[:, :2], axis=0)
        return float(mean[0]), float(mean[1])

    cx = float(np.sum((x + xn) * cross)) / (3.0 * a2)
    cy = float(np.sum((y + yn) * cross)) / (3.0 * a2)
    return cx, cy


def contains_point(vertices: np.ndarray, x: float, y: float) -> bool:
    """点 (x, y) が多角形の内部にあるかを返す（境界上は False 扱い）。"""
    v = np.ascontiguousarray(vertices, dtype=np.float64)
    if v.ndim != 2 or v.shape[0] < 3:
        return False
    return bool(_contains_point_njit(v, float(x), float(y)))


@njit(cache=True)  # type: ignore[misc]
def _contains_point_njit(polygon: np.ndarray, x: float, y: float) -> bool:
    """点が多角形内部にあるかを返す（境界上は False 扱い、Numba 版）。"""
    n = int(polygon.shape[0])
    if n < 3:
        return False

    eps = 1e-9

    # 境界（頂点・辺）上を先に除外する。
    x1 = float(polygon[n - 1, 0])
    y1 = float(polygon[n - 1, 1])
    for i in range(n):
        x2 = float(polygon[i, 0])
        y2 = float(polygon[i, 1])

        if abs(x - x2) <= eps and abs(y - y2) <= eps:
            return False

        dx = x2 - x1
        dy = y2 - y1
        min_x = x1 if x1 < x2 else x2
        max_x = x2 if x1 < x2 else x1
        min_y = y1 if y1 < y2 else y2
        max_y = y2 if y1 < y2 else y1
        if (
            x >= min_x - eps
            and x <= max_x + eps
            and y >= min_y - eps
            and y <= max_y + eps
        ):
            cross = dx * (y - y1) - dy * (x - x1)
            tol = eps * (abs(dx) + abs(dy))
            if tol < eps:
                tol = eps
            if abs(cross) <= tol:
                return False

        x1, y1 = x2, y2

    # 偶奇レイキャスト。
    inside = False
    x1 = float(polygon[n - 1, 0])
    y1 = float(polygon[n - 1, 1])
    for i in range(n):
        x2 = float(polygon[i, 0])
        y2 = float(polygon[i, 1])
        if (y1 > y) != (y2 > y):
            x_int = (x2 - x1) * (y - y1) / (y2 - y1) + x1
            if x < x_int:
                inside = not inside
        x1, y1 = x2, y2
    return inside


__all__ = [
    "compute_polygon_vertices",
    "contains_point",
    "polygon_bounds",
    "polygon_centroid",
]
