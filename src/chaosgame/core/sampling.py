# どこで: `src/chaosgame/core/sampling.py`。
# 何を: 多角形内の一様サンプリング（棄却法）とランダム頂点選択を提供する。
# なぜ: 乱数ストリームを 1 本に保ったまま、engine から乱数消費の順序を切り離すため。

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np

from chaosgame.core.polygon import contains_point, polygon_bounds, polygon_centroid

_logger = logging.getLogger(__name__)

# float 候補だけが内部に入った試行をこの回数まで見送り、格子上の内部点を探し続ける。
_LATTICE_MISS_LIMIT = 64


class RandomSource(Protocol):
    """engine が消費する乱数源の最小インターフェース。

    Notes
    -----
    `numpy.random.Generator` はこのまま満たす。
    テストでは固定値を返すスタブを注入して決定的にする。
    """

    def random(self) -> float: ...

    def integers(self, high: int) -> int: ...


def default_random_source(seed: int | None = None) -> RandomSource:
    """seed 付きの `numpy.random.Generator` を返す。"""
    return np.random.default_rng(seed)


def sample_point_in_polygon(
    vertices: np.ndarray,
    rng: RandomSource,
    *,
    max_attempts: int | None = None,
) -> tuple[int, int]:
    """多角形の bbox から一様に点を引き、内部に入るまで引き直す。

    Parameters
    ----------
    vertices : np.ndarray
        shape (N,2) の頂点配列。
    rng : RandomSource
        共有乱数源。x, y の順で `random()` を 1 回ずつ消費する。
    max_attempts : int | None, optional
        試行回数の上限。None（既定）は無制限で、面積 0 の多角形では返らない。
        上限に達した場合は最後の float 内部候補を、それも無ければ重心を返す。

    Returns
    -------
    tuple[int, int]
        0 方向に切り捨てた整数座標。

    Notes
    -----
    判定は 2 段階で行う。
    1. 切り捨て後の整数点が内部なら採用する（返す点そのものが内部にある）。
    2. 小さな多角形では内部に格子点が無いことがある。float 候補だけが内部に入る試行が累計
       `_LATTICE_MISS_LIMIT` 回を超えたら、その候補を切り捨てて採用する。
    いずれも float 候補が内部にある限り終了するため、float 判定だけの場合と停止条件は同じ。
    """
    min_x, min_y, max_x, max_y = polygon_bounds(vertices)
    width = max_x - min_x
    height = max_y - min_y

    attempts = 0
    lattice_misses = 0
    last_float_hit: tuple[int, int] | None = None
    while max_attempts is None or attempts < int(max_attempts):
        attempts += 1
        x = min_x + width * float(rng.random())
        y = min_y + height * float(rng.random())
        px, py = int(x), int(y)
        if contains_point(vertices, px, py):
            return px, py
        if contains_point(vertices, x, y):
            last_float_hit = (px, py)
            lattice_misses += 1
            if lattice_misses > _LATTICE_MISS_LIMIT:
                return last_float_hit

    if last_float_hit is not None:
        _logger.warning(
            "sample_point_in_polygon: %d 回で格子上の内部点が得られず float 判定の候補を返す (%d, %d)",
            attempts,
            *last_float_hit,
        )
        return last_float_hit

    cx, cy = polygon_centroid(vertices)
    _logger.warning(
        "sample_point_in_polygon: %d 回で内部点が得られず重心へフォールバック (%.3f, %.3f)",
        attempts,
        cx,
        cy,
    )
    return int(cx), int(cy)


def select_random_vertex(vertices: np.ndarray, rng: RandomSource) -> tuple[int, int]:
    """頂点を一様に 1 つ選んで返す。"""
    index = int(rng.integers(int(vertices.shape[0])))
    return int(vertices[index, 0]), int(vertices[index, 1])


__all__ = [
    "RandomSource",
    "default_random_source",
    "sample_point_in_polygon",
    "select_random_vertex",
]
