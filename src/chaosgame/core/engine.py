"""
どこで: `src/chaosgame/core/engine.py`。Chaos Game の状態と 1 ステップ更新。
何を: 多角形（初回 render で確定）・共有乱数源・追記専用の点列を保持し、advance/render を提供する。
なぜ: ウィンドウやタイマーから独立したコアとして、決定的にテストできる形にするため。
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass

import numpy as np

from chaosgame.core.frame import RenderFrame
from chaosgame.core.polygon import compute_polygon_vertices
from chaosgame.core.sampling import (
    RandomSource,
    default_random_source,
    sample_point_in_polygon,
    select_random_vertex,
)

_logger = logging.getLogger(__name__)

_INITIAL_CAPACITY = 4096

_INT32_MIN = int(np.iinfo(np.int32).min)
_INT32_MAX = int(np.iinfo(np.int32).max)


def _trunc_int32(value: float) -> int:
    """0 方向へ切り捨て、int32 の範囲へ飽和させた整数を返す（NaN は 0）。"""
    if math.isnan(value):
        return 0
    if value >= _INT32_MAX:
        return _INT32_MAX
    if value <= _INT32_MIN:
        return _INT32_MIN
    return int(value)


@dataclass(frozen=True, slots=True)
class PolygonPending:
    """多角形が未計算（初回 render 前）であることを表す状態。"""


@dataclass(frozen=True, slots=True)
class PolygonReady:
    """多角形が計算済みであることを表す状態。

    Parameters
    ----------
    vertices : np.ndarray
        int32 型 shape (sides, 2)、writeable=False。
    canvas_size : tuple[int, int]
        計算に使ったキャンバス寸法。以後のリサイズは反映しない。
    """

    vertices: np.ndarray
    canvas_size: tuple[int, int]


PolygonState = PolygonPending | PolygonReady


class ChaosGameEngine:
    """Chaos Game のコア。

    Notes
    -----
    - `contraction_fraction` は内部で `distance_fraction = 1 - contraction_fraction` として保持する。
    - 引数は検証しない。sides < 3 や範囲外の fraction は退化した幾何をそのまま生む。
    - 点列と乱数源の更新は 1 つの Lock で直列化する。
    """

    def __init__(
        self,
        sides: int,
        contraction_fraction: float,
        *,
        rng: RandomSource | None = None,
        seed: int | None = None,
        max_sample_attempts: int | None = None,
    ) -> None:
        self._sides = int(sides)
        self._distance_fraction = 1.0 - float(contraction_fraction)
        self._rng: RandomSource = rng if rng is not None else default_random_source(seed)
        self._max_sample_attempts = (
            None if max_sample_attempts is None else int(max_sample_attempts)
        )
        self._state: PolygonState = PolygonPending()

        # 追記専用バッファ。[:count] の行は一度書いたら二度と書き換えない。
        self._points = np.empty((_INITIAL_CAPACITY, 2), dtype=np.int32)
        self._count = 0
        self._lock = threading.Lock()

    # ---------- 読み取り ----------
    @property
    def sides(self) -> int:
        return self._sides

    @property
    def distance_fraction(self) -> float:
        """1 ステップで直前の点から頂点方向へ進む割合（= 1 - contraction_fraction）。"""
        return self._distance_fraction

    @property
    def contraction_fraction(self) -> float:
        return 1.0 - self._distance_fraction

    @property
    def state(self) -> PolygonState:
        return self._state

    @property
    def polygon_ready(self) -> bool:
        return isinstance(self._state, PolygonReady)

    @property
    def vertices(self) -> np.ndarray | None:
        """計算済みの頂点配列。未計算なら None。"""
        state = self._state
        if isinstance(state, PolygonReady):
            return state.vertices
        return None

    def __len__(self) -> int:
        return int(self._count)

    def points(self) -> np.ndarray:
        """点列のスナップショット（shape (M,2)、writeable=False）を返す。"""
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> np.ndarray:
        view = self._points[: self._count]
        view.setflags(write=False)
        return view

    # ---------- 多角形 ----------
    def ensure_polygon(self, width: int, height: int) -> np.ndarray:
        """多角形が未計算なら (width, height) から計算し、頂点配列を返す。

        2 回目以降は引数に関わらずキャッシュ済みの頂点を返す。
        """
        with self._lock:
            return self._ensure_polygon_locked(int(width), int(height))

    def _ensure_polygon_locked(self, width: int, height: int) -> np.ndarray:
        state = self._state
        if isinstance(state, PolygonReady):
            return state.vertices

        vertices = compute_polygon_vertices(
            self._sides,
            width // 2,
            (width // 2, height // 2),
        )
        self._state = PolygonReady(vertices=vertices, canvas_size=(width, height))
        _logger.debug(
            "polygon computed: sides=%d canvas=%dx%d vertices=%s",
            self._sides,
            width,
            height,
            vertices.tolist(),
        )
        return vertices

    # ---------- 更新 ----------
    def advance(self) -> bool:
        """点を 1 つ追加する。多角形が未計算なら何もせず False を返す。"""
        with self._lock:
            return self._advance_locked()

    def advance_many(self, count: int) -> int:
        """`advance` を count 回行い、追加した点の数を返す。"""
        n = int(count)
        added = 0
        with self._lock:
            for _ in range(n):
                if not self._advance_locked():
                    break
                added += 1
        return added

    def _advance_locked(self) -> bool:
        state = self._state
        if not isinstance(state, PolygonReady):
            return False

        if self._count == 0:
            point = sample_point_in_polygon(
                state.vertices,
                self._rng,
                max_attempts=self._max_sample_attempts,
            )
        else:
            point = self._next_point(state.vertices)
        self._append(point)
        return True

    def _next_point(self, vertices: np.ndarray) -> tuple[int, int]:
        last_x = int(self._points[self._count - 1, 0])
        last_y = int(self._points[self._count - 1, 1])
        vx, vy = select_random_vertex(vertices, self._rng)
        f = self._distance_fraction
        # 範囲外の fraction では点が発散するため、int32 へ飽和させる。
        return (
            _trunc_int32(last_x + (vx - last_x) * f),
            _trunc_int32(last_y + (vy - last_y) * f),
        )

    def _append(self, point: tuple[int, int]) -> None:
        if self._count >= self._points.shape[0]:
            # 倍々で再確保する。既存スナップショットは旧バッファを参照し続ける。
            grown = np.empty((self._points.shape[0] * 2, 2), dtype=np.int32)
            grown[: self._count] = self._points[: self._count]
            self._points = grown
        self._points[self._count, 0] = point[0]
        self._points[self._count, 1] = point[1]
        self._count += 1

    # ---------- 描画 ----------
    def render(self, width: int, height: int) -> RenderFrame:
        """初回のみ多角形を計算し、多角形と全点のスナップショットを返す。"""
        with self._lock:
            vertices = self._ensure_polygon_locked(int(width), int(height))
            points = self._snapshot_locked()
        return RenderFrame(vertices=vertices, points=points)


__all__ = ["ChaosGameEngine", "PolygonPending", "PolygonReady", "PolygonState"]
