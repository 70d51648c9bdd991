# どこで: `src/chaosgame/interactive/runtime/window_loop.py`。
# 何を: 「一定間隔で点を進める tick」と「fps での再描画」を pyglet の app loop 上で回す。
# なぜ: 経過時間をポーリングする busy-wait をやめ、pyglet.clock のスケジューラに任せるため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pyglet


@dataclass(frozen=True, slots=True)
class TickSchedule:
    """tick（状態更新）の周期と 1 回あたりのステップ数。"""

    interval: float
    steps_per_tick: int

    def __post_init__(self) -> None:
        if float(self.interval) <= 0:
            raise ValueError(f"interval は正の値である必要がある: got={self.interval}")
        if int(self.steps_per_tick) < 0:
            raise ValueError(f"steps_per_tick は 0 以上である必要がある: got={self.steps_per_tick}")


class ChaosGameLoop:
    """1 つのウィンドウに対し、tick と描画を同一ループで回す。

    `draw_frame()` は back buffer へ描くだけにし、`flip()` は pyglet が行う。
    """

    def __init__(
        self,
        window: Any,
        *,
        draw_frame: Callable[[], None],
        step: Callable[[int], Any],
        schedule: TickSchedule,
        fps: float,
    ) -> None:
        """ループを初期化する。

        Parameters
        ----------
        window : Any
            pyglet の Window。
        draw_frame : Callable[[], None]
            1 フレーム分の描画処理。
        step : Callable[[int], Any]
            tick ごとに `schedule.steps_per_tick` を渡して呼ぶ状態更新。
        schedule : TickSchedule
            tick の周期とステップ数。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._window = window
        self._draw_frame = draw_frame
        self._step = step
        self._schedule = schedule
        self._fps = float(fps)

    def tick(self, dt: float = 0.0) -> None:
        """状態を 1 tick 進める。"""

        self._step(int(self._schedule.steps_per_tick))

    def redraw(self, dt: float = 0.0) -> None:
        window = self._window
        # 閉じられたウィンドウへ draw すると例外になり得るため、開いている場合だけ描く。
        if window not in pyglet.app.windows:
            return
        window.draw(dt)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        def request_exit(*_: object) -> None:
            pyglet.app.exit()

        self._window.push_handlers(on_close=request_exit, on_draw=self._draw_frame)

        pyglet.clock.schedule_interval(self.tick, float(self._schedule.interval))
        if self._fps <= 0:
            pyglet.clock.schedule(self.redraw)
        else:
            pyglet.clock.schedule_interval(self.redraw, 1.0 / float(self._fps))

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(self.tick)
            pyglet.clock.unschedule(self.redraw)
