"""
どこで: `src/chaosgame/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL を使い、ChaosGameEngine を一定間隔で進めながらウィンドウに描画する。
なぜ: コアを組み込んだ実際のプレビュー経路（CLI からの起動先）を用意するため。
"""

from __future__ import annotations

from pathlib import Path

import pyglet

from chaosgame.core.engine import ChaosGameEngine
from chaosgame.core.runtime_config import output_root_dir, runtime_config, set_config_path
from chaosgame.interactive.render_settings import RenderSettings
from chaosgame.interactive.runtime.draw_window_system import DrawWindowSystem
from chaosgame.interactive.runtime.window_loop import ChaosGameLoop, TickSchedule


def run(
    sides: int,
    fraction: float,
    *,
    config_path: str | Path | None = None,
    canvas_size: tuple[int, int] | None = None,
    seed: int | None = None,
    points_per_tick: int | None = None,
    tick_interval: float | None = None,
    fps: float | None = None,
    max_sample_attempts: int | None = None,
) -> None:
    """pyglet ウィンドウを生成し、Chaos Game をリアルタイム描画する。

    Parameters
    ----------
    sides : int
        正多角形の辺数。検証しない。
    fraction : float
        1 ステップで頂点へ近づく割合（contraction fraction）。検証しない。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    canvas_size, seed, points_per_tick, tick_interval, fps, max_sample_attempts
        None 以外を渡すと config の値を上書きする。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()

    # pyglet の Window 作成前にオプションを設定する。
    pyglet.options["vsync"] = False

    settings = RenderSettings(
        background_color=cfg.background_color,
        line_color=cfg.line_color,
        point_color=cfg.point_color,
        point_size=cfg.point_size,
        canvas_size=canvas_size if canvas_size is not None else cfg.canvas_size,
    )
    schedule = TickSchedule(
        interval=tick_interval if tick_interval is not None else cfg.tick_interval,
        steps_per_tick=points_per_tick if points_per_tick is not None else cfg.points_per_tick,
    )

    engine = ChaosGameEngine(
        sides,
        fraction,
        seed=seed if seed is not None else cfg.seed,
        max_sample_attempts=(
            max_sample_attempts if max_sample_attempts is not None else cfg.max_sample_attempts
        ),
    )

    draw_window = DrawWindowSystem(engine, settings=settings, output_dir=output_root_dir())
    draw_window.window.set_location(*cfg.window_position)

    loop = ChaosGameLoop(
        draw_window.window,
        draw_frame=draw_window.draw_frame,
        step=engine.advance_many,
        schedule=schedule,
        fps=fps if fps is not None else cfg.fps,
    )
    try:
        loop.run()
    finally:
        # 例外でも確実に後始末する。
        draw_window.close()
