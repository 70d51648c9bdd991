# どこで: `src/chaosgame/interactive/runtime/draw_window_system.py`。
# 何を: ChaosGameEngine の状態を描画ウィンドウへ描くサブシステムを提供する。
# なぜ: `src/chaosgame/api/runner.py` の `run()` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

import logging
from pathlib import Path

from pyglet.window import key

from chaosgame.core.engine import ChaosGameEngine
from chaosgame.core.frame import RenderFrame
from chaosgame.export.svg import default_svg_output_path, export_svg
from chaosgame.interactive.draw_window import create_draw_window
from chaosgame.interactive.gl.draw_renderer import DrawRenderer
from chaosgame.interactive.render_settings import RenderSettings

_logger = logging.getLogger(__name__)


class DrawWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(
        self,
        engine: ChaosGameEngine,
        *,
        settings: RenderSettings,
        output_dir: Path,
    ) -> None:
        """描画用の window/renderer を初期化する。"""

        self._engine = engine
        self._settings = settings

        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_draw_window(settings)
        self._renderer = DrawRenderer(self.window, settings)

        self._svg_output_path = default_svg_output_path(
            output_dir,
            sides=engine.sides,
            contraction_fraction=engine.contraction_fraction,
        )
        self._last_frame: RenderFrame | None = None
        self.window.push_handlers(on_key_press=self._on_key_press)

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol == key.S:
            try:
                path = self.save_svg()
            except Exception as e:
                _logger.exception("Failed to save SVG")
                print(f"Failed to save SVG: {e}")
                return
            print(f"Saved SVG: {path}")

    def save_svg(self) -> Path:
        """最後に描画したフレームを SVG として保存し、保存先パスを返す。"""

        frame = self._last_frame
        if frame is None:
            raise RuntimeError("まだ 1 フレームも描画していない")
        settings = self._settings
        return export_svg(
            frame,
            self._svg_output_path,
            canvas_size=settings.canvas_size,
            line_color=settings.line_color,
            point_color=settings.point_color,
        )

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # 注: 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        self._renderer.ctx.screen.use()

        fb_w, fb_h = self._framebuffer_size()
        self._renderer.viewport(fb_w, fb_h)
        self._renderer.clear(self._settings.background_color)

        # 多角形はキャンバスの論理寸法で初回のみ確定する（以後のリサイズは反映しない）。
        frame = self._engine.render(int(self.window.width), int(self.window.height))
        self._last_frame = frame
        self._renderer.render_frame(frame)

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        # renderer が保持している GPU リソースを破棄してから window を閉じる。
        self._renderer.release()
        self.window.close()
