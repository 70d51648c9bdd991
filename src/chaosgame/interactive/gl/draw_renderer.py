# どこで: `src/chaosgame/interactive/gl/draw_renderer.py`。
# 何を: ライブ描画用の ModernGL レンダラーをカプセル化する。
# なぜ: コンテキスト生成・シェーダ設定・メッシュ転送をウィンドウ処理から分離し、責務を明確にするため。

from __future__ import annotations

import moderngl
from pyglet.window import Window

from chaosgame.core.frame import POINT_DIAMETER, RenderFrame
from chaosgame.interactive.gl import utils as render_utils
from chaosgame.interactive.gl.shader import Shader
from chaosgame.interactive.gl.vertex_mesh import VertexMesh
from chaosgame.interactive.render_settings import RenderSettings


class DrawRenderer:
    """多角形の輪郭と点群を描くシンプルなレンダラー。"""

    def __init__(self, window: Window, settings: RenderSettings) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context()
        self.program = Shader.create_shader(self.ctx)
        self._settings = settings
        # 輪郭は初回 render 以降不変なので、1 度だけ upload する。
        self._outline_mesh = VertexMesh(self.ctx, self.program, initial_reserve=4096)
        self._outline_uploaded = False
        # 点群は追記専用なので、増えた末尾だけを転送する。
        self._point_mesh = VertexMesh(self.ctx, self.program)
        canvas_w, canvas_h = settings.canvas_size
        # 射影行列はキャンバス寸法にのみ依存するため初期化時に一度設定する。
        projection = render_utils.build_projection(float(canvas_w), float(canvas_h))
        self.program["projection"].write(projection.tobytes())

    def viewport(self, width: int, height: int) -> None:
        """ビューポートをウィンドウサイズに合わせて更新する。"""
        self.ctx.viewport = (0, 0, int(width), int(height))

    def clear(self, color: tuple[float, float, float]) -> None:
        """背景色でクリアする。"""
        self.ctx.clear(*color, 1.0)

    def render_frame(self, frame: RenderFrame) -> None:
        """輪郭 → 点群の順に描画する。"""
        settings = self._settings

        if not self._outline_uploaded and frame.vertices.shape[0] > 0:
            self._outline_mesh.upload(frame.vertices)
            self._outline_uploaded = True
        self.program["color"].value = (*settings.line_color, 1.0)
        self._outline_mesh.render(self.ctx.LINE_LOOP)

        # マーカー中心は (x, y) から半径ぶんずらした位置。
        self._point_mesh.sync_append_only(frame.points, shift=POINT_DIAMETER / 2.0)
        self.ctx.point_size = float(settings.point_size)
        self.program["color"].value = (*settings.point_color, 1.0)
        self._point_mesh.render(self.ctx.POINTS)

    def release(self) -> None:
        """GPU リソースを解放する。"""
        self._outline_mesh.release()
        self._point_mesh.release()
        self.program.release()
        self.ctx.release()
