"""
どこで: `src/chaosgame/interactive/gl/shader.py`。
何を: 多角形の輪郭と点マーカーを単色で描く GLSL プログラムを生成する。
なぜ: シェーダソースを renderer から切り離し、uniform 名の定義を一箇所に集約するため。
"""

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 330
uniform mat4 projection;
in vec2 in_vert;
void main() {
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 330
uniform vec4 color;
out vec4 frag_color;
void main() {
    frag_color = color;
}
"""


class Shader:
    """描画用プログラムのファクトリ。"""

    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """uniform `projection`（mat4）と `color`（vec4）を持つプログラムを返す。"""
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
