"""
どこで: `src/chaosgame/export/svg.py`。
何を: RenderFrame（多角形 + 点列）を SVG として保存する関数を提供する。
なぜ: ウィンドウに依存しない headless な書き出しで、途中経過をそのまま残せるようにするため。
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from chaosgame.core.frame import POINT_DIAMETER, RenderFrame

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _rgb01_to_hex(rgb01: tuple[float, float, float]) -> str:
    """0..1 float RGB を #RRGGBB に変換して返す。"""
    r, g, b = (int(round(max(0.0, min(1.0, float(c))) * 255.0)) for c in rgb01)
    return f"#{r:02X}{g:02X}{b:02X}"


def _outline_to_d(vertices: np.ndarray) -> str:
    """頂点列（shape (N,2)）を閉じた SVG path の d 属性へ変換して返す。"""
    parts = [f"M {_fmt(vertices[0, 0])} {_fmt(vertices[0, 1])}"]
    for xy in vertices[1:]:
        parts.append(f"L {_fmt(xy[0])} {_fmt(xy[1])}")
    parts.append("Z")
    return " ".join(parts)


def export_svg(
    frame: RenderFrame,
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    line_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
    point_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> Path:
    """RenderFrame を SVG として保存する。

    Parameters
    ----------
    frame : RenderFrame
        `ChaosGameEngine.render` の戻り値。
    path : str or Path
        出力先パス。親ディレクトリは作成する。
    canvas_size : tuple[int, int]
        キャンバス寸法（viewBox）。
    line_color, point_color : tuple[float, float, float]
        多角形の線色と点の塗り色（RGB 0..1）。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が正でない場合。
    """
    _path = Path(path)
    canvas_w, canvas_h = canvas_size
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")

    stroke = _rgb01_to_hex(line_color)
    fill = _rgb01_to_hex(point_color)
    radius = _fmt(POINT_DIAMETER / 2.0)

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        (
            f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {int(canvas_w)} {int(canvas_h)}" '
            f'width="{int(canvas_w)}" height="{int(canvas_h)}">'
        )
    )

    if frame.vertices.shape[0] >= 2:
        d = _outline_to_d(frame.vertices)
        lines.append(f'  <path d="{d}" fill="none" stroke="{stroke}" stroke-width="1" />')

    if frame.n_points:
        lines.append(f'  <g fill="{fill}" stroke="none">')
        for cx, cy in frame.marker_centers():
            lines.append(f'    <circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="{radius}" />')
        lines.append("  </g>")

    lines.append("</svg>")

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write("\n".join(lines) + "\n")

    return _path


def default_svg_output_path(output_dir: Path, *, sides: int, contraction_fraction: float) -> Path:
    """`{output_dir}/svg/chaosgame_{sides}_{fraction}.svg` を返す。"""
    fraction_text = f"{float(contraction_fraction):g}".replace(".", "p").replace("-", "m")
    return Path(output_dir) / "svg" / f"chaosgame_{int(sides)}_{fraction_text}.svg"


__all__ = ["default_svg_output_path", "export_svg"]
