# どこで: `src/chaosgame/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: キャンバス寸法やステップ数、出力先をコードを触らずに切り替えられるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """chaosgame の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    window_position: tuple[int, int]
    canvas_size: tuple[int, int]
    points_per_tick: int
    tick_interval: float
    seed: int | None
    max_sample_attempts: int | None
    fps: float
    point_size: float
    background_color: tuple[float, float, float]
    line_color: tuple[float, float, float]
    point_color: tuple[float, float, float]


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".chaosgame" / "config.yaml",
        home / ".config" / "chaosgame" / "config.yaml",
    )


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(os.path.expandvars(os.path.expanduser(s)))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的にマージして返す（override 側が後勝ち）。"""

    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int]:
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return int(seq[0]), int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_rgb01(value: Any, *, key: str) -> tuple[float, float, float]:
    try:
        seq = [float(v) for v in value]
    except Exception as exc:
        raise RuntimeError(f"{key} は [r, g, b] の数値配列である必要があります: got={value!r}") from exc
    if len(seq) != 3:
        raise RuntimeError(f"{key} は [r, g, b] の配列である必要があります: got={value!r}")
    for c in seq:
        if not 0.0 <= c <= 1.0:
            raise RuntimeError(f"{key} の各成分は 0..1 である必要があります: got={value!r}")
    return seq[0], seq[1], seq[2]


def _as_float(value: Any, *, key: str) -> float:
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_optional_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("chaosgame")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="chaosgame/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.chaosgame/config.yaml` / `~/.config/chaosgame/config.yaml`（最初に見つかった 1 つ）
    3) `set_config_path()` で指定したファイル
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    try:
        version_i = int(version)  # type: ignore[arg-type]
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError("paths.output_dir が未設定です")

    ui = _as_mapping(payload.get("ui"), key="ui")
    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    game = _as_mapping(payload.get("game"), key="game")
    render = _as_mapping(payload.get("render"), key="render")

    canvas_size = _as_int_pair(canvas.get("size"), key="canvas.size")
    if canvas_size[0] <= 0 or canvas_size[1] <= 0:
        raise RuntimeError(f"canvas.size は正の値である必要があります: got={canvas_size}")

    points_per_tick = _as_optional_int(game.get("points_per_tick"), key="game.points_per_tick")
    if points_per_tick is None or points_per_tick < 0:
        raise RuntimeError(f"game.points_per_tick は 0 以上の整数である必要があります: got={points_per_tick!r}")

    tick_interval = _as_float(game.get("tick_interval"), key="game.tick_interval")
    if tick_interval <= 0:
        raise RuntimeError(f"game.tick_interval は正の値である必要があります: got={tick_interval}")

    max_sample_attempts = _as_optional_int(
        game.get("max_sample_attempts"), key="game.max_sample_attempts"
    )
    if max_sample_attempts is not None and max_sample_attempts <= 0:
        raise RuntimeError(
            f"game.max_sample_attempts は正の整数または null である必要があります: got={max_sample_attempts}"
        )

    point_size = _as_float(render.get("point_size"), key="render.point_size")
    if point_size <= 0:
        raise RuntimeError(f"render.point_size は正の値である必要があります: got={point_size}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        window_position=_as_int_pair(ui.get("window_position"), key="ui.window_position"),
        canvas_size=canvas_size,
        points_per_tick=int(points_per_tick),
        tick_interval=float(tick_interval),
        seed=_as_optional_int(game.get("seed"), key="game.seed"),
        max_sample_attempts=max_sample_attempts,
        fps=_as_float(render.get("fps"), key="render.fps"),
        point_size=float(point_size),
        background_color=_as_rgb01(render.get("background_color"), key="render.background_color"),
        line_color=_as_rgb01(render.get("line_color"), key="render.line_color"),
        point_color=_as_rgb01(render.get("point_color"), key="render.point_color"),
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
