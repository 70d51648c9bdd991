# どこで: `src/chaosgame/cli.py`。
# 何を: `python -m chaosgame SIDES FRACTION` の引数解析と起動を行う CLI。
# なぜ: 入力検証をコアの外（ここ）で済ませ、不正値をエンジンへ渡さないため。

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

SIDES_HELP = "First argument must be an integer for the number of regular polygon sides."
FRACTION_HELP = (
    "Second argument must be a double (fraction) for the distance between "
    "the current point and the next randomly picked vertex."
)

BANNER = (
    "Chaos Game",
    "~~~~~~~~~~",
    "1. Select initial random point inside of polygon.",
    "2. Select one of the vertices at random.",
    "3. Select point given fraction of distance between point and vertex.",
    "4. Repeat from 2 a large number of times.",
)


class _ArgumentParser(argparse.ArgumentParser):
    """解析失敗時に終了コード 1 で終わる ArgumentParser。

    位置引数の個数が合わない場合は、両引数の説明も併せて出す。
    """

    def error(self, message: str) -> NoReturn:
        if message.startswith(("the following arguments are required", "unrecognized arguments")):
            message = f"{message}\n{SIDES_HELP}\n{FRACTION_HELP}"
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _parse_sides(text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(SIDES_HELP) from exc


def _parse_fraction(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(FRACTION_HELP) from exc


def _parse_positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"整数である必要があります: {text!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"正の整数である必要があります: {text!r}")
    return value


def _parse_positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"数値である必要があります: {text!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"正の値である必要があります: {text!r}")
    return value


def build_argparser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="chaosgame",
        description="正多角形の頂点へ向かって点を繰り返し縮小移動させ、Chaos Game のフラクタルを描きます。",
        epilog=f"{SIDES_HELP}\n{FRACTION_HELP}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("sides", type=_parse_sides, help="正多角形の辺数（整数）。")
    parser.add_argument(
        "fraction",
        type=_parse_fraction,
        help="1 ステップで頂点へ近づく距離の割合（0..1）。",
    )
    parser.add_argument("--width", type=_parse_positive_int, default=None, help="キャンバス幅。")
    parser.add_argument("--height", type=_parse_positive_int, default=None, help="キャンバス高さ。")
    parser.add_argument("--seed", type=int, default=None, help="乱数シード。")
    parser.add_argument("--config", type=Path, default=None, help="config.yaml のパス。")
    parser.add_argument(
        "--points-per-tick",
        type=_parse_positive_int,
        default=None,
        help="1 tick あたりに追加する点の数（既定: config の game.points_per_tick）。",
    )
    parser.add_argument(
        "--tick-interval",
        type=_parse_positive_float,
        default=None,
        help="tick の間隔（秒）。",
    )
    parser.add_argument("--fps", type=float, default=None, help="再描画の目標 fps（<=0 で無制限）。")
    parser.add_argument(
        "--max-sample-attempts",
        type=_parse_positive_int,
        default=None,
        help="初期点サンプリングの試行上限（既定: 無制限）。",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
    )
    return parser


def _canvas_size(args: argparse.Namespace) -> tuple[int, int] | None:
    if args.width is None and args.height is None:
        return None

    from chaosgame.core.runtime_config import runtime_config, set_config_path

    set_config_path(args.config)
    default_w, default_h = runtime_config().canvas_size
    width = args.width if args.width is not None else default_w
    height = args.height if args.height is not None else default_h
    return int(width), int(height)


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level)))

    for line in BANNER:
        print(line)

    # GUI 依存（pyglet/moderngl）は引数検証を通った後にだけ読み込む。
    from chaosgame.api import run

    run(
        args.sides,
        args.fraction,
        config_path=args.config,
        canvas_size=_canvas_size(args),
        seed=args.seed,
        points_per_tick=args.points_per_tick,
        tick_interval=args.tick_interval,
        fps=args.fps,
        max_sample_attempts=args.max_sample_attempts,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
