# どこで: `src/chaosgame/__main__.py`。
# 何を: `python -m chaosgame` のエントリポイント。

from __future__ import annotations

from chaosgame.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
