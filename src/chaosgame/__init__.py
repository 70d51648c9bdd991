# どこで: `src/chaosgame/__init__.py`。
# 何を: ルート `chaosgame` パッケージを定義する。
# なぜ: import 起点を `chaosgame` に統一するため。

from __future__ import annotations

from chaosgame.api import run
from chaosgame.core.engine import ChaosGameEngine
from chaosgame.core.frame import RenderFrame

__all__ = ["ChaosGameEngine", "RenderFrame", "run"]
