from pathlib import Path

import pytest

from chaosgame.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.window_position == (25, 25)
    assert cfg.canvas_size == (800, 800)
    assert cfg.points_per_tick == 10
    assert cfg.tick_interval == pytest.approx(0.01)
    assert cfg.seed is None
    assert cfg.max_sample_attempts is None
    assert cfg.fps == pytest.approx(60.0)
    assert cfg.point_size == pytest.approx(2.0)
    assert cfg.background_color == (1.0, 1.0, 1.0)
    assert cfg.line_color == (0.0, 0.0, 0.0)


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".chaosgame" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  output_dir: "./out_discovered"\ngame:\n  points_per_tick: 50\n  seed: 7\n',
        encoding="utf-8",
    )

    assert output_root_dir() == Path("out_discovered")
    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.points_per_tick == 50
    assert cfg.seed == 7
    # 部分的な上書きでも、同じセクションの他のキーは既定値が残る。
    assert cfg.tick_interval == pytest.approx(0.01)
    assert cfg.canvas_size == (800, 800)


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".chaosgame" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('canvas:\n  size: [640, 480]\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'canvas:\n  size: [1024, 768]\ngame:\n  max_sample_attempts: 1000\n',
        encoding="utf-8",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.canvas_size == (1024, 768)
    assert cfg.max_sample_attempts == 1000


def test_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert runtime_config() is runtime_config()


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "canvas:\n  size: [800]\n",
        "canvas:\n  size: [0, 800]\n",
        "game:\n  tick_interval: 0\n",
        "game:\n  max_sample_attempts: 0\n",
        "render:\n  line_color: [2.0, 0.0, 0.0]\n",
        "render: 3\n",
        "- not\n- a mapping\n",
    ],
)
def test_invalid_config_raises(text: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(RuntimeError):
        runtime_config()
