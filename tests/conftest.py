from pathlib import Path
import pytest

from Dir_Digest.cli import settings as cli_settings


@pytest.fixture(autouse=True)
def isolate_user_settings(tmp_path_factory, monkeypatch):
    """
    Keep tests from reading a real ~/.config/dir_digest/settings.json
    or a DIR_DIGEST_SETTINGS set in the environment.
    """
    missing = tmp_path_factory.mktemp("home") / "settings.json"
    monkeypatch.setattr(cli_settings, "USER_SETTINGS_PATH", missing)
    monkeypatch.delenv(cli_settings.SETTINGS_ENV, raising=False)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """
    Small nested tree:

        a.txt           hello
        b.txt           world
        sub/c.bin       bytes 0..255
        sub/deeper/d.md # notes
        empty/
    """
    root = tmp_path / "tree"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / "b.txt").write_text("world")
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "sub" / "c.bin").write_bytes(bytes(range(256)))
    (root / "sub" / "deeper" / "d.md").write_text("# notes\n")
    (root / "empty").mkdir()
    return root
