import io
import os
import threading
from pathlib import Path

import pytest

from Dir_Digest.core.errors import ConfigError
from Dir_Digest.core.logger import RunLogger
from Dir_Digest.core.models import FileSet, HashSettings, TreeDigest, WorkResult
from Dir_Digest.core.progress import ClickProgress, CountingProgress, NullProgress


def test_hash_settings_defaults():
    s = HashSettings()

    assert s.algorithm == "md5"
    assert s.chunk_size == 1 << 20
    assert s.workers == (os.cpu_count() or 1)
    assert s.follow_symlinks is False
    assert s.ignore == []


def test_hash_settings_normalizes_algorithm():
    assert HashSettings(algorithm="SHA256").algorithm == "sha256"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"workers": 0},
        {"chunk_size": 0},
        {"algorithm": "nope"},
    ],
)
def test_hash_settings_validation(kwargs):
    with pytest.raises(ConfigError):
        HashSettings(**kwargs)


def test_hash_settings_from_dict():
    s = HashSettings.from_dict(
        {
            "hashing": {"algorithm": "sha1", "chunk_size": "4096", "workers": 3},
            "scan": {"follow_symlinks": True, "ignore": ["*.tmp"]},
        }
    )

    assert s.algorithm == "sha1"
    assert s.chunk_size == 4096
    assert s.workers == 3
    assert s.follow_symlinks is True
    assert s.ignore == ["*.tmp"]


def test_hash_settings_from_dict_bad_value():
    with pytest.raises(ConfigError):
        HashSettings.from_dict({"hashing": {"workers": "many"}})


def test_file_set_sequence_behaviour(tmp_path: Path):
    paths = (tmp_path / "a", tmp_path / "b")
    fs = FileSet(root=tmp_path, paths=paths)

    assert len(fs) == 2
    assert list(fs) == list(paths)
    assert fs[1] == paths[1]
    assert not FileSet(root=tmp_path)


def test_work_result_ok(tmp_path: Path):
    assert WorkResult(0, tmp_path, digest=b"x").ok
    assert not WorkResult(0, tmp_path, error=OSError("boom")).ok


def test_tree_digest_rendering():
    t = TreeDigest(digest=bytes([0, 171, 255]), algorithm="md5", file_count=1)

    assert t.hexdigest() == "00abff"
    assert t.label == "MD5"


# ----------------------------
# Progress
# ----------------------------

def test_counting_progress_is_thread_safe():
    progress = CountingProgress()
    progress.start(8 * 500)

    def worker():
        for _ in range(500):
            progress.tick()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    progress.finish()

    assert progress.completed == 4000
    assert progress.finished


def test_click_progress_renders_to_file():
    out = io.StringIO()
    progress = ClickProgress(label="Hashing", file=out)

    progress.start(3)
    for _ in range(3):
        progress.tick()
    progress.finish()

    assert progress.completed == 3
    assert "Hashing" in out.getvalue()


def test_null_progress_is_noop():
    progress = NullProgress()
    progress.start(1)
    progress.tick()
    progress.finish()


# ----------------------------
# Logger
# ----------------------------

def test_default_logger_is_silent(capsys):
    RunLogger().log("ERROR", "test", "should not print")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_console_logger_levels():
    out = io.StringIO()
    logger = RunLogger.for_console(stream=out)

    logger.log("DEBUG", "test", "hidden")
    logger.log("INFO", "test", "shown")

    assert out.getvalue() == "shown\n"


def test_quiet_logger_only_errors():
    out = io.StringIO()
    logger = RunLogger.for_console(quiet=True, stream=out)

    logger.log("INFO", "test", "hidden")
    logger.log("ERROR", "test", "broken")

    assert out.getvalue() == "broken\n"
    assert not logger.is_enabled("INFO")


def test_verbose_logger_shows_debug():
    out = io.StringIO()
    logger = RunLogger.for_console(verbose=True, stream=out)

    logger.log("DEBUG", "test", "detail")

    assert "detail" in out.getvalue()


@pytest.mark.parametrize("section", ["hashing", "scan"])
@pytest.mark.parametrize("value", [None, 3, "text", [1]])
def test_hash_settings_section_must_be_object(section, value):
    with pytest.raises(ConfigError) as exc:
        HashSettings.from_dict({section: value})

    assert f"Settings section {section!r}" in str(exc.value)


@pytest.mark.parametrize("ignore", ["deeper", ["ok", 3], {"a": 1}])
def test_hash_settings_ignore_must_be_list_of_strings(ignore):
    with pytest.raises(ConfigError):
        HashSettings.from_dict({"scan": {"ignore": ignore}})


def test_hash_settings_ignore_list_kept_whole():
    s = HashSettings.from_dict({"scan": {"ignore": ["deeper"]}})

    assert s.ignore == ["deeper"]


def test_verbose_logger_prefixes_component():
    out = io.StringIO()
    logger = RunLogger.for_console(verbose=True, stream=out)

    logger.log("INFO", "scanner", "walking")

    assert out.getvalue() == "[scanner] walking\n"
