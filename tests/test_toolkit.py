# tests/test_toolkit.py

from __future__ import annotations

import json
import logging
import zipfile
from datetime import datetime
from pathlib import Path

from syskit import RunOutcome, SysKit
from syskit.logs.log_writer import LogWriterHandler

from .fakes import FakeClock


def _today_log(settings) -> Path:
    return settings.log_dir / f"{datetime.now().strftime('%Y-%m-%d')}.log"


def test_backup_and_restore_roundtrip(kit: SysKit, tmp_path: Path) -> None:
    src = tmp_path / "project"
    (src / "docs").mkdir(parents=True)
    (src / "docs" / "readme.md").write_text("# hi", "utf-8")
    (src / "cache.tmp").write_text("junk", "utf-8")

    archive = tmp_path / "project.zip"
    assert kit.backup_folder(src, archive, exclude=["*.tmp"]) is True
    with zipfile.ZipFile(archive) as z:
        assert z.namelist() == ["docs/readme.md"]

    assert kit.restore_backup(archive, tmp_path / "restored") is True
    assert (tmp_path / "restored" / "docs" / "readme.md").read_text("utf-8") == "# hi"


def test_run_every_is_mirrored_into_log(kit: SysKit, clock: FakeClock, settings) -> None:
    calls = []

    assert kit.run_every("10 minutes", lambda: calls.append(1), "sync", max_runs=1) == RunOutcome.RAN
    clock.advance(hours=1)
    assert kit.run_every("10 minutes", lambda: calls.append(1), "sync", max_runs=1) == RunOutcome.MAX_RUNS_REACHED

    assert calls == [1]
    lines = _today_log(settings).read_text("utf-8").splitlines()
    assert "[info] Task 'sync' executed automatically (every 10 minutes)" in lines[0]
    assert "[warning] Task 'sync' reached its maximum number of runs (1)" in lines[1]

    state = json.loads(settings.task_state_path.read_text("utf-8"))
    assert state["sync"] == {"lastRun": "2025-01-31 10:00:00", "count": 1}


def test_run_every_outcome_logged_once_with_stdlib_bridge(kit: SysKit, settings) -> None:
    handler = LogWriterHandler(kit.log_writer, category="syskit", level=logging.WARNING)
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        kit.run_every("1 minute", lambda: None, "once", max_runs=1)
        kit.run_every("1 minute", lambda: None, "once", max_runs=1)
    finally:
        root.removeHandler(handler)

    lines = _today_log(settings).read_text("utf-8").splitlines()
    assert sum("maximum number of runs" in ln for ln in lines) == 1
    assert not (settings.log_dir / "syskit").exists()


def test_dir_size_human_and_raw(kit: SysKit, tmp_path: Path) -> None:
    d = tmp_path / "blob"
    d.mkdir()
    (d / "f.bin").write_bytes(b"\0" * 2048)

    assert kit.dir_size(d) == "2 KB"
    assert kit.dir_size(d, human_readable=False) == 2048


def test_monitor_json_and_dict(kit: SysKit) -> None:
    data = json.loads(kit.monitor())
    assert data["cpu_cores"] == 4
    assert kit.monitor(as_json=False)["cpu_cores"] == 4
    assert kit.health()["status"] == "OK"
    assert "python_version" in kit.info()


def test_export_excel_uses_settings_colors(kit: SysKit, tmp_path: Path) -> None:
    out = tmp_path / "report.xlsx"
    assert kit.export_excel(out, [{"k": "v"}]) is True
    with zipfile.ZipFile(out) as z:
        assert b"FF071E40" in z.read("xl/styles.xml")


def test_file_helpers_delegate(kit: SysKit, tmp_path: Path) -> None:
    target = kit.ensure_directory(tmp_path / "a" / "b")
    (target / "x.txt").write_text("x", "utf-8")

    assert [p.name for p in kit.list_files(target)] == ["x.txt"]
    assert kit.copy(target, tmp_path / "copy") is True
    assert kit.move(tmp_path / "copy", tmp_path / "moved") is True
    assert kit.delete(tmp_path / "moved") is True
    assert not (tmp_path / "moved").exists()
    assert kit.delete_old_files(target, 1) == 0
