import subprocess
from pathlib import Path

from lookandfeel.cli import build_parser, main
from lookandfeel.utils import Utils


def test_default_args():
    args = build_parser().parse_args([])
    assert args.repo is None
    assert args.branch is None
    assert args.config is None
    assert not args.dry_run
    assert not args.no_wallpapers
    assert not args.verbose


def test_parsing_args():
    args = build_parser().parse_args(
        ["--repo", "https://example.com/x", "--branch", "dev", "--dry-run", "--home", "/tmp/h", "--config", "c.yaml"]
    )
    assert args.repo == "https://example.com/x"
    assert args.branch == "dev"
    assert args.dry_run
    assert args.home == Path("/tmp/h")
    assert args.config == Path("c.yaml")


def test_dry_run_end_to_end(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    home = tmp_path / "home"
    home.mkdir()
    log = tmp_path / "install.log"

    rc = main(["--dry-run", "--no-wallpapers", "--home", str(home), "--log-file", str(log)])

    assert rc == 0
    assert list(home.iterdir()) == []
    assert not (tmp_path / "cache").exists()
    assert "git clone" in log.read_text()


def test_config_error_exits_nonzero(tmp_path):
    rc = main(["--config", str(tmp_path / "missing.yaml"), "--log-file", str(tmp_path / "l.log")])
    assert rc == 1


def test_hooks_dir_blocked_by_file_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setattr(
        Utils, "run_command", staticmethod(lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, "", ""))
    )
    home = tmp_path / "home"
    (home / ".config").mkdir(parents=True)
    (home / ".config" / "xinitrc.d").write_text("not a directory")
    log = tmp_path / "install.log"

    rc = main(["--no-wallpapers", "--home", str(home), "--log-file", str(log)])

    assert rc == 1
    assert (home / ".config" / "xinitrc.d").read_text() == "not a directory"
    assert "Cannot create hooks directory" in log.read_text()


def test_unwritable_log_file_exits_nonzero(tmp_path):
    log_dir = tmp_path / "logs"
    log_dir.mkdir()

    assert main(["--dry-run", "--log-file", str(log_dir)]) == 1
