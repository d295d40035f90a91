"""Tests for the pypstree command line."""

import logging

import pytest

from pypstree.cli import __version__, main, parse_args, run
from pypstree.models import PstreeConfig


def test_parse_args_defaults():
    """Test default flags."""
    args = parse_args([])
    assert not args.show_pids
    assert not args.numeric_sort
    assert not args.version
    assert not args.strict
    assert args.source == "procfs"
    assert args.proc_root == "/proc"


def test_parse_args_flags():
    """Test short flags can be combined freely."""
    args = parse_args(["-p", "-n", "-V", "--source", "psutil"])
    assert args.show_pids
    assert args.numeric_sort
    assert args.version
    assert args.source == "psutil"


def test_parse_args_rejects_unknown_source():
    """Test an unknown source name is an argparse error."""
    with pytest.raises(SystemExit):
        parse_args(["--source", "wmi"])


def test_version(capsys):
    """Test -V prints the version and no tree."""
    assert main(["-V"]) == 0
    out = capsys.readouterr().out
    assert out == f"pypstree v{__version__}\n"


def test_no_tree_without_flags(fake_proc, capsys):
    """Test neither -p nor -n means nothing is built or printed."""
    root = fake_proc(("init", 1, 0, 1, []))
    assert main(["--proc-root", root]) == 0
    assert capsys.readouterr().out == ""


def test_show_pids(fake_proc, capsys):
    """Test the tree is printed after two blank lines."""
    root = fake_proc(("init", 1, 0, 1, []), ("sshd", 100, 1, 1, []))
    assert main(["-p", "--proc-root", root]) == 0

    out = capsys.readouterr().out
    assert out == "\n\nkernel(0)-----init(1)-----sshd(100)\n"


def test_numeric_sort_without_pids(fake_proc, capsys):
    """Test -n alone renders the tree without pids."""
    root = fake_proc(
        ("init", 1, 0, 1, []),
        ("cron", 20, 1, 1, []),
        ("sshd", 100, 1, 1, []),
    )
    assert main(["-n", "--proc-root", root]) == 0

    lines = capsys.readouterr().out.split("\n")
    assert lines[2] == "kernel-----init--+--cron"
    assert lines[3] == " " * 17 + "|--sshd"


def test_build_error_exits_nonzero(tmp_path, capsys, caplog):
    """Test an empty procfs is logged and reported through the exit status."""
    root = tmp_path / "proc"
    root.mkdir()
    with caplog.at_level(logging.ERROR, logger="pypstree"):
        assert main(["-p", "--proc-root", str(root)]) == 1

    assert capsys.readouterr().out == ""
    assert "empty-input" in caplog.text


def test_strict_missing_parent(fake_proc, capsys, caplog):
    """Test --strict turns an orphan into a failed run."""
    root = fake_proc(("init", 1, 0, 1, []), ("orphan", 500, 400, 1, []))
    with caplog.at_level(logging.ERROR, logger="pypstree"):
        assert main(["-p", "--strict", "--proc-root", root]) == 1

    assert capsys.readouterr().out == ""
    assert "unresolved-parent" in caplog.text


def test_lenient_missing_parent(fake_proc, capsys):
    """Test orphans are shown under the kernel node by default."""
    root = fake_proc(("init", 1, 0, 1, []), ("orphan", 500, 400, 1, []))
    assert main(["-p", "--proc-root", root]) == 0

    out = capsys.readouterr().out
    assert "kernel(0)--+--init(1)" in out
    assert "|--orphan(500)" in out


def test_run_with_psutil_source(capsys):
    """Test a full run against the live system through psutil."""
    assert run(PstreeConfig(show_pids=True, source="psutil")) == 0
    out = capsys.readouterr().out
    assert out.startswith("\n\nkernel(0)")
