"""Shared fixtures for pypstree tests."""

import pytest

from pypstree.models import AttributeRecord

STATUS_TEMPLATE = """\
Name:\t{name}
Umask:\t0022
State:\tS (sleeping)
Tgid:\t{tgid}
Ngid:\t0
Pid:\t{pid}
PPid:\t{ppid}
TracerPid:\t0
Uid:\t0\t0\t0\t0
Gid:\t0\t0\t0\t0
FDSize:\t64
VmRSS:\t    1024 kB
Threads:\t{threads}
SigQ:\t0/62811
voluntary_ctxt_switches:\t42
"""


def status_text(name, pid, tgid=None, ppid=0, threads=1):
    """Render a /proc/<pid>/status blob."""
    return STATUS_TEMPLATE.format(
        name=name,
        pid=pid,
        tgid=pid if tgid is None else tgid,
        ppid=ppid,
        threads=threads,
    )


def record(name, pid, ppid, tgid=None, threads=1):
    """Shorthand AttributeRecord factory."""
    return AttributeRecord(
        name=name,
        pid=pid,
        tgid=pid if tgid is None else tgid,
        ppid=ppid,
        thread_count=threads,
    )


@pytest.fixture
def fake_proc(tmp_path):
    """
    Factory for a fake procfs tree under tmp_path.

    Call it with (name, pid, ppid, threads, [thread ids]) tuples; returns the
    root path as a string.
    """

    def make(*processes):
        root = tmp_path / "proc"
        root.mkdir(exist_ok=True)
        # non-process entries that must be ignored
        (root / "self").mkdir(exist_ok=True)
        (root / "meminfo").write_text("MemTotal: 1 kB\n")
        for name, pid, ppid, threads, tids in processes:
            proc_dir = root / str(pid)
            proc_dir.mkdir()
            (proc_dir / "status").write_text(status_text(name, pid, ppid=ppid, threads=threads))
            task_dir = proc_dir / "task"
            task_dir.mkdir()
            for tid in [pid, *tids]:
                tid_dir = task_dir / str(tid)
                tid_dir.mkdir()
                # threads report their own comm, which the owner's name replaces
                comm = name if tid == pid else f"{name}:w{tid}"
                (tid_dir / "status").write_text(
                    status_text(comm, tid, tgid=pid, ppid=ppid, threads=threads)
                )
        return str(root)

    return make
