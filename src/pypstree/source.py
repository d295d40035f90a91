"""Process enumeration backends feeding the tree builder."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Protocol

import psutil

from pypstree.errors import SourceUnreadable, SourceVanished
from pypstree.models import KERNEL_PID, AttributeRecord
from pypstree.parser import read_status

logger = logging.getLogger(__name__)


class ProcessSource(Protocol):
    """What the builder needs from a process enumeration backend."""

    def processes(self) -> Iterator[AttributeRecord]:
        """Yield one record per process, in ascending pid order."""
        ...

    def threads(self, owner: AttributeRecord) -> Iterator[AttributeRecord]:
        """Yield the threads of ``owner``, excluding its main thread."""
        ...


def _numeric_entries(directory: str) -> list[int]:
    """All-digit entry names of a directory, sorted numerically."""
    return sorted(int(name) for name in os.listdir(directory) if name.isdigit())


class ProcfsSource:
    """
    Reads process and thread records from a procfs mount.

    Processes come from ``<root>/<pid>/status`` and threads from
    ``<root>/<pid>/task/<tid>/status``. Tasks exiting mid-scan are skipped.
    """

    def __init__(self, proc_root: str = "/proc") -> None:
        """
        Initialize the ProcfsSource.

        Args:
            proc_root: Mount point of procfs. Tests point this at a fake tree.
        """
        self._root = proc_root

    @property
    def proc_root(self) -> str:
        return self._root

    def process_locations(self) -> list[str]:
        """Status file paths of every process, ascending by pid."""
        try:
            pids = _numeric_entries(self._root)
        except OSError as e:
            raise SourceUnreadable(self._root, e.strerror) from e
        return [os.path.join(self._root, str(pid), "status") for pid in pids]

    def thread_locations(self, pid: int) -> list[str]:
        """Status file paths of the threads of ``pid``, main thread excluded."""
        task_dir = os.path.join(self._root, str(pid), "task")
        try:
            tids = _numeric_entries(task_dir)
        except FileNotFoundError:
            logger.debug("Process %d exited before its threads were listed", pid)
            return []
        return [
            os.path.join(task_dir, str(tid), "status")
            for tid in tids
            if tid != pid
        ]

    def processes(self) -> Iterator[AttributeRecord]:
        for location in self.process_locations():
            try:
                yield read_status(location)
            except SourceVanished:
                logger.debug("Skipping %s, process exited", location)

    def threads(self, owner: AttributeRecord) -> Iterator[AttributeRecord]:
        for location in self.thread_locations(owner.pid):
            try:
                yield read_status(location, name=owner.name)
            except SourceVanished:
                logger.debug("Skipping %s, thread exited", location)


class PsutilSource:
    """
    Builds records through psutil.

    Processes that exit mid-scan, deny access or are zombies are skipped.
    """

    ATTRS = ["pid", "name", "ppid", "num_threads"]

    def processes(self) -> Iterator[AttributeRecord]:
        records: list[AttributeRecord] = []
        for proc in psutil.process_iter(attrs=self.ATTRS):
            try:
                with proc.oneshot():
                    info = proc.info
                    pid = info.get("pid", KERNEL_PID)
                    if pid == KERNEL_PID:
                        # the synthetic kernel node stands for pid 0
                        continue
                    records.append(
                        AttributeRecord(
                            name=info.get("name") or "?",
                            pid=pid,
                            tgid=pid,
                            ppid=info.get("ppid") or 0,
                            thread_count=info.get("num_threads") or -1,
                        )
                    )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        records.sort(key=lambda r: r.pid)
        yield from records

    def threads(self, owner: AttributeRecord) -> Iterator[AttributeRecord]:
        try:
            thread_ids = sorted(t.id for t in psutil.Process(owner.pid).threads())
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            logger.debug("Cannot list threads of %s(%d)", owner.name, owner.pid)
            return
        for tid in thread_ids:
            if tid == owner.pid:
                continue
            yield AttributeRecord(
                name=owner.name,
                pid=tid,
                tgid=owner.pid,
                ppid=owner.ppid,
                thread_count=owner.thread_count,
            )


SOURCES = ("procfs", "psutil")


def make_source(name: str, proc_root: str = "/proc") -> ProcessSource:
    """Instantiate the source called ``name``."""
    if name == "procfs":
        return ProcfsSource(proc_root)
    if name == "psutil":
        return PsutilSource()
    raise ValueError(f"unknown process source: {name!r}")
