"""Data models for pypstree."""

from __future__ import annotations

import argparse
from collections.abc import Iterator
from dataclasses import dataclass, field

KERNEL_PID = 0
KERNEL_LABEL = "kernel"


@dataclass(slots=True, frozen=True)
class AttributeRecord:
    """Normalized attributes of one process or thread."""

    name: str
    pid: int
    tgid: int
    ppid: int
    thread_count: int = -1  # -1 when the source did not report it

    @property
    def is_thread(self) -> bool:
        """Whether this record belongs to a non-leader thread."""
        return self.tgid != self.pid

    @property
    def is_complete(self) -> bool:
        """
        Whether the record can be turned into a tree node.

        init and kernel threads report a parent pid of 0, so ``ppid`` only
        has to be non-negative.
        """
        return bool(self.name) and self.pid > 0 and self.tgid > 0 and self.ppid >= 0


@dataclass(slots=True, eq=False)
class Node:
    """A process or thread in the built tree."""

    label: str
    pid: int
    tgid: int
    ppid: int
    has_threads: bool = False
    children: list[Node] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: AttributeRecord) -> Node:
        """Create a childless node from an attribute record."""
        return cls(
            label=record.name,
            pid=record.pid,
            tgid=record.tgid,
            ppid=record.ppid,
            has_threads=record.thread_count > 1,
        )

    @classmethod
    def kernel(cls) -> Node:
        """Create the synthetic node standing for the kernel/idle context."""
        return cls(
            label=KERNEL_LABEL,
            pid=KERNEL_PID,
            tgid=KERNEL_PID,
            ppid=KERNEL_PID,
        )

    @property
    def is_thread(self) -> bool:
        return self.tgid != self.pid

    @property
    def is_root(self) -> bool:
        return self.pid == 1

    @property
    def is_kernel(self) -> bool:
        return self.pid == KERNEL_PID

    @property
    def parent_key(self) -> int:
        """Pid of the node this one hangs under: the group leader for threads."""
        return self.tgid if self.is_thread else self.ppid

    def display_label(self, show_pids: bool = False) -> str:
        """Format the node as it appears in the rendered tree."""
        text = f"{{{self.label}}}" if self.is_thread else self.label
        if show_pids:
            text = f"{text}({self.pid})"
        return text

    def walk(self) -> Iterator[Node]:
        """Yield this node and all of its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(slots=True, frozen=True)
class PstreeConfig:
    """Options controlling one pypstree run."""

    show_pids: bool = False
    numeric_sort: bool = False
    show_version: bool = False
    strict: bool = False
    source: str = "procfs"
    proc_root: str = "/proc"
    verbose: bool = False

    @property
    def wants_tree(self) -> bool:
        """A tree is only built when pids or numeric sorting were requested."""
        return self.show_pids or self.numeric_sort

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> PstreeConfig:
        """Build a configuration from parsed command-line arguments."""
        return cls(
            show_pids=args.show_pids,
            numeric_sort=args.numeric_sort,
            show_version=args.version,
            strict=args.strict,
            source=args.source,
            proc_root=args.proc_root,
            verbose=args.verbose,
        )
