"""Exceptions raised while reading records and building the tree."""

from __future__ import annotations


class PstreeError(Exception):
    """Base exception class. All other pypstree exceptions inherit
    from this one.
    """

    kind = "error"

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


class SourceUnreadable(PstreeError):
    """Raised when a metadata location could not be opened or read."""

    kind = "source-unreadable"

    def __init__(self, location: str, reason: str | None = None) -> None:
        msg = f"couldn't open {location}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.location = location
        self.reason = reason


class SourceVanished(SourceUnreadable):
    """Raised when a location disappeared, i.e. the process exited."""


class MalformedRecord(PstreeError):
    """Raised when a record has missing or non-numeric required fields."""

    kind = "malformed-record"

    def __init__(self, location: str | None, reason: str) -> None:
        where = location if location is not None else "<record>"
        super().__init__(f"malformed record {where}: {reason}")
        self.location = location
        self.reason = reason


class UnresolvedParent(PstreeError):
    """Raised in strict mode when a node's parent is not among the nodes."""

    kind = "unresolved-parent"

    def __init__(self, pid: int, parent_pid: int, name: str | None = None) -> None:
        if name:
            details = f"(pid={pid}, name={name!r}, parent={parent_pid})"
        else:
            details = f"(pid={pid}, parent={parent_pid})"
        super().__init__("unable to find parent node " + details)
        self.pid = pid
        self.parent_pid = parent_pid
        self.name = name


class EmptyInput(PstreeError):
    """Raised when the builder is given no records at all."""

    kind = "empty-input"

    def __init__(self) -> None:
        super().__init__("empty tree node list")
