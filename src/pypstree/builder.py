"""Construction of the process/thread tree from attribute records."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable

from pypstree.errors import EmptyInput, MalformedRecord, UnresolvedParent
from pypstree.models import AttributeRecord, Node
from pypstree.source import ProcessSource

logger = logging.getLogger(__name__)

ThreadLister = Callable[[AttributeRecord], Iterable[AttributeRecord]]


class TreeBuilder:
    """
    Builds a single rooted tree out of a flat sequence of records.

    Threads hang under their thread-group leader, processes under their
    parent process. A synthetic kernel node (pid 0) is always added and is
    the root of the returned tree.
    """

    def __init__(self, threads: ThreadLister | None = None, strict: bool = False) -> None:
        """
        Initialize the TreeBuilder.

        Args:
            threads: Called with each multi-threaded process record; returns
                the records of its threads, main thread excluded.
            strict: Raise UnresolvedParent when a parent is missing instead of
                attaching the node under the kernel node.
        """
        self._threads = threads
        self._strict = strict

    def build(self, records: Iterable[AttributeRecord]) -> Node:
        """
        Build the tree and return its synthetic kernel root.

        Raises:
            EmptyInput: No records were given.
            MalformedRecord: A record is missing required attributes.
            UnresolvedParent: In strict mode, a parent pid is unknown.
        """
        nodes = self._create_nodes(records)
        if not nodes:
            raise EmptyInput()

        kernel = Node.kernel()
        nodes.append(kernel)
        index = {node.pid: node for node in nodes}

        for node in nodes:
            if node is kernel:
                continue
            parent = index.get(node.parent_key)
            if parent is None or parent is node:
                if self._strict:
                    raise UnresolvedParent(node.pid, node.parent_key, node.label)
                logger.warning(
                    "Unable to find parent node %d for %s(%d), attaching it to %s",
                    node.parent_key,
                    node.label,
                    node.pid,
                    kernel.label,
                )
                parent = kernel
            parent.children.append(node)

        self._attach_unreached(kernel, nodes, index)
        logger.debug("Built tree of %d nodes", len(nodes))
        return kernel

    def _attach_unreached(self, kernel: Node, nodes: list[Node], index: dict[int, Node]) -> None:
        """
        Hang nodes caught in a parent cycle under the kernel node.

        Such nodes all found a parent but none of them leads back to the
        kernel node. Each one left unreached is cut from its parent, which
        breaks the cycle, and reattached together with its subtree.
        """
        reached = {id(n) for n in kernel.walk()}
        if len(reached) == len(nodes):
            return
        for node in nodes:
            if id(node) in reached:
                continue
            if self._strict:
                raise UnresolvedParent(node.pid, node.parent_key, node.label)
            logger.warning(
                "Parent chain of %s(%d) loops without reaching %s, attaching it there",
                node.label,
                node.pid,
                kernel.label,
            )
            index[node.parent_key].children.remove(node)
            kernel.children.append(node)
            reached.update(id(n) for n in node.walk())

    def _create_nodes(self, records: Iterable[AttributeRecord]) -> list[Node]:
        """Create nodes in input order, each process followed by its threads."""
        nodes: list[Node] = []
        for record in records:
            nodes.append(_node_for(record))
            if record.thread_count > 1 and not record.is_thread and self._threads is not None:
                for thread in self._threads(record):
                    thread = dataclasses.replace(thread, name=record.name)
                    nodes.append(_node_for(thread))
        return nodes


def _node_for(record: AttributeRecord) -> Node:
    if not record.is_complete:
        raise MalformedRecord(None, f"invalid attributes {record}")
    return Node.from_record(record)


def build(
    records: Iterable[AttributeRecord],
    threads: ThreadLister | None = None,
    strict: bool = False,
) -> Node:
    """Build a tree from records. See TreeBuilder.build."""
    return TreeBuilder(threads=threads, strict=strict).build(records)


def build_from_source(source: ProcessSource, strict: bool = False) -> Node:
    """Build a tree from everything a process source enumerates."""
    return TreeBuilder(threads=source.threads, strict=strict).build(source.processes())


def find_root(tree: Node) -> Node:
    """Return the real init node (pid 1), or the tree itself if absent."""
    for node in tree.walk():
        if node.is_root:
            return node
    return tree


def sort_by_pid(root: Node) -> None:
    """Order every children list by ascending pid."""
    for node in root.walk():
        node.children.sort(key=lambda n: n.pid)
