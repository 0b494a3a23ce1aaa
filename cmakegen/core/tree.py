# SPDX-License-Identifier: MIT
"""Hierarchical source tree for a project.

The tree groups a project's files by directory. Generators that do not
care about directories (CMake's source list is flat) walk it leaf by
leaf; the directory structure only fixes a stable, sorted order.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from cmakegen.util.paths import to_posix


@dataclass
class TreeNode:
    """Base for directory and file nodes.

    Attributes:
        name: Last path component.
        path: Path relative to the tree root, forward slashes.
        parent: Containing directory (None for the root).
    """

    name: str
    path: str
    parent: DirNode | None = field(default=None, repr=False, compare=False)


@dataclass
class DirNode(TreeNode):
    """A directory in the source tree."""

    children: dict[str, TreeNode] = field(
        default_factory=dict, repr=False, compare=False
    )

    def sorted_children(self) -> list[TreeNode]:
        return [self.children[name] for name in sorted(self.children)]


@dataclass
class FileNode(TreeNode):
    """A source file leaf.

    Attributes:
        abspath: Absolute path of the file, forward slashes.
    """

    abspath: str = ""

    @property
    def basename(self) -> str:
        return posixpath.splitext(self.name)[0]

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.name)[1]

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.abspath)

    def is_c_file(self) -> bool:
        """True for sources compiled as C (not C++)."""
        return self.extension.lower() in C_EXTENSIONS


C_EXTENSIONS = frozenset([".c", ".m"])


class SourceTree:
    """Directory tree built from a flat list of absolute file paths.

    Example:
        tree = SourceTree.from_files(["/src/app/main.c", "/src/app/util/a.c"],
                                     root="/src/app")
        [leaf.path for leaf in tree.leaves()]  # ['main.c', 'util/a.c']
    """

    def __init__(self, root: str) -> None:
        self.root_dir = to_posix(root)
        self.root = DirNode(name="", path="")

    @classmethod
    def from_files(cls, files: Iterable[str], root: str) -> SourceTree:
        tree = cls(root)
        for path in files:
            tree.add_file(path)
        return tree

    def add_file(self, abspath: str) -> FileNode:
        """Insert a file, creating intermediate directories.

        Files outside the root keep their '..' components as directory
        names so they still sort deterministically.
        """
        abspath = posixpath.normpath(to_posix(abspath))
        relpath = posixpath.relpath(abspath, self.root_dir)
        parts = relpath.split("/")
        node = self.root
        for part in parts[:-1]:
            child = node.children.get(part)
            if not isinstance(child, DirNode):
                child = DirNode(
                    name=part,
                    path=posixpath.join(node.path, part) if node.path else part,
                    parent=node,
                )
                node.children[part] = child
            node = child
        existing = node.children.get(parts[-1])
        if isinstance(existing, FileNode):
            return existing
        leaf = FileNode(name=parts[-1], path=relpath, parent=node, abspath=abspath)
        node.children[parts[-1]] = leaf
        return leaf

    def traverse(
        self,
        on_leaf: Callable[[FileNode, int], None] | None = None,
        on_branch: Callable[[DirNode, int], None] | None = None,
    ) -> None:
        """Depth-first walk in sorted order, calling back for each node."""

        def walk(node: DirNode, depth: int) -> None:
            for child in node.sorted_children():
                if isinstance(child, DirNode):
                    if on_branch is not None:
                        on_branch(child, depth)
                    walk(child, depth + 1)
                elif on_leaf is not None:
                    assert isinstance(child, FileNode)
                    on_leaf(child, depth)

        walk(self.root, 0)

    def leaves(self) -> Iterator[FileNode]:
        """Yield file nodes in depth-first sorted order."""
        found: list[FileNode] = []
        self.traverse(on_leaf=lambda node, _depth: found.append(node))
        yield from found

    def __len__(self) -> int:
        return sum(1 for _ in self.leaves())
