"""Directory tree subsystem — arena, directory nodes, and file nodes.

Re-exports public symbols so callers can write::

    from py_dirsize.fs import DirectoryTree, DirectoryNode
"""

from py_dirsize.fs.tree import (
    ROOT_NAME,
    DirectoryNode,
    DirectoryTree,
    FileNode,
    TreeSealedError,
)

__all__ = [
    "ROOT_NAME",
    "DirectoryNode",
    "DirectoryTree",
    "FileNode",
    "TreeSealedError",
]
