"""Recursive folder scan and depth-first projection into a viewing sequence."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from constants import IMAGE_EXTENSIONS
from errors import ScanError

logger = logging.getLogger(__name__)


@dataclass
class DirectoryNode:
    name: str
    images: List[str] = field(default_factory=list)  # filenames, scan order
    children: List["DirectoryNode"] = field(default_factory=list)

    def count_images(self) -> int:
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += len(node.images)
            stack.extend(node.children)
        return total


def is_image_file(name: str) -> bool:
    """True when the filename carries a jpg/jpeg extension (any case)."""
    return os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS


def _fill_node(node: DirectoryNode, path: str, visited: Set[Tuple[int, int]]):
    """Populate node from the listing at path. Listing errors propagate."""
    with os.scandir(path) as entries:
        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_image = not is_dir and is_image_file(entry.name) and entry.is_file()
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                continue

            if is_dir:
                try:
                    st = os.stat(entry.path)
                except OSError as e:
                    logger.debug("Skipping %s: %s", entry.path, e)
                    continue
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    logger.debug("Skipping %s: directory already scanned", entry.path)
                    continue
                visited.add(key)

                child = DirectoryNode(name=entry.name)
                try:
                    _fill_node(child, entry.path, visited)
                except OSError as e:
                    # Unreadable subdirectory contributes an empty node
                    logger.debug("Cannot list %s: %s", entry.path, e)
                node.children.append(child)
            elif is_image:
                node.images.append(entry.name)


def scan_tree(root_path: str) -> DirectoryNode:
    """
    Walk root_path recursively and build the directory tree.
    Raises ScanError when the root itself cannot be listed; failures below
    the root only drop the affected entry. Symlinked directories are
    followed, but each directory is scanned at most once.
    """
    root = DirectoryNode(name=os.path.basename(os.path.normpath(root_path)))
    try:
        st = os.stat(root_path)
        _fill_node(root, root_path, {(st.st_dev, st.st_ino)})
    except OSError as e:
        raise ScanError(root_path, e.strerror or str(e)) from e

    logger.info("Scanned %s: %d images", root_path, root.count_images())
    return root


def project(node: DirectoryNode, base_path: str) -> List[str]:
    """
    Flatten the tree: a directory's own images first, then each
    subdirectory in scan order, depth-first.
    """
    paths: List[str] = []
    stack = [(node, base_path)]
    while stack:
        current, current_path = stack.pop()
        for image in current.images:
            paths.append(os.path.join(current_path, image))
        for child in reversed(current.children):
            stack.append((child, os.path.join(current_path, child.name)))
    return paths


def build_sequence(root_path: str) -> Tuple[DirectoryNode, List[str]]:
    root_path = os.path.abspath(root_path)
    tree = scan_tree(root_path)
    return tree, project(tree, root_path)
