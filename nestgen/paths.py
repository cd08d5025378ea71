# File: nestgen/paths.py
"""
nestgen - Package Paths & Import Resolution
===========================================
Every node has a *canonical path*: a virtual POSIX directory path derived
from its package ancestry, relative to the graph root (``.``).

Library packages live under ``./node_modules``.  The scoped ones listed in
``SCOPED_LIBRARY_PACKAGES`` become ``@scope/name`` segments, so an import of
a library symbol resolves to a package specifier (``@nestjs/common``,
``typeorm``) rather than a relative file path.

A class rendered in read-model shape is placed in a ``models`` directory
beside its owning package.
"""

from __future__ import annotations

import logging
import posixpath
from typing import FrozenSet, List, Optional

from nestgen.graph import LIBRARY_ROOT_NAME, ClassNode, Node, Package, Project
from nestgen.models import RenderMode
from nestgen.naming import is_module, resolve_file_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.paths")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ROOT_PATH: str = "."
LIBRARY_ROOT: str = f"{ROOT_PATH}/{LIBRARY_ROOT_NAME}"
MODELS_SEGMENT: str = "models"

SCOPED_LIBRARY_PACKAGES: FrozenSet[str] = frozenset({
    "nestjs/common",
    "nestjs/typeorm",
    "nestjsx/crud",
    "nestjsx/crud-typeorm",
})


def _package_path(package: Node, parent_path: str, child: Optional[Node], mode: RenderMode) -> str:
    if parent_path == LIBRARY_ROOT and package.name in SCOPED_LIBRARY_PACKAGES:
        return f"{parent_path}/@{package.name}"
    if mode is RenderMode.MODEL and isinstance(child, ClassNode):
        return f"{parent_path}/{MODELS_SEGMENT}"
    return f"{parent_path}/{package.name}"


def canonical_path(node: Optional[Node], mode: RenderMode = RenderMode.ENTITY) -> str:
    """
    Canonical virtual directory of *node*.

    *mode* is the rendering shape of the class on the path: in
    ``RenderMode.MODEL`` the package directly owning that class is replaced
    by the ``models`` segment.  Non-package nodes share their parent's path.

    Examples (``Shop`` root / ``src`` / ``orders`` / ``entities`` / ``Order``)::

        canonical_path(order)                   -> './src/orders/entities'
        canonical_path(order, RenderMode.MODEL) -> './src/orders/models'
    """
    segments: List[Node] = []
    current: Optional[Node] = node
    while current is not None and not isinstance(current, Project):
        segments.append(current)
        current = current.parent

    path: str = ROOT_PATH
    child: Optional[Node] = None
    for index in range(len(segments) - 1, -1, -1):
        element: Node = segments[index]
        child = segments[index - 1] if index > 0 else None
        if isinstance(element, Package):
            path = _package_path(element, path, child, mode)
    return path


def import_path(
    source: Node,
    target: Node,
    source_mode: RenderMode = RenderMode.ENTITY,
    target_mode: RenderMode = RenderMode.ENTITY,
) -> str:
    """
    Module specifier used in *source*'s file to import *target*.

    Library targets resolve to their path below ``node_modules``.  Project
    targets resolve to the relative path between the two canonical paths
    (``./`` prefixed unless it ascends), then ``/`` and the target's file
    name.  Two nodes in the same directory give ``./<file name>``.
    """
    from_path: str = canonical_path(source, source_mode)
    to_path: str = canonical_path(target, target_mode)

    if to_path.startswith(LIBRARY_ROOT):
        return posixpath.relpath(to_path, LIBRARY_ROOT) if to_path != LIBRARY_ROOT else ""

    relative: str = posixpath.relpath(to_path, from_path)
    if relative == ".":
        relative = ""
    if relative and not relative.startswith(".."):
        relative = "./" + relative
    if not relative:
        relative = "."
    return f"{relative}/{resolve_file_name(target, target_mode)}"


def enclosing_module_name(node: Optional[Node]) -> str:
    """Name of the nearest ancestor-or-self package with the Module role."""
    current: Optional[Node] = node
    while current is not None and not isinstance(current, Project):
        if is_module(current):
            return current.name
        current = current.parent
    return ""


__all__: List[str] = [
    "ROOT_PATH",
    "LIBRARY_ROOT",
    "MODELS_SEGMENT",
    "SCOPED_LIBRARY_PACKAGES",
    "canonical_path",
    "import_path",
    "enclosing_module_name",
]
