# File: nestgen/errors.py
"""
nestgen - Exceptions
====================
Failures the engine raises itself.  File-system errors are not wrapped:
``OSError`` from directory or file creation propagates unchanged.
"""

from __future__ import annotations

from typing import List


class NestgenError(Exception):
    """Base class for every error raised by nestgen."""


class ModelReferenceError(NestgenError, ValueError):
    """A document reference is unknown or points at the wrong kind of node."""


class PreconditionViolation(NestgenError):
    """
    An emitter's structural assumption does not hold.

    Fatal: the run stops and files already written stay on disk.
    """

    def __init__(self, element: str, message: str) -> None:
        self.element: str = element
        super().__init__(f"{element}: {message}")


__all__: List[str] = [
    "NestgenError",
    "ModelReferenceError",
    "PreconditionViolation",
]
