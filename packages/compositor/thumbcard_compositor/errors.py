"""Compositor error taxonomy."""

from __future__ import annotations


class CompositorError(Exception):
    stage = "compose"

    def __init__(self, message: str, width: int | None = None, height: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.width = width
        self.height = height

    def __str__(self) -> str:
        size = f"{self.width}x{self.height}" if self.width is not None else "unknown size"
        return f"[{self.stage}] {self.message} ({size})"


class DecodeError(CompositorError):
    stage = "decode"


class RenderSurfaceError(CompositorError):
    stage = "surface"


class EncodeError(CompositorError):
    stage = "encode"
