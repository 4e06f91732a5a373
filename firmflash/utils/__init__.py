"""Utility helpers shared across firmflash."""

from .stream_process import OutputMiddleware, ProcessResult, run_command


__all__ = ["OutputMiddleware", "ProcessResult", "run_command"]
