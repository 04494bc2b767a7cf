"""Module de logging."""

from cmder.logging.base import Logger
from cmder.logging.colors import Color, paint
from cmder.logging.console_logger import ConsoleLogger
from cmder.logging.file_logger import FileLogger
from cmder.logging.memory_logger import MemoryLogger, NullLogger

__all__ = [
    "Logger",
    "Color",
    "paint",
    "ConsoleLogger",
    "FileLogger",
    "MemoryLogger",
    "NullLogger",
]
