from class_maker.files.local import LocalFileManager
from class_maker.files.memory import InMemoryFileManager

__all__ = [
    "InMemoryFileManager",
    "LocalFileManager",
]
