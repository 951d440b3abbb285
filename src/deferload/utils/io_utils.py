"""
Centralized file I/O utilities.

- Single place for encoding handling
- Use Path.read_text() / write_text() consistently
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    return Path(path).read_text(encoding=DEFAULT_FILE_ENCODING)


def write_output_file(path: Union[Path, str], text: str) -> Path:
    """Write an emitted module, creating parent directories as needed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding=DEFAULT_FILE_ENCODING)
    return p


def module_key(path: Union[Path, str], root: Union[Path, str]) -> str:
    """Module key of a file: its POSIX path relative to the compilation root."""
    return Path(path).resolve().relative_to(Path(root).resolve()).as_posix()
