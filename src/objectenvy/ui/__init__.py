"""UI package exports for the CLI and env-file I/O."""

from objectenvy.ui.cli import CLIError, build_parser, main, run_cli
from objectenvy.ui.envfile import (
    format_env_content,
    load_document,
    read_env_file,
    write_env_file,
)

__all__ = [
    "CLIError",
    "build_parser",
    "format_env_content",
    "load_document",
    "main",
    "read_env_file",
    "run_cli",
    "write_env_file",
]
