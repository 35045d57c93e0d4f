# output_manager.py

import os

from lotocomb.fmt import strip_ansi
from lotocomb.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str) -> str:
    """
    Resolve user-provided output path.

    Rules:
    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")

    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(workspace_root, path))


class OutputManager:
    """
    Handles all printing/output, to screen and/or a log file.

    Usage:
        om = OutputManager(output_file="logs/run.log")
        om.write("Hello")   # prints and appends (ANSI stripped) to the file
        om.close()
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False):
        """
        Parameters:
            output_file:
                None or ""       => screen only
                path/to/file.txt => append all runs to this file
            quiet: if True, no output to screen (only to file)
        """
        self.quiet = quiet
        self.output_file = output_file or ""
        self._wrote = False
        self._path: str | None = None

        if self.output_file:
            path = resolve_output_path(self.output_file, str(workspace_dir()))
            if os.path.isdir(path) or self.output_file.endswith(("/", "\\")):
                raise ValueError(f"Output must be a file, not a directory: {self.output_file}")
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._path = path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured). Nothing is kept in memory."""
        text = sep.join(str(a) for a in args) + end
        self._wrote = True

        if not self.quiet:
            print(text, end="")

        if self._path:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write(strip_ansi(text))

    def close(self) -> None:
        """Add a separator line between runs in the log file."""
        if self._path and self._wrote:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write("\n")
        self._wrote = False
