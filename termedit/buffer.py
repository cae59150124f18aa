"""Line buffer holding the document being edited."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import List, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

NEWLINE = '\n'


class TextBuffer:
    """Ordered list of lines plus the path they were loaded from.

    The buffer always holds at least one line. Any mutation sets
    ``modified``; a successful save clears it.
    """

    def __init__(self, lines: Optional[List[str]] = None, path: Optional[str] = None):
        self._lines: List[str] = list(lines) if lines else [""]
        self.path = path
        self.modified = False

    @classmethod
    def load(cls, path: str) -> "TextBuffer":
        """Load a file, one line per newline-delimited record.

        A missing or empty file yields a single empty line. Other I/O
        errors propagate.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.info(f"{path} does not exist, starting with an empty buffer")
            return cls([""], path)

        if content.endswith(NEWLINE):
            content = content[:-1]
        lines = content.split(NEWLINE) if content else [""]
        logger.info(f"Loaded {len(lines)} lines from {path}")
        return cls(lines, path)

    def save(self, path: Optional[str] = None) -> None:
        """Write the buffer to disk atomically.

        Every line except the last is newline-terminated. On failure the
        exception propagates and the buffer is left untouched.

        Args:
            path: Target path. Defaults to the path the buffer was loaded from.
        """
        target = path or self.path
        if not target:
            raise ValueError("No path to save to")

        content = NEWLINE.join(self._lines)
        dir_name = os.path.dirname(target) or '.'
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                             dir=dir_name,
                                             prefix=EditorConstants.ATOMIC_SAVE_PREFIX,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())

            # Atomic on POSIX; overwrites the target on Windows too
            os.replace(temp_filename, target)
        except OSError:
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    logger.warning(f"Could not remove temporary file {temp_filename}")
            raise

        self.path = target
        self.modified = False
        logger.info(f"Saved {len(self._lines)} lines to {target}")

    # Mutations

    def insert_char(self, row: int, col: int, ch: str) -> None:
        """Insert ch at (row, col); a newline splits the line in two."""
        line = self._line_at(row)
        if not 0 <= col <= len(line):
            raise IndexError(f"column {col} out of range for row {row}")

        if ch == NEWLINE:
            self._lines[row] = line[:col]
            self._lines.insert(row + 1, line[col:])
        else:
            self._lines[row] = line[:col] + ch + line[col:]
        self.modified = True

    def delete_char(self, row: int, col: int) -> None:
        """Remove the character at (row, col)."""
        line = self._line_at(row)
        if not 0 <= col < len(line):
            raise IndexError(f"column {col} out of range for row {row}")

        self._lines[row] = line[:col] + line[col + 1:]
        self.modified = True

    def join_with_previous(self, row: int) -> None:
        """Append line row to line row-1 and remove line row."""
        if row < 1:
            raise IndexError("cannot join the first row with a previous row")
        line = self._line_at(row)

        self._lines[row - 1] += line
        del self._lines[row]
        self.modified = True

    # Accessors

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def row_count(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def line(self, row: int) -> Optional[str]:
        """Return the line at row, or None past the end of the buffer."""
        if 0 <= row < len(self._lines):
            return self._lines[row]
        return None

    def line_length(self, row: int) -> int:
        return len(self._line_at(row))

    def _line_at(self, row: int) -> str:
        if not 0 <= row < len(self._lines):
            raise IndexError(f"row {row} out of range")
        return self._lines[row]
