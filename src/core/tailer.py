import logging
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

class WeechatLogTailer:
    """
    Tails a WeeChat log file, reading new lines as they are written.
    Numbers lines from 1 and handles file rotation/truncation.
    """
    def __init__(self, filepath: str, encoding: str = 'utf-8'):
        self.filepath = Path(filepath)
        self.encoding = encoding
        self.file_handle = None
        self.last_position = 0
        self.line_number = 0
        self._open()

    def _open(self):
        """Open file and seek to last position."""
        if not self.filepath.exists():
            self.file_handle = None
            return

        try:
            self.file_handle = open(self.filepath, 'r', encoding=self.encoding, errors='replace')
            if self.last_position > 0:
                self.file_handle.seek(self.last_position)
        except OSError as e:
            logger.warning(f"Could not open {self.filepath}: {e}")
            self.file_handle = None

    def seek_to_end(self):
        """
        Move read pointer to end of file (skip existing content).
        Skipped lines still count towards line numbering.
        """
        if self.file_handle is None:
            self._open()
            if self.file_handle is None:
                return

        self.file_handle.seek(0)
        self.line_number = len(self.file_handle.readlines())
        self.last_position = self.file_handle.tell()

    def read_new_lines(self) -> List[Tuple[int, str]]:
        """Read new lines since last call as (line_number, text) pairs."""
        if not self.filepath.exists():
            return []

        if self.file_handle is None:
            self._open()
            if self.file_handle is None:
                return []

        # Check if file was truncated or rotated (size became smaller)
        try:
            current_size = self.filepath.stat().st_size
            if current_size < self.last_position:
                logger.info(f"{self.filepath.name} was truncated, reading from the start")
                self.file_handle.close()
                self.last_position = 0
                self.line_number = 0
                self._open()
                if self.file_handle is None:
                    return []
        except OSError:
            # File might have been locked or deleted momentarily
            return []

        try:
            self.file_handle.seek(self.last_position)
            lines = self.file_handle.readlines()
            self.last_position = self.file_handle.tell()
        except (UnicodeError, OSError) as e:
            logger.warning(f"Error reading {self.filepath.name}: {e}")
            return []

        numbered = []
        for line in lines:
            self.line_number += 1
            numbered.append((self.line_number, line.rstrip('\r\n')))
        return numbered

    def read_all_lines(self) -> List[Tuple[int, str]]:
        """Read the whole file from the top, restarting line numbering."""
        self.last_position = 0
        self.line_number = 0
        if self.file_handle is None:
            self._open()
            if self.file_handle is None:
                return []

        numbered = []
        self.file_handle.seek(0)
        for line in self.file_handle.readlines():
            self.line_number += 1
            numbered.append((self.line_number, line.rstrip('\r\n')))
        self.last_position = self.file_handle.tell()
        return numbered

    def close(self):
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None
