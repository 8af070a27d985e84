"""CSV export of snapshot windows."""

import csv
from pathlib import Path
from typing import Dict, List, Optional


class CSVWriter:
    """
    Exports snapshot windows to CSV format incrementally.

    Output format:
        step,x,y,weight
        1,99,99,0.0
        ...
    """

    FIELDNAMES = ['step', 'x', 'y', 'weight']

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self.rows_written = 0
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=self.FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, step: int, records: List[Dict]) -> None:
        """Write one snapshot message (25 x/y/weight records) for a tick."""
        if not self._is_open:
            self.open()
        for record in records:
            self.writer.writerow({'step': step, **record})
            self.rows_written += 1
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
