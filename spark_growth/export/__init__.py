"""I/O package for the spark growth simulation."""

from .csv_writer import CSVWriter
from .canvas import Canvas
from .reporter import Reporter

__all__ = ['CSVWriter', 'Canvas', 'Reporter']
