"""
pacont - concatenate files and directory trees into one annotated stream.

This package walks the given files and directories, renders each text file
as a labeled block, and writes the result (or a character/word/line
summary) to standard output or the system clipboard.
"""

__version__ = "0.1.0"
__author__ = "pacont contributors"
