"""
PhotoSort - copy photos into a year/month/day tree

PhotoSort reads the original capture date embedded in JPEG, PNG and TIFF
files and copies each file to <target>/<year>/<MonthName>/<day>/, falling
back to the file modification time when no usable date is embedded.
"""

from .core import main

__all__ = ["main"]
