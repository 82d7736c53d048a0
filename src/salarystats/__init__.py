"""
Salarystats: Salary Dataset Cleaning and Reporting Pipeline.

This package loads a raw salary survey table, cleans and normalizes it,
and produces grouped descriptive salary statistics for BI tools.
"""

from importlib.metadata import version

__version__ = version("salarystats")

__all__ = ["__version__"]
