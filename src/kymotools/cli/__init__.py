"""Command-line interface modules for kymotools.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from kymotools.cli.run_kymograph import run_kymograph_pipeline

__all__ = ['run_kymograph_pipeline']
