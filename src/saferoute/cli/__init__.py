"""CLI package for SafeRoute.

Execute via:
  python -m saferoute.cli <command> [options]

Or, after installation, simply:
  saferoute <command>

Commands implemented in `main.py` using the standard library `argparse`.
"""

from .main import main  # re-export for python -m saferoute.cli

__all__ = ["main"]
