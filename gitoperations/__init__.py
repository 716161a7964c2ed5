"""gitoperations - typed results from the git command line.

Wraps the git executable, parses its textual output and exposes the
results through a mockable Controller interface.
"""

__version__ = "0.1.0"

from gitoperations.git import Controller, GitController, make_controller

__all__ = [
    "__version__",
    "Controller",
    "GitController",
    "make_controller",
]
