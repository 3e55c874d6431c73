"""Essentials — a toolbox of small, reusable helpers.

    essentials.core            errors, Result, logging, settings, map helpers
    essentials.orchestration   Runner: build a flow of named steps, run it once
"""

from essentials.core.result import Err, Ok
from essentials.orchestration import RunFailure, Runner

__version__ = "0.4.2"

__all__ = ["Err", "Ok", "RunFailure", "Runner", "__version__"]
