"""
Models package for indentdedent

Contains data structures and type definitions for the transform engine
and the CLI pipeline.
"""

from .state import ProgramState, pipeline
from .stream import IndentLevel, EscapeRule, LevelResolution, LevelChange

__all__ = [
    "ProgramState",
    "pipeline",
    "IndentLevel",
    "EscapeRule",
    "LevelResolution",
    "LevelChange",
]
