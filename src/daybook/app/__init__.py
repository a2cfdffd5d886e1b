"""Application layer: the diary session and the commands that change it."""

from .commands import Command, MergeImport, RenameTitles, SetMood, UpdateField
from .controller import DiarySession

__all__ = [
    "Command",
    "DiarySession",
    "MergeImport",
    "RenameTitles",
    "SetMood",
    "UpdateField",
]
