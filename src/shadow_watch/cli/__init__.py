from .files import FilesCommands
from .issues import FormatCommands
from .plan import PlanCommands
from .tree import TreeCommands

__all__ = [
    "FilesCommands",
    "FormatCommands",
    "PlanCommands",
    "TreeCommands",
]
