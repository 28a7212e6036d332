# Export all modules
from .log import *

__all__ = [
    "log",
]
