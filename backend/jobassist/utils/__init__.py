"""
Utility functions and helpers
"""
from .async_runner import run_async
from .deadline import Deadline

__all__ = ['run_async', 'Deadline']
