"""
Polling system for the FX rate alert service.

This package contains the poll loop that schedules rate checks until an
alert has been sent or shutdown is requested.
"""

from .loop import LoopState, PollLoop

__all__ = ["LoopState", "PollLoop"]
