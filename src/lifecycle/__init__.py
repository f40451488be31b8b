"""
Worker lifecycle and connected application instances.
"""

from src.lifecycle.clients import AppClient, ClientRegistry
from src.lifecycle.controller import LifecycleController, WorkerState

__all__ = [
    "AppClient",
    "ClientRegistry",
    "LifecycleController",
    "WorkerState",
]
