# src/planit/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .credentials import FileTokenStore
from .ports import RecordSource


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: object

    source: RecordSource
    token_store: FileTokenStore
