"""
Live Match module for real-time score views.

Consumes an external change subscription (snapshot pushes) and re-runs
match view derivation on every change.
"""
from .provider import (
    ChangeSubscription,
    LiveScoreFeed,
    ScoreListener,
    Unsubscribe,
)

__all__ = [
    "ChangeSubscription",
    "LiveScoreFeed",
    "ScoreListener",
    "Unsubscribe",
]
