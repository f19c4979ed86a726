"""Restaurant attendance walkthrough: one composed three-panel figure from one small table."""

__version__ = "0.1.0"
