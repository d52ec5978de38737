"""MindMesh assistant: retrieval-augmented answers over a user's notes, tasks, files and reminders."""

__version__ = "0.1.0"
