"""TGO Help Queue service: FIFO help queues for chat-based office hours."""

__version__ = "0.1.0"
