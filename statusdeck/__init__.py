"""Host-link protocol, status model, page rendering and device loop for a coding status display."""

__version__ = "0.5.0"