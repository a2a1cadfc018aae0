"""uvm - install and run a pinned uv binary for a project."""

__version__ = "0.1.0"
