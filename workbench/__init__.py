"""Small data structures and algorithms: key-value store parts, a mark-and-sweep VM, a paged table and textbook algorithms."""

__version__ = "0.1.0"