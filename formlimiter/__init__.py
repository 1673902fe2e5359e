"""formlimiter - open and close a form on a weekly window, with a response limit."""

__version__ = "0.1.0"
