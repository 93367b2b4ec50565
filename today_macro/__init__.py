"""today-macro: a `today` macro plugin plus a small reference host to render it."""

__version__ = "1.0.0"
