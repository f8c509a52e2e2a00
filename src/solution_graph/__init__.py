"""Solution graph service: classify Sentinel solution artifacts and link them into a graph."""

__version__ = "0.1.0"
