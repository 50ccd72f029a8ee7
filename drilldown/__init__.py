"""drilldown: browse hierarchical data one screen at a time."""

__version__ = "0.1.0"
