"""harvest-automation — manage harvest tasks on a transaction automation network."""

__version__ = "0.1.0"
