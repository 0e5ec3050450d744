"""One-time bootstrapping of a MongoDB replica set and its user accounts."""

__version__ = '1.0.0'
