"""FactoryNear: locate the user and filter nearby factories."""

__version__ = "0.1.0"
