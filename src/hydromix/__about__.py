# src/hydromix/__about__.py

__version__ = "0.1.0"
