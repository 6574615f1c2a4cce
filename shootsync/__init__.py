"""shootsync: keeps a shooting schedule consistent with a changing screenplay."""

__version__ = "0.1.0"
