"""Editor-side client for the smack impact daemon."""

__version__ = "0.1.0"
