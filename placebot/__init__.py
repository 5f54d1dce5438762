"""Keep pixel-art patterns painted on a shared, rate-limited canvas."""

__version__ = "0.1.0"
