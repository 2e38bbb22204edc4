"""bracefence — keep literal braces away from doc link resolvers."""

__version__ = "0.1.0"
