"""TV Randomizer: pick the next episode to watch from your tracked shows."""

__version__ = "0.1.0"
