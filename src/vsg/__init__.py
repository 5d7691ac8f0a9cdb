"""Video script generator: AI-assisted scripts, scenes and voice-over for short-form video."""

__version__ = "0.1.0"
