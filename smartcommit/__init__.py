"""AI-powered Git assistant library backed by a local Ollama server."""

__version__ = "0.1.0"