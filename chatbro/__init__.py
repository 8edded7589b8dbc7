"""ChatBRO: one endpoint, four AI providers, keys held in memory."""

__version__ = "1.0.0"
