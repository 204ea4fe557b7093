"""stormharm — health and economic impact of U.S. storm events, 1950–2011."""

__version__ = "0.1.0"
