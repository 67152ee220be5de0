"""rapi-bot: a Discord companion bot for the NIKKE community."""

__version__ = "1.0.0"
