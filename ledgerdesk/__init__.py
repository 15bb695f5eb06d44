"""Outstanding-bill, aging, follow-up and collection reporting over synced accounting data."""

__version__ = "0.1.0"