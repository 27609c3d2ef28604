"""dualseed - seed MongoDB and PostgreSQL with the same synthetic sales data."""

__version__ = "0.1.0"
