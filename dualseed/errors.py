"""Exceptions raised by dualseed."""


class SeedError(Exception):
    """Base class for errors raised by the seeding pipeline."""


class ConfigurationError(SeedError):
    """Store settings could not be read from the environment."""


class GenerationError(SeedError):
    """An entity factory could not produce a valid record."""


class DataQualityError(SeedError):
    """Generated data failed one or more ERROR-severity quality checks."""
