"""netrestrict - Scheduled network restriction evaluation for managed devices."""

__version__ = "0.1.0"
