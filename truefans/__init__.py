"""TrueFans digital loyalty pass API."""

__version__ = "1.0.0"
