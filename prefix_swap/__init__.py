"""Rename the namespace prefix of template placeholders in Word XML documents."""

__version__ = "0.1.0"
