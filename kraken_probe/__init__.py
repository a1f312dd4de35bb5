"""Kraken REST API probe: signed requests and response validation"""

__version__ = "0.1.0"
