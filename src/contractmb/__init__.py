"""
contractmb - Contract to Mountebank stub converter

Generates Mountebank stub documents from consumer-driven HTTP contracts.
"""

__version__ = '1.0.0'
