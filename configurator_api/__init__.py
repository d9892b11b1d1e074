"""
Product configurator service.

Turns a set of selected configuration options into a consolidated, priced
Bill of Materials using the option -> module -> part catalog.
"""

__version__ = "0.1.0"
