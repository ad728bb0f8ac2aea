"""
simrun

Installs application bundles on iOS simulators, reinstalling only when the
installed copy is out of date.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
