"""SRM Pro: Solid Rocket Motor sizing and analysis.

Preliminary design calculations for amateur solid rocket motors and the
rockets that carry them.
"""

__app_name__ = "SRM Pro"
__version__ = "0.3.0"
