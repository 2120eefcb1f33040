"""Local profile assistant building blocks for eUICC chips and SM-DP+ / SM-DS servers."""

__version__ = "2.3.0"