"""mycount: a personal countdown and count-up tracker."""

__version__ = "0.1.0"
