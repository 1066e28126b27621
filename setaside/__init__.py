"""Set-aside - tax set-aside tracking for freelancers."""

__version__ = "0.1.0"
