"""InvisInsights: turn behavioural session signals into survey responses."""

__version__ = "0.1.0"
