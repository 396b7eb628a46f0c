"""typecoach: typing practice with live stats, achievements and coaching feedback."""

__version__ = "0.1.0"
