"""Git code archaeology: query targets, command-line modes, reports, health, PR templates and hooks."""

__version__ = "0.1.0"