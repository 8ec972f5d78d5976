"""Management commands: ``python -m app.interfaces.cli <command>``."""
