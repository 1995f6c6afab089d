"""In-process scripted HTTP endpoint for tests."""

from .scripted_server import ScriptedServer, Stub, LogEntry, STARTED

__all__ = ["ScriptedServer", "Stub", "LogEntry", "STARTED"]
