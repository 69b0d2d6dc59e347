"""Tutorial hosts: WebSocket server and terminal console around the engine."""

from .server import TutorialSession, connection_handler, handle_connection, run_server

__all__ = ["TutorialSession", "connection_handler", "handle_connection", "run_server"]
