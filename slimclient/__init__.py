"""Client library for the Slim media server protocol: discovery, connection, message codec and status reporting."""

__version__ = "0.1.0"
__all__ = ["capability", "messages", "status", "encode", "codec", "server", "discovery", "buffer", "cli"]