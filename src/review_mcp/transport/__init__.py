"""Hosting adapters that feed raw request bodies into :class:`McpServer`."""
