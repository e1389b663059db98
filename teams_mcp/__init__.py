"""
Teams MCP Server

A Model Context Protocol server that posts plain and Adaptive Card
messages to Microsoft Teams, as a bot or as the signed-in user.
"""

from .server import VERSION, main

__version__ = VERSION
__all__ = ["main"]
