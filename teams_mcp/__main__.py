"""
Main entry point for the Teams MCP Server (``python -m teams_mcp``)
"""

from .server import main

if __name__ == "__main__":
    main()
