"""Entry point for the Azure DevOps resources MCP server."""

import logging
import sys

from dotenv import load_dotenv

from .config import Settings
from .server import create_server


def main():
    """Run the MCP server."""
    load_dotenv()
    settings = Settings()
    settings.validate_required()

    # stdout carries the stdio transport
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    server = create_server(settings)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
