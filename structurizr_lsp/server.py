"""Language server entry point for the Structurizr DSL."""

import asyncio

from structurizr_lsp.lsp.server import serve_stdio
from structurizr_lsp.utils.config_utils import ServerConfig
from structurizr_lsp.utils.logging_utils import Logger


def main():
    """Main entry point for the language server."""
    config = ServerConfig.from_config()
    with Logger(log_file=config.log_file) as logger:
        logger.info(
            f"Language Server is running. Logging all stdin data to {config.log_file}..."
        )
        asyncio.run(serve_stdio(config, logger))


if __name__ == "__main__":
    main()
