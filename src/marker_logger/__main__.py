"""Entry point: python -m marker_logger"""

from marker_logger.cli.app import app

if __name__ == "__main__":
    app()
