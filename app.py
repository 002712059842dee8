#!/usr/bin/env python3
"""
Flask REST API entry point for Movie Identifier Service.

Configuration comes from environment variables (or a local .env file).
"""
import logging
import os

from dotenv import load_dotenv

from movie_identifier.api import create_app

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", 7860))
    app.run(host="0.0.0.0", port=port, debug=False)
