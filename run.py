# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Entry point for development and staging environments.

Runs the OTORAPORT API with the Flask development server. The configuration
class is picked from FLASK_ENV.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from otoraport import create_app
from otoraport.utils.logger import logger

CONFIG_CLASSES = {
    "development": "otoraport.config.DevelopmentConfig",
    "testing": "otoraport.config.TestingConfig",
    "integration": "otoraport.config.IntegrationConfig",
    "staging": "otoraport.config.StagingConfig",
    "production": "otoraport.config.ProductionConfig",
}


def load_local_env():
    """Load .env.development (or .env) outside of containers."""
    if os.environ.get("IN_DOCKER_CONTAINER") or os.environ.get("APP_MODE"):
        logger.info("Running in Docker container, skipping .env file loading")
        return

    for env_file in (".env.development", ".env"):
        if Path(env_file).exists():
            load_dotenv(env_file)
            logger.info("Loaded environment file.", path=env_file)
            return
    logger.warning("No .env.development or .env file found")


def main():
    """Create the app for FLASK_ENV and start the development server."""
    env = os.environ.get("FLASK_ENV", "development")
    load_local_env()

    config_class = CONFIG_CLASSES.get(env, CONFIG_CLASSES["development"])
    logger.info("Selected configuration.", environment=env, config=config_class)

    app = create_app(config_class)

    debug = app.config.get("DEBUG", False)
    port = app.config.get("SERVICE_PORT", 5000)

    logger.info("Starting Flask development server.", port=port, debug=debug)
    app.run(host="0.0.0.0", port=port, debug=debug)  # nosec B104


if __name__ == "__main__":
    main()
