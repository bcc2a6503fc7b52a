# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""WSGI entry point for Gunicorn.

Defaults to ProductionConfig; set FLASK_ENV to pick another environment.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

if not os.environ.get("IN_DOCKER_CONTAINER") and not os.environ.get("APP_MODE"):
    for _env_file in (".env.development", ".env"):
        if Path(_env_file).exists():
            load_dotenv(_env_file)
            break

from otoraport import create_app  # noqa: E402

config_classes = {
    "development": "otoraport.config.DevelopmentConfig",
    "testing": "otoraport.config.TestingConfig",
    "integration": "otoraport.config.IntegrationConfig",
    "staging": "otoraport.config.StagingConfig",
    "production": "otoraport.config.ProductionConfig",
}

env = os.environ.get("FLASK_ENV", "production")
app = create_app(config_classes.get(env, config_classes["production"]))

if __name__ == "__main__":
    app.run()
