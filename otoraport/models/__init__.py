# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""SQLAlchemy models.

Importing the package registers every model on ``db.metadata`` so that
string relationship targets resolve and ``db.create_all`` sees all tables.
"""

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.generated_file import GeneratedFile
from otoraport.models.payment import Payment
from otoraport.models.project import Project
from otoraport.models.property import Property

__all__ = [
    "db",
    "ActivityLog",
    "Developer",
    "GeneratedFile",
    "Payment",
    "Project",
    "Property",
]
