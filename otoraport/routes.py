# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application routes.

This module is responsible for registering the routes of the REST API
and linking them to the corresponding resources. Every route lives under
the ``/v{major}`` prefix taken from the VERSION file.
"""

from flask_restful import Api

from otoraport.resources.auth_res import (
    GoogleOAuthCallbackResource,
    GoogleOAuthResource,
    LoginResource,
    LogoutResource,
    MagicLinkResource,
    MagicLinkVerifyResource,
    RegisterResource,
)
from otoraport.resources.batch_sync_res import BatchSyncResource
from otoraport.resources.dashboard_res import (
    ActivityResource,
    AdminStatsResource,
    AnalyticsResource,
    DashboardStatsResource,
)
from otoraport.resources.developer_res import (
    DeveloperMeResource,
    OnboardingCompleteResource,
)
from otoraport.resources.health import HealthResource
from otoraport.resources.ministry_res import MinistryConfirmResource, MinistryNotifyResource
from otoraport.resources.nip_lookup_res import NipLookupResource
from otoraport.resources.payment_res import (
    PaymentListResource,
    PaymentWebhookResource,
    PlansResource,
)
from otoraport.resources.project_res import ProjectListResource, ProjectResource
from otoraport.resources.property_res import PropertyListResource, PropertyResource
from otoraport.resources.public_res import PublicMarkdownResource, PublicXMLResource
from otoraport.resources.regenerate_res import (
    BatchRegenerateResource,
    RegenerateResource,
)
from otoraport.resources.trial_warning_res import TrialWarningResource
from otoraport.resources.upload_res import UploadPreviewResource, UploadResource
from otoraport.resources.version import VersionResource
from otoraport.utils.logger import logger
from otoraport.utils.version import get_api_version


def register_routes(app):
    """Register the REST API routes on the Flask application.

    Args:
        app (Flask): The Flask application instance.
    """
    api = Api(app)
    api_version = get_api_version()

    def add(resource, path, **kwargs):
        api.add_resource(resource, f"/{api_version}{path}", **kwargs)

    # Service endpoints
    add(HealthResource, "/health")
    add(VersionResource, "/version")

    # Authentication
    add(RegisterResource, "/auth/register")
    add(LoginResource, "/auth/login")
    add(MagicLinkResource, "/auth/magic-link")
    add(MagicLinkVerifyResource, "/auth/magic-link/verify")
    add(GoogleOAuthResource, "/auth/oauth/google")
    add(GoogleOAuthCallbackResource, "/auth/oauth/google/callback")
    add(LogoutResource, "/auth/logout")

    # Developer account
    add(DeveloperMeResource, "/developers/me")
    add(OnboardingCompleteResource, "/onboarding/complete")

    # Projects and properties
    add(ProjectListResource, "/projects")
    add(ProjectResource, "/projects/<string:project_id>")
    add(PropertyListResource, "/properties")
    add(PropertyResource, "/properties/<string:property_id>")

    # Price list upload and file generation
    add(UploadResource, "/upload")
    add(UploadPreviewResource, "/upload/preview")
    add(RegenerateResource, "/regenerate")
    add(BatchRegenerateResource, "/batch-regenerate")

    # Public feeds for the ministry harvester
    add(PublicXMLResource, "/public/<string:client_id>/data.xml")
    add(PublicMarkdownResource, "/public/<string:client_id>/data.md")

    # Scheduled jobs
    add(BatchSyncResource, "/batch-sync")
    add(TrialWarningResource, "/emails/trial-warning")

    # Payments
    add(PlansResource, "/payments/plans")
    add(PaymentListResource, "/payments")
    add(PaymentWebhookResource, "/payments/webhook")

    # Misc
    add(NipLookupResource, "/nip-lookup")
    add(MinistryNotifyResource, "/ministry/notify")
    add(MinistryConfirmResource, "/ministry/confirm")
    add(DashboardStatsResource, "/dashboard/stats")
    add(AnalyticsResource, "/analytics")
    add(ActivityResource, "/activity")
    add(AdminStatsResource, "/admin/stats")

    logger.info("Routes registered successfully.", api_version=api_version)
