# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Public feed resources polled by the ministry harvester.

``/public/<client_id>/data.xml`` and ``/public/<client_id>/data.md`` serve
the stored files. A developer with properties but no stored file yet gets
one rendered on the fly.
"""

from flask import Response
from flask_restful import Resource

from otoraport.models.developer import Developer
from otoraport.models.generated_file import GeneratedFile
from otoraport.models.types import utcnow
from otoraport.resources.constants import (
    MSG_CLIENT_NOT_FOUND,
    MSG_INVALID_CLIENT_ID,
    MSG_NO_PROPERTIES,
    PUBLIC_CACHE_CONTROL,
)
from otoraport.services.file_regeneration import public_file_url
from otoraport.services.md_generator import generate_markdown
from otoraport.services.validation import CLIENT_ID_MIN_LENGTH
from otoraport.services.xml_generator import SCHEMA_VERSION, generate_xml, md5_hex
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger

CONTENT_TYPES = {
    "xml": "application/xml; charset=utf-8",
    "md": "text/markdown; charset=utf-8",
}


def _render(developer, file_type):
    projects = list(developer.projects)
    properties = developer.properties
    if file_type == "xml":
        return generate_xml(developer, projects, properties)
    return generate_markdown(
        developer,
        projects,
        properties,
        xml_url=public_file_url(developer.client_id, "xml"),
        md_url=public_file_url(developer.client_id, "md"),
    )


def serve_public_file(client_id, file_type):
    """Build the response for one public file.

    Returns:
        Response: The file with caching and schema headers, or a JSON error
        tuple (400 malformed client id, 404 unknown developer or no data).
    """
    if not client_id or len(client_id) < CLIENT_ID_MIN_LENGTH:
        return {"error": MSG_INVALID_CLIENT_ID}, 400

    developer = Developer.get_by_client_id(client_id)
    if developer is None:
        logger.info("public_file_unknown_client", client_id=client_id)
        return {"error": MSG_CLIENT_NOT_FOUND}, 404

    if not developer.properties:
        return {"error": MSG_NO_PROPERTIES}, 404

    stored = GeneratedFile.get_for_developer(developer.id, file_type)
    if stored is not None:
        content = stored.content
        generated_at = stored.last_generated
        md5 = stored.md5
    else:
        content = _render(developer, file_type)
        generated_at = utcnow()
        md5 = md5_hex(content)
        logger.info(
            "public_file_generated_on_the_fly",
            client_id=client_id,
            file_type=file_type,
        )

    response = Response(content, status=200, content_type=CONTENT_TYPES[file_type])
    response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    response.headers["X-Schema-Version"] = SCHEMA_VERSION
    response.headers["X-Client-ID"] = client_id
    response.headers["X-Generated-At"] = generated_at.isoformat()
    response.set_etag(md5)
    return response


class PublicXMLResource(Resource):
    """GET /public/<client_id>/data.xml"""

    @limiter.limit(default_limit)
    def get(self, client_id):
        return serve_public_file(client_id, "xml")


class PublicMarkdownResource(Resource):
    """GET /public/<client_id>/data.md"""

    @limiter.limit(default_limit)
    def get(self, client_id):
        return serve_public_file(client_id, "md")
