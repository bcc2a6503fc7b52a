# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""NIP lookup resource used by the registration form."""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError

from otoraport.resources.constants import MSG_NO_INPUT_DATA
from otoraport.schemas.auth_schema import NipLookupSchema
from otoraport.services.gus_client import lookup_company
from otoraport.utils.limiter import limiter, strict_limit


class NipLookupResource(Resource):
    """POST /nip-lookup: validate a NIP and fetch the company from GUS."""

    @limiter.limit(strict_limit)
    def post(self):
        """Look up a company by NIP.

        Expected JSON body:
            nip (str): Tax id, dashes and spaces allowed.

        Returns:
            tuple: ``{"valid": true, "nip", "company"}`` with HTTP 200, where
            ``company`` is null when the registry has no answer; 400 for an
            invalid NIP.
        """
        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            data = NipLookupSchema().load(json_data)
        except ValidationError as err:
            return {"valid": False, "errors": err.messages}, 400

        return {
            "valid": True,
            "nip": data["nip"],
            "company": lookup_company(data["nip"]),
        }, 200
