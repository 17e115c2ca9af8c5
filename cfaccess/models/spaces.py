"""Space and organization entities.

Only the fields needed to navigate from an app to its space and org are
modelled here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import Resource, wire


@dataclass
class Organization(Resource):
    name: str = ""
    status: str = ""
    quota_definition_guid: str = ""
    billing_enabled: bool = False


@dataclass
class Space(Resource):
    name: str = ""
    organization_guid: str = ""
    space_quota_definition_guid: str = ""
    allow_ssh: bool = False
    organization_url: str = ""
    org_data: Optional[Organization] = wire("organization", default=None, nested=True)

    def org(self) -> Organization:
        """Fetch the organization this space belongs to."""
        return self._require_client().get_resource(self.organization_url, Organization)
