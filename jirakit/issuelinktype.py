"""Issue link types of the Jira API."""

from __future__ import annotations

import copy

from .client import Client, Response
from .errors import JiraError, new_jira_error
from .models import IssueLinkType


class IssueLinkTypeService:
    """Issue link type operations of the Jira API."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _call(self, method: str, endpoint: str, body: object = None) -> Response:
        request = self._client.new_request(method, endpoint, body)
        try:
            return self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc

    def get_list(self) -> tuple[list[IssueLinkType], Response]:
        """Return all issue link types."""
        response = self._call("GET", "rest/api/2/issueLinkType")
        payload = response.json() or []
        return [IssueLinkType.from_dict(item) for item in payload], response

    def get(self, link_type_id: str) -> tuple[IssueLinkType, Response]:
        """Return one issue link type."""
        response = self._call("GET", f"rest/api/2/issueLinkType/{link_type_id}")
        return IssueLinkType.from_dict(response.json() or {}), response

    def create(self, link_type: IssueLinkType) -> tuple[IssueLinkType, Response]:
        """Create an issue link type; the given link type is returned."""
        request = self._client.new_request("POST", "/rest/api/2/issueLinkType", link_type)
        response = self._client.do(request)
        try:
            IssueLinkType.from_dict(response.json())
        except (ValueError, TypeError) as exc:
            raise new_jira_error(
                response, "could no unmarshal the data into struct"
            ) from exc
        return link_type, response

    def update(self, link_type: IssueLinkType) -> tuple[IssueLinkType, Response]:
        """Update an issue link type found by its id; a copy of it is returned."""
        response = self._call(
            "PUT", f"rest/api/2/issueLinkType/{link_type.id}", link_type
        )
        return copy.copy(link_type), response

    def delete(self, link_type_id: str) -> Response:
        """Delete an issue link type."""
        request = self._client.new_request(
            "DELETE", f"rest/api/2/issueLinkType/{link_type_id}"
        )
        return self._client.do(request)