"""Jira groups and their members."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import quote_plus

from .client import Client, Response
from .errors import JiraError, new_jira_error


@dataclass
class GroupMember:
    """A single member of a group."""

    self_url: str = ""
    name: str = ""
    key: str = ""
    account_id: str = ""
    email_address: str = ""
    display_name: str = ""
    active: bool = False
    time_zone: str = ""
    account_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GroupMember:
        return cls(
            self_url=data.get("self", ""),
            name=data.get("name", ""),
            key=data.get("key", ""),
            account_id=data.get("accountId", ""),
            email_address=data.get("emailAddress", ""),
            display_name=data.get("displayName", ""),
            active=bool(data.get("active", False)),
            time_zone=data.get("timeZone", ""),
            account_type=data.get("accountType", ""),
        )


@dataclass
class Group:
    """A Jira group."""

    id: str = ""
    title: str = ""
    type: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    additional_properties: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Group:
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            type=data.get("type", ""),
            properties=dict(data.get("properties") or {}),
            additional_properties=bool(data.get("additionalProperties", False)),
        )


@dataclass
class GroupSearchOptions:
    """Paging options for listing group members."""

    start_at: int = 0
    max_results: int = 0
    include_inactive_users: bool = False


def _members(response: Response) -> list[GroupMember]:
    payload = response.json() or {}
    return [GroupMember.from_dict(value) for value in payload.get("values") or []]


class GroupService:
    """Group operations of the Jira API."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def get(self, name: str) -> tuple[list[GroupMember], Response]:
        """Return the first page of members of a group."""
        endpoint = f"/rest/api/2/group/member?groupname={quote_plus(name)}"
        response = self._client.do(self._client.new_request("GET", endpoint))
        return _members(response), response

    def get_with_options(
        self, name: str, options: GroupSearchOptions | None
    ) -> tuple[list[GroupMember], Response]:
        """Return one page of members of a group."""
        if options is None:
            return self.get(name)
        include = "true" if options.include_inactive_users else "false"
        endpoint = (
            f"/rest/api/2/group/member?groupname={quote_plus(name)}"
            f"&startAt={options.start_at}&maxResults={options.max_results}"
            f"&includeInactiveUsers={include}"
        )
        response = self._client.do(self._client.new_request("GET", endpoint))
        return _members(response), response

    def add(self, group_name: str, username: str) -> tuple[Group, Response]:
        """Add a user to a group."""
        endpoint = f"/rest/api/2/group/user?groupname={group_name}"
        request = self._client.new_request("POST", endpoint, {"name": username})
        try:
            response = self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc
        return Group.from_dict(response.json() or {}), response

    def remove(self, group_name: str, username: str) -> Response:
        """Remove a user from a group."""
        endpoint = f"/rest/api/2/group/user?groupname={group_name}&username={username}"
        request = self._client.new_request("DELETE", endpoint)
        try:
            return self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc