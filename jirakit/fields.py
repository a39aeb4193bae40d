"""Issue fields of the Jira API."""

from __future__ import annotations

from dataclasses import dataclass

from .client import Client, Response
from .errors import JiraError, new_jira_error
from .models import _json, _JsonModel


@dataclass
class FieldSchema(_JsonModel):
    """The schema of an issue field."""

    type: str = _json("type", "")
    items: str = _json("items", "")
    custom: str = _json("custom", "")
    system: str = _json("system", "")
    custom_id: int = _json("customId", 0)


@dataclass
class Field(_JsonModel):
    """A field of an issue."""

    id: str = _json("id", "")
    key: str = _json("key", "")
    name: str = _json("name", "")
    custom: bool = _json("custom", False)
    navigable: bool = _json("navigable", False)
    searchable: bool = _json("searchable", False)
    clause_names: list[str] = _json("clauseNames", factory=list)
    schema: FieldSchema = _json("schema", omit=False, factory=FieldSchema)


class FieldService:
    """Field operations of the Jira API."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def get_list(self) -> tuple[list[Field], Response]:
        """Return all issue fields."""
        request = self._client.new_request("GET", "rest/api/2/field")
        try:
            response = self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc
        payload = response.json() or []
        return [Field.from_dict(item) for item in payload], response