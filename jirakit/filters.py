"""Saved issue filters of the Jira API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .client import Client, Response, add_options
from .errors import JiraError, new_jira_error
from .models import _json, _JsonModel, _query


@dataclass
class FilterSubscriptions(_JsonModel):
    """The paged subscriptions of a filter."""

    size: int = _json("size", 0, omit=False)
    items: list[Any] = _json("items", omit=False, factory=list)
    max_results: int = _json("max-results", 0, omit=False)
    start_index: int = _json("start-index", 0, omit=False)
    end_index: int = _json("end-index", 0, omit=False)


@dataclass
class Filter(_JsonModel):
    """A saved filter."""

    self_url: str = _json("self", "", omit=False)
    id: str = _json("id", "", omit=False)
    name: str = _json("name", "", omit=False)
    description: str = _json("description", "", omit=False)
    owner: dict[str, Any] = _json("owner", omit=False, factory=dict)
    jql: str = _json("jql", "", omit=False)
    view_url: str = _json("viewUrl", "", omit=False)
    search_url: str = _json("searchUrl", "", omit=False)
    favourite: bool = _json("favourite", False, omit=False)
    favourited_count: int = _json("favouritedCount", 0, omit=False)
    share_permissions: list[Any] = _json("sharePermissions", omit=False, factory=list)
    subscriptions: FilterSubscriptions = _json(
        "subscriptions", omit=False, factory=FilterSubscriptions
    )


@dataclass
class FiltersListItem(_JsonModel):
    """A filter as listed in search results."""

    self_url: str = _json("self", "", omit=False)
    id: str = _json("id", "", omit=False)
    name: str = _json("name", "", omit=False)
    description: str = _json("description", "", omit=False)
    owner: dict[str, Any] = _json("owner", omit=False, factory=dict)
    jql: str = _json("jql", "", omit=False)
    view_url: str = _json("viewUrl", "", omit=False)
    search_url: str = _json("searchUrl", "", omit=False)
    favourite: bool = _json("favourite", False, omit=False)
    favourited_count: int = _json("favouritedCount", 0, omit=False)
    share_permissions: list[Any] = _json("sharePermissions", omit=False, factory=list)
    subscriptions: list[dict[str, Any]] = _json(
        "subscriptions", omit=False, factory=list
    )


@dataclass
class FiltersList(_JsonModel):
    """One page of filters."""

    max_results: int = _json("maxResults", 0, omit=False)
    start_at: int = _json("startAt", 0, omit=False)
    total: int = _json("total", 0, omit=False)
    is_last: bool = _json("isLast", False, omit=False)
    values: list[FiltersListItem] = _json("values", omit=False, factory=list)


@dataclass
class GetMyFiltersQueryOptions:
    """Options for listing the current user's filters."""

    include_favourites: bool = _query("includeFavourites", False)
    expand: str = _query("expand", "")


@dataclass
class FilterSearchOptions:
    """Options for searching filters."""

    filter_name: str = _query("filterName", "")
    account_id: str = _query("accountId", "")
    group_name: str = _query("groupname", "")
    project_id: int = _query("projectId", 0)
    order_by: str = _query("orderBy", "")
    start_at: int = _query("startAt", 0)
    max_results: int = _query("maxResults", 0)
    expand: str = _query("expand", "")


class FilterService:
    """Filter operations of the Jira API."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _call(self, endpoint: str) -> Response:
        request = self._client.new_request("GET", endpoint)
        try:
            return self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc

    def _filters(self, endpoint: str) -> tuple[list[Filter], Response]:
        response = self._call(endpoint)
        payload = response.json() or []
        return [Filter.from_dict(item) for item in payload], response

    def get_list(self) -> tuple[list[Filter], Response]:
        """Return all filters."""
        return self._filters("rest/api/2/filter")

    def get_favourite_list(self) -> tuple[list[Filter], Response]:
        """Return the current user's favourite filters."""
        return self._filters("rest/api/2/filter/favourite")

    def get(self, filter_id: int) -> tuple[Filter, Response]:
        """Return one filter."""
        response = self._call(f"rest/api/2/filter/{filter_id}")
        return Filter.from_dict(response.json() or {}), response

    def get_my_filters(
        self, options: GetMyFiltersQueryOptions | None = None
    ) -> tuple[list[Filter], Response]:
        """Return the filters owned by the current user."""
        return self._filters(add_options("rest/api/3/filter/my", options))

    def search(
        self, options: FilterSearchOptions | None = None
    ) -> tuple[FiltersList, Response]:
        """Return one page of filters matching the search options."""
        response = self._call(add_options("rest/api/3/filter/search", options))
        return FiltersList.from_dict(response.json() or {}), response