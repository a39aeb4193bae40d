"""Agile boards and sprints of the Jira API."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from .client import Client, Response, add_options
from .errors import JiraError, new_jira_error
from .models import SearchOptions, _json, _JsonModel, _query

_BOARD_ENDPOINT = "rest/agile/1.0/board"

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)
_INTEGER_RE = re.compile(r"[+-]?\d+")


def _parse_rfc3339(value: str) -> datetime:
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {value!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(-offset if zone[0] == "-" else offset)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        micro, tzinfo=tz,
    )


def _format_rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"


def _optional_time(value: Any) -> datetime | None:
    return None if value is None else _parse_rfc3339(value)


@dataclass
class Board(_JsonModel):
    """An agile board."""

    id: int = _json("id", 0)
    self_url: str = _json("self", "")
    name: str = _json("name", "")
    type: str = _json("type", "")
    filter_id: int = _json("filterId", 0)


@dataclass
class BoardsList(_JsonModel):
    """One page of agile boards."""

    max_results: int = _json("maxResults", 0, omit=False)
    start_at: int = _json("startAt", 0, omit=False)
    total: int = _json("total", 0, omit=False)
    is_last: bool = _json("isLast", False, omit=False)
    values: list[Board] = _json("values", omit=False, factory=list)


@dataclass
class BoardListOptions(SearchOptions):
    """Filters and paging for listing boards."""

    board_type: str = _query("type", "")
    name: str = _query("name", "")
    project_key_or_id: str = _query("projectKeyOrId", "")


@dataclass
class GetAllSprintsOptions(SearchOptions):
    """Filters and paging for listing the sprints of a board."""

    state: str = _query("state", "")


@dataclass
class Sprint(_JsonModel):
    """A sprint on an agile board."""

    id: int = 0
    name: str = ""
    complete_date: datetime | None = None
    end_date: datetime | None = None
    start_date: datetime | None = None
    origin_board_id: int = 0
    self_url: str = ""
    state: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Sprint:
        """Build a sprint from its JSON object."""
        if not isinstance(data, Mapping):
            raise TypeError(f"Sprint needs an object, got {type(data).__name__}")
        return cls(
            id=data.get("id") or 0,
            name=data.get("name") or "",
            complete_date=_optional_time(data.get("completeDate")),
            end_date=_optional_time(data.get("endDate")),
            start_date=_optional_time(data.get("startDate")),
            origin_board_id=data.get("originBoardId") or 0,
            self_url=data.get("self") or "",
            state=data.get("state") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object of the sprint."""

        def encode(value: datetime | None) -> str | None:
            return None if value is None else _format_rfc3339(value)

        return {
            "id": self.id,
            "name": self.name,
            "completeDate": encode(self.complete_date),
            "endDate": encode(self.end_date),
            "startDate": encode(self.start_date),
            "originBoardId": self.origin_board_id,
            "self": self.self_url,
            "state": self.state,
        }


@dataclass
class SprintsList(_JsonModel):
    """One page of sprints."""

    max_results: int = _json("maxResults", 0, omit=False)
    start_at: int = _json("startAt", 0, omit=False)
    total: int = _json("total", 0, omit=False)
    is_last: bool = _json("isLast", False, omit=False)
    values: list[Sprint] = _json("values", omit=False, factory=list)


@dataclass
class BoardConfigurationFilter(_JsonModel):
    """The filter a board uses."""

    id: str = _json("id", "", omit=False)
    self_url: str = _json("self", "", omit=False)


@dataclass
class BoardConfigurationSubQuery(_JsonModel):
    """The JQL sub-query of a Kanban board."""

    query: str = _json("query", "", omit=False)


@dataclass
class BoardConfigurationLocation(_JsonModel):
    """The container a board is located in."""

    type: str = _json("type", "", omit=False)
    key: str = _json("key", "", omit=False)
    id: str = _json("id", "", omit=False)
    self_url: str = _json("self", "", omit=False)
    name: str = _json("name", "", omit=False)


@dataclass
class BoardConfigurationColumnStatus(_JsonModel):
    """A status in the column configuration."""

    id: str = _json("id", "", omit=False)
    self_url: str = _json("self", "", omit=False)


@dataclass
class BoardConfigurationColumn(_JsonModel):
    """A board column and the statuses mapped to it."""

    name: str = _json("name", "", omit=False)
    status: list[BoardConfigurationColumnStatus] = _json(
        "statuses", omit=False, factory=list
    )


@dataclass
class BoardConfigurationColumnConfig(_JsonModel):
    """The columns of a board, in order, and their constraint type."""

    columns: list[BoardConfigurationColumn] = _json("columns", omit=False, factory=list)
    constraint_type: str = _json("constraintType", "", omit=False)


@dataclass
class BoardConfiguration(_JsonModel):
    """The configuration of an agile board."""

    id: int = _json("id", 0, omit=False)
    name: str = _json("name", "", omit=False)
    self_url: str = _json("self", "", omit=False)
    location: BoardConfigurationLocation = _json(
        "location", omit=False, factory=BoardConfigurationLocation
    )
    filter: BoardConfigurationFilter = _json(
        "filter", omit=False, factory=BoardConfigurationFilter
    )
    sub_query: BoardConfigurationSubQuery = _json(
        "subQuery", omit=False, factory=BoardConfigurationSubQuery
    )
    column_config: BoardConfigurationColumnConfig = _json(
        "columnConfig", omit=False, factory=BoardConfigurationColumnConfig
    )


class BoardService:
    """Agile board operations of the Jira API."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _call(self, method: str, endpoint: str, body: Any = None) -> Response:
        request = self._client.new_request(method, endpoint, body)
        try:
            return self._client.do(request)
        except JiraError as exc:
            raise new_jira_error(exc.response, exc) from exc

    def get_all_boards(
        self, options: BoardListOptions | None = None
    ) -> tuple[BoardsList, Response]:
        """Return the boards the user may view."""
        response = self._call("GET", add_options(_BOARD_ENDPOINT, options))
        return BoardsList.from_dict(response.json() or {}), response

    def get_board(self, board_id: int) -> tuple[Board, Response]:
        """Return one board."""
        response = self._call("GET", f"{_BOARD_ENDPOINT}/{board_id}")
        return Board.from_dict(response.json() or {}), response

    def create_board(self, board: Board) -> tuple[Board, Response]:
        """Create a board from its name, type and filter id."""
        response = self._call("POST", _BOARD_ENDPOINT, board)
        return Board.from_dict(response.json() or {}), response

    def delete_board(self, board_id: int) -> Response:
        """Delete a board."""
        return self._call("DELETE", f"{_BOARD_ENDPOINT}/{board_id}")

    def get_all_sprints(self, board_id: str) -> tuple[list[Sprint], Response]:
        """Return the sprints of a board given by its id as text."""
        text = str(board_id)
        if _INTEGER_RE.fullmatch(text) is None:
            raise ValueError(f"invalid board id: {board_id!r}")
        result, response = self.get_all_sprints_with_options(
            int(text), GetAllSprintsOptions()
        )
        return result.values, response

    def get_all_sprints_with_options(
        self, board_id: int, options: GetAllSprintsOptions | None
    ) -> tuple[SprintsList, Response]:
        """Return one page of the sprints of a board."""
        endpoint = add_options(f"{_BOARD_ENDPOINT}/{board_id}/sprint", options)
        response = self._call("GET", endpoint)
        return SprintsList.from_dict(response.json() or {}), response

    def get_board_configuration(
        self, board_id: int
    ) -> tuple[BoardConfiguration, Response]:
        """Return the configuration of a board."""
        response = self._call("GET", f"{_BOARD_ENDPOINT}/{board_id}/configuration")
        return BoardConfiguration.from_dict(response.json() or {}), response