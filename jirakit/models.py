"""Issue data types of the Jira API and their JSON form."""

from __future__ import annotations

import re
import types
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timedelta, timezone
from typing import Any, Union, get_args, get_origin

ASSIGNEE_AUTOMATIC = "-1"
"""The assignee value that stands for "Assignee: Automatic"."""

_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?([+-])(\d{2})(\d{2})"
)
_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


def parse_time(value: str) -> datetime:
    """Parse a Jira timestamp such as ``2016-03-16T04:22:35.386+0000``."""
    match = _TIME_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"invalid Jira time: {value!r}")
    year, month, day, hour, minute, second, fraction, sign, off_h, off_m = match.groups()
    micro = int((fraction or "").ljust(6, "0")[:6])
    offset = timedelta(hours=int(off_h), minutes=int(off_m))
    if sign == "-":
        offset = -offset
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        micro, tzinfo=timezone(offset),
    )


def format_time(value: datetime) -> str:
    """Format a timestamp the way Jira expects it; naive times count as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (
        value.strftime("%Y-%m-%dT%H:%M:%S")
        + f".{value.microsecond // 1000:03d}"
        + value.strftime("%z")
    )


def parse_date(value: str) -> date:
    """Parse a Jira date such as ``2016-11-15``."""
    match = _DATE_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"invalid Jira date: {value!r}")
    year, month, day = match.groups()
    return date(int(year), int(month), int(day))


def format_date(value: date) -> str:
    """Format a date the way Jira expects it."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _json(key: str, default: Any = None, *, omit: Any = True, factory: Any = None) -> Any:
    """Declare a field with its JSON key; ``omit`` is True, False or "none"."""
    meta = {"json": key, "omit": omit}
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


_MODELS: dict[str, type] = {}

# A decoding spec is (container, kind): container is None, "list" or "dict";
# kind is None (raw value), "time", "date", a model class or a model name.
_Spec = tuple[Any, Any]


def _kind_of_text(text: str) -> Any:
    if text == "datetime":
        return "time"
    if text == "date":
        return "date"
    if text in ("Any", "str", "int", "bool", "float", "object"):
        return None
    return text


def _spec_from_text(annotation: str) -> _Spec:
    parts = [part.strip() for part in annotation.split("|")]
    parts = [part for part in parts if part != "None"]
    if len(parts) != 1:
        return (None, None)
    text = parts[0]
    if text.startswith("list[") and text.endswith("]"):
        return ("list", _kind_of_text(text[5:-1].strip()))
    if text.startswith("dict[") and text.endswith("]"):
        inner = text[5:-1].split(",", 1)
        return ("dict", _kind_of_text(inner[1].strip() if len(inner) == 2 else "Any"))
    return (None, _kind_of_text(text))


def _kind_of_type(hint: Any) -> Any:
    if hint is datetime:
        return "time"
    if hint is date:
        return "date"
    if isinstance(hint, type) and issubclass(hint, _JsonModel):
        return hint
    if isinstance(hint, str):
        return _kind_of_text(hint)
    return None


def _spec_from_type(hint: Any) -> _Spec:
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        return _spec_of(args[0]) if len(args) == 1 else (None, None)
    if origin is list:
        args = get_args(hint)
        return ("list", _kind_of_type(args[0]) if args else None)
    if origin is dict:
        args = get_args(hint)
        return ("dict", _kind_of_type(args[1]) if len(args) == 2 else None)
    return (None, _kind_of_type(hint))


def _spec_of(annotation: Any) -> _Spec:
    if isinstance(annotation, str):
        return _spec_from_text(annotation)
    return _spec_from_type(annotation)


def _convert(kind: Any, value: Any) -> Any:
    if value is None or kind is None:
        return value
    if kind == "time":
        return parse_time(value)
    if kind == "date":
        return parse_date(value)
    model = _MODELS.get(kind) if isinstance(kind, str) else kind
    if model is None:
        return value
    return model.from_dict(value)


def _decode(spec: _Spec, value: Any) -> Any:
    if value is None:
        return None
    container, kind = spec
    if container == "list":
        if not isinstance(value, list):
            raise TypeError(f"expected a list, got {type(value).__name__}")
        return [_convert(kind, element) for element in value]
    if container == "dict":
        if not isinstance(value, Mapping):
            raise TypeError(f"expected an object, got {type(value).__name__}")
        return {key: _convert(kind, element) for key, element in value.items()}
    return _convert(kind, value)


def _encode(value: Any) -> Any:
    if isinstance(value, _JsonModel):
        return value.to_dict()
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


_FIELD_CACHE: dict[type, list[tuple[str, str, Any, _Spec]]] = {}


class _JsonModel:
    """Mapping between a dataclass and the JSON object Jira uses for it."""

    _omit_zero_models = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _MODELS.setdefault(cls.__name__, cls)

    @classmethod
    def _json_fields(cls) -> list[tuple[str, str, Any, _Spec]]:
        cached = _FIELD_CACHE.get(cls)
        if cached is None:
            cached = [
                (f.name, f.metadata["json"], f.metadata["omit"], _spec_of(f.type))
                for f in fields(cls)  # type: ignore[arg-type]
                if f.metadata.get("json")
            ]
            _FIELD_CACHE[cls] = cached
        return cached

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Any:
        """Build an instance from a decoded JSON object."""
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} needs an object, got {type(data).__name__}")
        kwargs = {
            name: _decode(spec, data[key])
            for name, key, _, spec in cls._json_fields()
            if data.get(key) is not None
        }
        return cls(**kwargs)

    def _omitted(self, mode: Any, value: Any) -> bool:
        if mode is False:
            return False
        if value is None:
            return True
        if mode == "none":
            return False
        if isinstance(value, _JsonModel):
            return self._omit_zero_models and value == type(value)()
        if isinstance(value, (bool, int, float)):
            return not value
        if isinstance(value, (str, list, tuple, Mapping)):
            return len(value) == 0
        return False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object for this instance."""
        return {
            key: _encode(getattr(self, name))
            for name, key, omit, _ in self._json_fields()
            if not self._omitted(omit, getattr(self, name))
        }


@dataclass
class IssueType(_JsonModel):
    """A type of issue, such as "Bug" or "Story"."""

    self_url: str = _json("self", "")
    id: str = _json("id", "")
    description: str = _json("description", "")
    icon_url: str = _json("iconUrl", "")
    name: str = _json("name", "")
    subtask: bool = _json("subtask", False)
    avatar_id: int = _json("avatarId", 0)


@dataclass
class Watcher(_JsonModel):
    """A user that observes an issue."""

    self_url: str = _json("self", "")
    name: str = _json("name", "")
    account_id: str = _json("accountId", "")
    display_name: str = _json("displayName", "")
    active: bool = _json("active", False)


@dataclass
class Watches(_JsonModel):
    """How many and which users observe an issue."""

    self_url: str = _json("self", "")
    watch_count: int = _json("watchCount", 0)
    is_watching: bool = _json("isWatching", False)
    watchers: list[Watcher] = _json("watchers", factory=list)


@dataclass
class AvatarUrls(_JsonModel):
    """Avatar images in different sizes."""

    size_48: str = _json("48x48", "")
    size_24: str = _json("24x24", "")
    size_16: str = _json("16x16", "")
    size_32: str = _json("32x32", "")


@dataclass
class Component(_JsonModel):
    """A component of an issue."""

    self_url: str = _json("self", "")
    id: str = _json("id", "")
    name: str = _json("name", "")
    description: str = _json("description", "")


@dataclass
class Progress(_JsonModel):
    """Progress of an issue."""

    progress: int = _json("progress", 0, omit=False)
    total: int = _json("total", 0, omit=False)
    percent: int = _json("percent", 0, omit=False)


@dataclass
class Parent(_JsonModel):
    """The parent of a sub-task."""

    id: str = _json("id", "")
    key: str = _json("key", "")


@dataclass
class Attachment(_JsonModel):
    """A file attached to an issue."""

    self_url: str = _json("self", "")
    id: str = _json("id", "")
    filename: str = _json("filename", "")
    author: dict[str, Any] | None = _json("author")
    created: str = _json("created", "")
    size: int = _json("size", 0)
    mime_type: str = _json("mimeType", "")
    content: str = _json("content", "")
    thumbnail: str = _json("thumbnail", "")


@dataclass
class Epic(_JsonModel):
    """The epic an issue belongs to."""

    id: int = _json("id", 0, omit=False)
    key: str = _json("key", "", omit=False)
    self_url: str = _json("self", "", omit=False)
    name: str = _json("name", "", omit=False)
    summary: str = _json("summary", "", omit=False)
    done: bool = _json("done", False, omit=False)


@dataclass
class ChangelogItems(_JsonModel):
    """One change within a changelog history entry."""

    field: str = _json("field", "", omit=False)
    field_type: str = _json("fieldtype", "", omit=False)
    from_value: Any = _json("from", omit=False)
    from_string: str = _json("fromString", "", omit=False)
    to_value: Any = _json("to", omit=False)
    to_string: str = _json("toString", "", omit=False)


@dataclass
class ChangelogHistory(_JsonModel):
    """One entry of an issue's change log."""

    id: str = _json("id", "", omit=False)
    author: dict[str, Any] = _json("author", omit=False, factory=dict)
    created: str = _json("created", "", omit=False)
    items: list[ChangelogItems] = _json("items", omit=False, factory=list)

    def created_time(self) -> datetime | None:
        """Return the creation time, or None when Jira sent ``null``."""
        if self.created == "null":
            return None
        return parse_time(self.created)


@dataclass
class Changelog(_JsonModel):
    """The change log of an issue."""

    histories: list[ChangelogHistory] = _json("histories", factory=list)


@dataclass
class TransitionField(_JsonModel):
    """A field of a transition."""

    required: bool = _json("required", False, omit=False)


@dataclass
class Transition(_JsonModel):
    """A transition an issue can go through."""

    id: str = _json("id", "", omit=False)
    name: str = _json("name", "", omit=False)
    to: dict[str, Any] = _json("to", omit=False, factory=dict)
    fields: dict[str, TransitionField] = _json("fields", omit=False, factory=dict)


@dataclass
class TransitionPayload(_JsonModel):
    """The transition to perform."""

    id: str = _json("id", "", omit=False)


@dataclass
class TransitionPayloadFields(_JsonModel):
    """Fields that may be set while performing a transition."""

    resolution: dict[str, Any] | None = _json("resolution")


@dataclass
class CreateTransitionPayload(_JsonModel):
    """Request body for performing a transition."""

    transition: TransitionPayload = _json("transition", omit=False, factory=TransitionPayload)
    fields: TransitionPayloadFields = _json(
        "fields", omit=False, factory=TransitionPayloadFields
    )


@dataclass
class Option(_JsonModel):
    """An option of a select list or multi-select custom field."""

    value: str = _json("value", "", omit=False)


@dataclass
class EntityProperty(_JsonModel):
    """A key and value attached to an entity."""

    key: str = _json("key", "", omit=False)
    value: Any = _json("value", omit=False)


@dataclass
class WorklogRecord(_JsonModel):
    """One entry of a work log."""

    self_url: str = _json("self", "")
    author: dict[str, Any] | None = _json("author")
    update_author: dict[str, Any] | None = _json("updateAuthor")
    comment: str = _json("comment", "")
    created: datetime | None = _json("created")
    updated: datetime | None = _json("updated")
    started: datetime | None = _json("started")
    time_spent: str = _json("timeSpent", "")
    time_spent_seconds: int = _json("timeSpentSeconds", 0)
    id: str = _json("id", "")
    issue_id: str = _json("issueId", "")
    properties: list[EntityProperty] = _json("properties", factory=list)


@dataclass
class Worklog(_JsonModel):
    """The work log of an issue."""

    start_at: int = _json("startAt", 0, omit=False)
    max_results: int = _json("maxResults", 0, omit=False)
    total: int = _json("total", 0, omit=False)
    worklogs: list[WorklogRecord] = _json("worklogs", omit=False, factory=list)


@dataclass
class TimeTracking(_JsonModel):
    """Time tracking fields of an issue."""

    original_estimate: str = _json("originalEstimate", "")
    remaining_estimate: str = _json("remainingEstimate", "")
    time_spent: str = _json("timeSpent", "")
    original_estimate_seconds: int = _json("originalEstimateSeconds", 0)
    remaining_estimate_seconds: int = _json("remainingEstimateSeconds", 0)
    time_spent_seconds: int = _json("timeSpentSeconds", 0)


@dataclass
class CommentVisibility(_JsonModel):
    """Who can see a comment, e.g. type "role" and value "Administrators"."""

    type: str = _json("type", "")
    value: str = _json("value", "")


@dataclass
class Comment(_JsonModel):
    """A comment on an issue."""

    id: str = _json("id", "")
    self_url: str = _json("self", "")
    name: str = _json("name", "")
    author: dict[str, Any] = _json("author", factory=dict)
    body: str = _json("body", "")
    update_author: dict[str, Any] = _json("updateAuthor", factory=dict)
    updated: str = _json("updated", "")
    created: str = _json("created", "")
    visibility: CommentVisibility = _json("visibility", factory=CommentVisibility)


@dataclass
class Comments(_JsonModel):
    """A list of comments."""

    comments: list[Comment] = _json("comments", factory=list)


@dataclass
class FixVersion(_JsonModel):
    """A release in which an issue is fixed."""

    self_url: str = _json("self", "")
    id: str = _json("id", "")
    name: str = _json("name", "")
    description: str = _json("description", "")
    archived: bool | None = _json("archived", omit="none")
    released: bool | None = _json("released", omit="none")
    release_date: str = _json("releaseDate", "")
    user_release_date: str = _json("userReleaseDate", "")
    project_id: int = _json("projectId", 0)
    start_date: str = _json("startDate", "")


@dataclass
class IssueLinkType(_JsonModel):
    """A kind of link between issues, such as "Duplicate"."""

    id: str = _json("id", "")
    self_url: str = _json("self", "")
    name: str = _json("name", "", omit=False)
    inward: str = _json("inward", "", omit=False)
    outward: str = _json("outward", "", omit=False)


@dataclass
class IssueLink(_JsonModel):
    """A link between two issues."""

    id: str = _json("id", "")
    self_url: str = _json("self", "")
    type: IssueLinkType = _json("type", omit=False, factory=IssueLinkType)
    outward_issue: Issue | None = _json("outwardIssue", omit=False)
    inward_issue: Issue | None = _json("inwardIssue", omit=False)
    comment: Comment | None = _json("comment")


@dataclass
class IssueFields(_JsonModel):
    """The fields of an issue; fields without a name here go to ``unknowns``."""

    _omit_zero_models = True

    expand: str = _json("expand", "")
    type: IssueType = _json("issuetype", factory=IssueType)
    project: dict[str, Any] = _json("project", factory=dict)
    resolution: dict[str, Any] | None = _json("resolution")
    priority: dict[str, Any] | None = _json("priority")
    resolutiondate: datetime | None = _json("resolutiondate")
    created: datetime | None = _json("created")
    duedate: date | None = _json("duedate")
    watches: Watches | None = _json("watches")
    assignee: dict[str, Any] | None = _json("assignee")
    updated: datetime | None = _json("updated")
    description: str = _json("description", "")
    summary: str = _json("summary", "")
    creator: dict[str, Any] | None = _json("Creator")
    reporter: dict[str, Any] | None = _json("reporter")
    components: list[Component] = _json("components", factory=list)
    status: dict[str, Any] | None = _json("status")
    progress: Progress | None = _json("progress")
    aggregate_progress: Progress | None = _json("aggregateprogress")
    time_tracking: TimeTracking | None = _json("timetracking")
    time_spent: int = _json("timespent", 0)
    time_estimate: int = _json("timeestimate", 0)
    time_original_estimate: int = _json("timeoriginalestimate", 0)
    worklog: Worklog | None = _json("worklog")
    issue_links: list[IssueLink] = _json("issuelinks", factory=list)
    comments: Comments | None = _json("comment")
    fix_versions: list[FixVersion] = _json("fixVersions", factory=list)
    affects_versions: list[dict[str, Any]] = _json("versions", factory=list)
    labels: list[str] = _json("labels", factory=list)
    subtasks: list[Subtasks] = _json("subtasks", factory=list)
    attachments: list[Attachment] = _json("attachment", factory=list)
    epic: Epic | None = _json("epic")
    sprint: dict[str, Any] | None = _json("sprint")
    parent: Parent | None = _json("parent")
    aggregate_time_original_estimate: int = _json("aggregatetimeoriginalestimate", 0)
    aggregate_time_spent: int = _json("aggregatetimespent", 0)
    aggregate_time_estimate: int = _json("aggregatetimeestimate", 0)
    unknowns: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IssueFields:
        """Build the fields, keeping keys without a named field in ``unknowns``."""
        result = super().from_dict(data)
        known = {key for _, key, _, _ in cls._json_fields()}
        result.unknowns = {key: value for key, value in data.items() if key not in known}
        return result

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object, with ``unknowns`` merged in at the top level."""
        result = super().to_dict()
        result.update({key: _encode(value) for key, value in self.unknowns.items()})
        return result


@dataclass
class Subtasks(_JsonModel):
    """A sub-task of an issue."""

    id: str = _json("id", "", omit=False)
    key: str = _json("key", "", omit=False)
    self_url: str = _json("self", "", omit=False)
    fields: IssueFields = _json("fields", omit=False, factory=IssueFields)


@dataclass
class IssueRenderedFields(_JsonModel):
    """Fields of an issue as rendered by Jira."""

    resolutiondate: str = _json("resolutiondate", "")
    created: str = _json("created", "")
    duedate: str = _json("duedate", "")
    updated: str = _json("updated", "")
    comments: Comments | None = _json("comment")
    description: str = _json("description", "")


@dataclass
class Issue(_JsonModel):
    """A Jira issue."""

    expand: str = _json("expand", "")
    id: str = _json("id", "")
    self_url: str = _json("self", "")
    key: str = _json("key", "")
    fields: IssueFields | None = _json("fields")
    rendered_fields: IssueRenderedFields | None = _json("renderedFields")
    changelog: Changelog | None = _json("changelog")
    transitions: list[Transition] = _json("transitions", factory=list)
    names: dict[str, str] = _json("names", factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issue:
        """Build an issue from its JSON object."""
        return super().from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object of the issue."""
        return super().to_dict()


@dataclass
class RemoteLinkApplication(_JsonModel):
    """The application a remote link points into."""

    type: str = _json("type", "")
    name: str = _json("name", "")


@dataclass
class RemoteLinkIcon(_JsonModel):
    """The icon shown next to a remote link."""

    url16x16: str = _json("url16x16", "")
    title: str = _json("title", "")
    link: str = _json("link", "")


@dataclass
class RemoteLinkStatus(_JsonModel):
    """Status of a resolvable remote object."""

    resolved: bool = _json("resolved", False)
    icon: RemoteLinkIcon | None = _json("icon")


@dataclass
class RemoteLinkObject(_JsonModel):
    """The object a remote link points to."""

    url: str = _json("url", "")
    title: str = _json("title", "")
    summary: str = _json("summary", "")
    icon: RemoteLinkIcon | None = _json("icon")
    status: RemoteLinkStatus | None = _json("status")


@dataclass
class RemoteLink(_JsonModel):
    """A link from an issue to a remote object."""

    id: int = _json("id", 0)
    self_url: str = _json("self", "")
    global_id: str = _json("globalId", "")
    application: RemoteLinkApplication | None = _json("application")
    relationship: str = _json("relationship", "")
    object: RemoteLinkObject | None = _json("object")


def _query(name: str, default: Any) -> Any:
    return field(default=default, metadata={"query": name})


@dataclass
class SearchOptions:
    """Paging and expansion options for searches and lists."""

    start_at: int = _query("startAt", 0)
    max_results: int = _query("maxResults", 0)
    expand: str = _query("expand", "")
    fields: list[str] = field(default_factory=list)
    validate_query: str = _query("validateQuery", "")


@dataclass
class GetQueryOptions:
    """Options for fetching an issue."""

    fields: str = _query("fields", "")
    expand: str = _query("expand", "")
    properties: str = _query("properties", "")
    fields_by_keys: bool = _query("fieldsByKeys", False)
    update_history: bool = _query("updateHistory", False)
    project_keys: str = _query("projectKeys", "")


@dataclass
class UpdateQueryOptions:
    """Options for editing an issue."""

    notify_users: bool = _query("notifyUsers", False)
    override_screen_security: bool = _query("overrideScreenSecurity", False)
    override_editable_flag: bool = _query("overrideEditableFlag", False)


@dataclass
class GetWorklogsQueryOptions:
    """Options for fetching the work log of an issue."""

    start_at: int = _query("startAt", 0)
    max_results: int = _query("maxResults", 0)
    started_after: int = _query("startedAfter", 0)
    expand: str = _query("expand", "")


@dataclass
class AddWorklogQueryOptions:
    """Options for adding a work log entry."""

    notify_users: bool = _query("notifyUsers", False)
    adjust_estimate: str = _query("adjustEstimate", "")
    new_estimate: str = _query("newEstimate", "")
    reduce_by: str = _query("reduceBy", "")
    expand: str = _query("expand", "")
    override_editable_flag: bool = _query("overrideEditableFlag", False)