"""HTTP client for a Jira instance, and its authentication service."""

from __future__ import annotations

import dataclasses
import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterator
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import requests

from .errors import JiraError

_SESSION_ENDPOINT = "rest/auth/1/session"


class _AuthType(enum.Enum):
    NONE = 0
    BASIC = 1
    SESSION = 2


@dataclass
class LoginInfo:
    """Login statistics of a Jira user."""

    failed_login_count: int = 0
    login_count: int = 0
    last_failed_login_time: str = ""
    previous_login_time: str = ""


@dataclass
class SessionCookie:
    """Name and value of a Jira session cookie."""

    name: str = ""
    value: str = ""


@dataclass
class Session:
    """A session as reported by the Jira API."""

    self_url: str = ""
    name: str = ""
    session: SessionCookie = field(default_factory=SessionCookie)
    login_info: LoginInfo = field(default_factory=LoginInfo)
    cookies: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Session:
        cookie = data.get("session") or {}
        info = data.get("loginInfo") or {}
        return cls(
            self_url=data.get("self", ""),
            name=data.get("name", ""),
            session=SessionCookie(cookie.get("name", ""), cookie.get("value", "")),
            login_info=LoginInfo(
                failed_login_count=info.get("failedLoginCount", 0),
                login_count=info.get("loginCount", 0),
                last_failed_login_time=info.get("lastFailedLoginTime", ""),
                previous_login_time=info.get("previousLoginTime", ""),
            ),
        )


class Response:
    """An HTTP response from Jira, with paging details when the body has them."""

    def __init__(self, raw: requests.Response) -> None:
        self.raw = raw
        self.start_at = 0
        self.max_results = 0
        self.total = 0
        self._read_paging()

    def _read_paging(self) -> None:
        if "json" not in self.headers.get("Content-Type", ""):
            return
        try:
            payload = json.loads(self.raw.content)
        except ValueError:
            return
        if not isinstance(payload, dict):
            return
        for attribute, key in (
            ("start_at", "startAt"),
            ("max_results", "maxResults"),
            ("total", "total"),
        ):
            value = payload.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                setattr(self, attribute, value)

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def reason(self) -> str:
        return self.raw.reason or ""

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.reason}".rstrip()

    @property
    def headers(self) -> Any:
        return self.raw.headers

    @property
    def content(self) -> bytes:
        return self.raw.content

    @property
    def text(self) -> str:
        return self.raw.text

    @property
    def cookies(self) -> Any:
        return self.raw.cookies

    @property
    def url(self) -> str:
        return self.raw.url

    def json(self) -> Any:
        """Decode the body as JSON; an empty body gives None."""
        if not self.raw.content.strip():
            return None
        return self.raw.json()


def _encode_body(body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if hasattr(body, "to_dict"):
        body = body.to_dict()
    elif dataclasses.is_dataclass(body) and not isinstance(body, type):
        body = dataclasses.asdict(body)
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


class Client:
    """Sends requests to a Jira instance at a base URL."""

    def __init__(self, base_url: str, http: requests.Session | None = None) -> None:
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"invalid base URL: {base_url!r}")
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.http = http or requests.Session()
        self.session: Session | None = None
        self.authentication = AuthenticationService(self)

    def _url(self, endpoint: str) -> str:
        return urljoin(self.base_url, endpoint.lstrip("/"))

    def new_request(self, method: str, endpoint: str, body: Any = None) -> requests.Request:
        """Build a request for an endpoint relative to the base URL, with a JSON body."""
        headers: dict[str, str] = {}
        data = None
        if body is not None:
            data = _encode_body(body)
            headers["Content-Type"] = "application/json"
        request = requests.Request(method, self._url(endpoint), headers=headers, data=data)
        self.authentication._apply(request)
        return request

    def new_multipart_request(self, method: str, endpoint: str, files: Any) -> requests.Request:
        """Build a multipart/form-data request, as used for uploads."""
        request = requests.Request(
            method,
            self._url(endpoint),
            headers={"X-Atlassian-Token": "no-check"},
            files=files,
        )
        self.authentication._apply(request)
        return request

    def do(self, request: requests.Request | requests.PreparedRequest) -> Response:
        """Send a request; raise JiraError unless the status is 2xx."""
        try:
            if isinstance(request, requests.PreparedRequest):
                prepared = request
            else:
                prepared = self.http.prepare_request(request)
            raw = self.http.send(prepared)
        except requests.RequestException as exc:
            raise JiraError(exc) from exc
        response = Response(raw)
        if not 200 <= response.status_code < 300:
            raise JiraError(
                "request failed. Please analyze the request body for more details. "
                f"Status code: {response.status_code}",
                response=response,
            )
        return response


class AuthenticationService:
    """Basic and session authentication against a Jira instance."""

    def __init__(self, client: Client) -> None:
        self._client = client
        self._type = _AuthType.NONE
        self._username = ""
        self._password = ""

    def _apply(self, request: requests.Request) -> None:
        if self._type is _AuthType.BASIC:
            request.auth = (self._username, self._password)
        elif self._type is _AuthType.SESSION and self._client.session is not None:
            request.cookies = dict(self._client.session.cookies)

    def acquire_session_cookie(self, username: str, password: str) -> bool:
        """Log in and keep the session cookie for later requests."""
        client = self._client
        request = client.new_request(
            "POST", _SESSION_ENDPOINT, {"username": username, "password": password}
        )
        prefix = "auth at Jira instance failed (HTTP(S) request)."
        try:
            response = client.do(request)
        except JiraError as exc:
            raise JiraError(f"{prefix} {exc}", response=exc.response) from exc
        if response.status_code != 200:
            raise JiraError(
                f"{prefix} Status code: {response.status_code}", response=response
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise JiraError(f"{prefix} {exc}", response=response) from exc
        if not isinstance(payload, dict):
            raise JiraError(f"{prefix} unexpected response body", response=response)
        session = Session.from_dict(payload)
        session.cookies = dict(response.cookies)
        client.session = session
        self._type = _AuthType.SESSION
        return True

    def set_basic_auth(self, username: str, password: str) -> None:
        """Use HTTP basic authentication for every request."""
        self._username = username
        self._password = password
        self._type = _AuthType.BASIC

    def authenticated(self) -> bool:
        """Report whether the client has authentication details."""
        if self._type is _AuthType.SESSION:
            return self._client.session is not None
        if self._type is _AuthType.BASIC:
            return self._username != ""
        return False

    def logout(self) -> None:
        """End the current session."""
        client = self._client
        if self._type is not _AuthType.SESSION or client.session is None:
            raise JiraError("no user is authenticated")
        request = client.new_request("DELETE", _SESSION_ENDPOINT)
        try:
            response = client.do(request)
        except JiraError as exc:
            raise JiraError(
                f"error sending the logout request: {exc}", response=exc.response
            ) from exc
        if response.status_code != 204:
            raise JiraError(
                f"the logout was unsuccessful with status {response.status_code}",
                response=response,
            )
        client.session = None

    def get_current_user(self) -> Session:
        """Return the details of the logged-in user."""
        client = self._client
        if self._type is not _AuthType.SESSION or client.session is None:
            raise JiraError("no user is authenticated yet")
        request = client.new_request("GET", _SESSION_ENDPOINT)
        try:
            response = client.do(request)
        except JiraError as exc:
            raise JiraError(
                f"error sending request to get user info : {exc}", response=exc.response
            ) from exc
        if response.status_code != 200:
            raise JiraError(
                f"getting user info failed with status : {response.status_code}",
                response=response,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise JiraError(
                f"could not unmarshall received user info : {exc}", response=response
            ) from exc
        if not isinstance(payload, dict):
            raise JiraError(
                "could not unmarshall received user info : not an object",
                response=response,
            )
        return Session.from_dict(payload)


def _query_pairs(options: Any) -> Iterator[tuple[str, str]]:
    if isinstance(options, Mapping):
        items = list(options.items())
    elif dataclasses.is_dataclass(options) and not isinstance(options, type):
        items = [
            (f.metadata["query"], getattr(options, f.name))
            for f in dataclasses.fields(options)
            if "query" in f.metadata
        ]
    else:
        raise TypeError(f"unsupported query options: {type(options).__name__}")
    for key, value in items:
        if value is None or (not value and not isinstance(value, (list, tuple))):
            continue
        if isinstance(value, bool):
            yield key, "true"
        elif isinstance(value, (list, tuple)):
            for item in value:
                yield key, str(item)
        else:
            yield key, str(value)


def add_options(endpoint: str, options: Any) -> str:
    """Replace the endpoint's query with the non-empty options, sorted by key.

    Options are a mapping, or a dataclass whose fields carry their query
    name in ``metadata["query"]``.
    """
    if options is None:
        return endpoint
    pairs = sorted(_query_pairs(options), key=lambda pair: pair[0])
    parts = urlsplit(endpoint)
    return urlunsplit(parts._replace(query=urlencode(pairs)))