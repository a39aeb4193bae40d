import base64
import json
from dataclasses import dataclass, field

import pytest
import responses

from jirakit.client import (
    Client,
    LoginInfo,
    Session,
    SessionCookie,
    add_options,
)
from jirakit.errors import JiraError

BASE = "https://jira.example.com/"
SESSION_URL = BASE + "rest/auth/1/session"
LOGIN_BODY = (
    '{"session":{"name":"JSESSIONID","value":"12345678901234567890"},'
    '"loginInfo":{"failedLoginCount":10,"loginCount":127,'
    '"lastFailedLoginTime":"2016-03-16T04:22:35.386+0000",'
    '"previousLoginTime":"2016-03-16T04:22:35.386+0000"}}'
)


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client():
    return Client(BASE)


def _login(mocked, client):
    mocked.add(
        responses.POST,
        SESSION_URL,
        body=LOGIN_BODY,
        content_type="application/json",
        headers={"Set-Cookie": "JSESSIONID=token; Path=/"},
    )
    return client.authentication.acquire_session_cookie("foo", "password")


def test_acquire_session_cookie_failure(mocked, client):
    mocked.add(responses.POST, SESSION_URL, status=500)
    with pytest.raises(JiraError, match="auth at Jira instance failed"):
        client.authentication.acquire_session_cookie("foo", "password")
    assert client.authentication.authenticated() is False
    sent = json.loads(mocked.calls[0].request.body)
    assert sent == {"username": "foo", "password": "password"}


def test_acquire_session_cookie_success(mocked, client):
    assert _login(mocked, client) is True
    assert client.authentication.authenticated() is True
    sent = json.loads(mocked.calls[0].request.body)
    assert sent == {"username": "foo", "password": "password"}
    assert client.session.session == SessionCookie("JSESSIONID", "12345678901234567890")
    assert client.session.login_info.login_count == 127
    assert client.session.cookies == {"JSESSIONID": "token"}


def test_set_basic_auth_sends_credentials(mocked, client):
    client.authentication.set_basic_auth("test-user", "password")
    assert client.authentication.authenticated() is True
    mocked.add(responses.GET, BASE + "rest/api/2/myself", json={})
    client.do(client.new_request("GET", "rest/api/2/myself"))
    header = mocked.calls[0].request.headers["Authorization"]
    assert header.startswith("Basic ")
    assert base64.b64decode(header[6:]).decode() == "test-user:password"


def test_authenticated_fresh_client(client):
    assert client.authentication.authenticated() is False


def test_authenticated_basic_auth_without_username(client):
    client.authentication.set_basic_auth("", "password")
    assert client.authentication.authenticated() is False


def test_get_user_info_access_forbidden(mocked, client):
    _login(mocked, client)
    mocked.add(responses.GET, SESSION_URL, status=403)
    with pytest.raises(JiraError):
        client.authentication.get_current_user()


def test_get_user_info_non_ok_status(mocked, client):
    _login(mocked, client)
    mocked.add(responses.GET, SESSION_URL, status=240, body="")
    with pytest.raises(JiraError, match="getting user info failed with status : 240"):
        client.authentication.get_current_user()


def test_get_user_info_without_login(client):
    with pytest.raises(JiraError, match="no user is authenticated yet"):
        client.authentication.get_current_user()


def test_get_user_info_success(mocked, client):
    _login(mocked, client)
    mocked.add(
        responses.GET,
        SESSION_URL,
        body=(
            '{"self":"https://my.jira.example.com/rest/api/latest/user?username=foo",'
            '"name":"foo","loginInfo":{"failedLoginCount":12,"loginCount":357,'
            '"lastFailedLoginTime":"2016-09-06T16:41:23.949+0200",'
            '"previousLoginTime":"2016-09-07T11:36:23.476+0200"}}'
        ),
        content_type="application/json",
    )
    expected = Session(
        self_url="https://my.jira.example.com/rest/api/latest/user?username=foo",
        name="foo",
        login_info=LoginInfo(
            failed_login_count=12,
            login_count=357,
            last_failed_login_time="2016-09-06T16:41:23.949+0200",
            previous_login_time="2016-09-07T11:36:23.476+0200",
        ),
    )
    assert client.authentication.get_current_user() == expected
    assert "JSESSIONID=token" in mocked.calls[1].request.headers["Cookie"]


def test_logout_success(mocked, client):
    _login(mocked, client)
    mocked.add(responses.DELETE, SESSION_URL, status=204)
    client.authentication.logout()
    assert client.session is None
    assert client.authentication.authenticated() is False


def test_logout_without_login(mocked, client):
    mocked.add(responses.DELETE, SESSION_URL, status=401)
    with pytest.raises(JiraError, match="no user is authenticated"):
        client.authentication.logout()


def test_invalid_base_url():
    with pytest.raises(ValueError):
        Client("not a url")


def test_new_request_resolves_relative_to_base():
    request = Client("https://jira.example.com/jira").new_request("GET", "/rest/api/2/x")
    assert request.url == "https://jira.example.com/jira/rest/api/2/x"


def test_response_paging(mocked, client):
    mocked.add(
        responses.GET,
        BASE + "page",
        json={"startAt": 2, "maxResults": 5, "total": 9, "values": []},
    )
    response = client.do(client.new_request("GET", "page"))
    assert (response.start_at, response.max_results, response.total) == (2, 5, 9)
    assert response.json()["total"] == 9


@dataclass
class _Opts:
    kind: str = field(default="", metadata={"query": "type"})
    start_at: int = field(default=0, metadata={"query": "startAt"})
    flag: bool = field(default=False, metadata={"query": "flag"})


def test_add_options_dataclass():
    url = add_options("rest/agile/1.0/board", _Opts(kind="scrum", start_at=1))
    assert url == "rest/agile/1.0/board?startAt=1&type=scrum"


def test_add_options_bool_and_empty():
    assert add_options("x", _Opts(flag=True)) == "x?flag=true"
    assert add_options("x", _Opts()) == "x"


def test_add_options_none_keeps_endpoint():
    assert add_options("x?a=1", None) == "x?a=1"


def test_add_options_mapping_sorted():
    assert add_options("x", {"b": "2", "a": "1"}) == "x?a=1&b=2"