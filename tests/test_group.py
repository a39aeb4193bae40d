import json

import pytest
import responses
from responses import matchers

from jirakit.client import Client
from jirakit.errors import JiraError
from jirakit.group import GroupSearchOptions, GroupService

BASE = "https://jira.example.com/"
MEMBER_URL = BASE + "rest/api/2/group/member"
USER_URL = BASE + "rest/api/2/group/user"

MEMBERS = [
    {
        "self": "http://www.example.com/jira/rest/api/2/user?username=michael",
        "name": "michael",
        "key": "michael",
        "emailAddress": "michael@example.com",
        "displayName": "MichaelScofield",
        "active": True,
        "timeZone": "Australia/Sydney",
    },
    {
        "self": "http://www.example.com/jira/rest/api/2/user?username=alex",
        "name": "alex",
        "key": "alex",
        "emailAddress": "alex@example.com",
        "displayName": "AlexanderMahone",
        "active": True,
        "timeZone": "Australia/Sydney",
    },
]


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def service():
    return GroupService(Client(BASE))


def test_get(mocked, service):
    mocked.add(
        responses.GET,
        MEMBER_URL,
        json={"maxResults": 50, "startAt": 0, "total": 2, "isLast": True, "values": MEMBERS},
    )
    members, _ = service.get("default")
    assert [m.name for m in members] == ["michael", "alex"]
    assert members[0].email_address == "michael@example.com"
    assert mocked.calls[0].request.url == MEMBER_URL + "?groupname=default"


def _page(start):
    return {"maxResults": 2, "startAt": start, "total": 4, "isLast": start == 2, "values": MEMBERS}


def _query(start):
    return {
        "groupname": "default",
        "startAt": str(start),
        "maxResults": "2",
        "includeInactiveUsers": "false",
    }


def test_get_page(mocked, service):
    for start in (0, 2):
        mocked.add(
            responses.GET,
            MEMBER_URL,
            json=_page(start),
            match=[matchers.query_param_matcher(_query(start))],
        )
    page, resp = service.get_with_options("default", GroupSearchOptions(0, 2, False))
    assert len(page) == 2
    assert (resp.start_at, resp.max_results, resp.total) == (0, 2, 4)
    page, resp = service.get_with_options("default", GroupSearchOptions(2, 2, False))
    assert len(page) == 2
    assert (resp.start_at, resp.max_results, resp.total) == (2, 2, 4)


def test_get_with_no_options_uses_name_only(mocked, service):
    mocked.add(responses.GET, MEMBER_URL, json=_page(0))
    members, _ = service.get_with_options("a b", None)
    assert len(members) == 2
    assert mocked.calls[0].request.url == MEMBER_URL + "?groupname=a+b"


def test_add(mocked, service):
    mocked.add(
        responses.POST,
        USER_URL,
        status=201,
        json={"name": "default", "expand": "users"},
    )
    group, resp = service.add("default", "theodore")
    assert resp.status_code == 201
    assert group.title == ""
    request = mocked.calls[0].request
    assert request.url == USER_URL + "?groupname=default"
    assert json.loads(request.body) == {"name": "theodore"}


def test_add_error(mocked, service):
    mocked.add(
        responses.POST,
        USER_URL,
        status=400,
        json={"errorMessages": ["Group not found"], "errors": {}},
    )
    with pytest.raises(JiraError, match="Group not found") as info:
        service.add("default", "theodore")
    assert info.value.error_messages == ["Group not found"]


def test_remove(mocked, service):
    mocked.add(responses.DELETE, USER_URL, status=200, json={"name": "default"})
    resp = service.remove("default", "theodore")
    assert resp.status_code == 200
    assert mocked.calls[0].request.url == USER_URL + "?groupname=default&username=theodore"