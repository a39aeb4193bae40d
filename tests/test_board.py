import json
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import pytest
import responses

from jirakit.board import (
    Board,
    BoardListOptions,
    BoardService,
    GetAllSprintsOptions,
    Sprint,
)
from jirakit.client import Client
from jirakit.errors import JiraError

BASE = "https://jira.example.com/"
BOARD_URL = BASE + "rest/agile/1.0/board"


@pytest.fixture
def service():
    return BoardService(Client(BASE))


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _sprint(sprint_id, state):
    return {
        "id": sprint_id,
        "self": f"https://jira.example.com/rest/agile/1.0/sprint/{sprint_id}",
        "state": state,
        "name": f"Sprint {sprint_id}",
        "startDate": "2016-06-01T10:00:00.000+02:00",
        "endDate": "2016-06-15T10:00:00.000+02:00",
        "originBoardId": 123,
    }


BOARDS = {
    "maxResults": 50,
    "startAt": 0,
    "total": 2,
    "isLast": True,
    "values": [
        {"id": 4, "self": BOARD_URL + "/4", "name": "Test Weekly", "type": "scrum"},
        {"id": 5, "self": BOARD_URL + "/5", "name": "Test Kanban", "type": "kanban"},
    ],
}


def _configuration():
    columns = [
        {
            "name": name,
            "statuses": [{"id": str(10000 + n), "self": f"{BASE}rest/api/2/status/{10000 + n}"}],
        }
        for n, name in enumerate(["Backlog", "Selected", "In Progress", "Review", "Testing", "Done"])
    ]
    return {
        "id": 35,
        "name": "Test board",
        "self": BOARD_URL + "/35/configuration",
        "location": {"type": "project", "key": "TE", "id": "10000", "self": BASE, "name": "Test"},
        "filter": {"id": "10100", "self": BASE + "rest/api/2/filter/10100"},
        "subQuery": {"query": "resolution = EMPTY"},
        "columnConfig": {"columns": columns, "constraintType": "issueCount"},
    }


def test_get_all_boards(service, mocked):
    mocked.add(responses.GET, BOARD_URL, json=BOARDS)
    boards, _ = service.get_all_boards(None)
    assert boards.total == 2
    assert boards.is_last is True
    assert [board.name for board in boards.values] == ["Test Weekly", "Test Kanban"]
    assert mocked.calls[0].request.method == "GET"
    assert urlsplit(mocked.calls[0].request.url).path == "/rest/agile/1.0/board"


def test_get_all_boards_with_filter(service, mocked):
    mocked.add(responses.GET, BOARD_URL, json={**BOARDS, "values": BOARDS["values"][:1]})
    options = BoardListOptions(board_type="scrum", name="Test", project_key_or_id="TE")
    options.start_at = 1
    options.max_results = 10
    boards, _ = service.get_all_boards(options)
    assert len(boards.values) == 1
    query = parse_qs(urlsplit(mocked.calls[0].request.url).query)
    assert query == {
        "type": ["scrum"],
        "name": ["Test"],
        "startAt": ["1"],
        "maxResults": ["10"],
        "projectKeyOrId": ["TE"],
    }


def test_get_board(service, mocked):
    mocked.add(
        responses.GET,
        BOARD_URL + "/1",
        json={"id": 4, "self": "https://test.jira.example.com/rest/agile/1.0/board/1",
              "name": "Test Weekly", "type": "scrum"},
    )
    board, response = service.get_board(1)
    assert board == Board(
        id=4,
        self_url="https://test.jira.example.com/rest/agile/1.0/board/1",
        name="Test Weekly",
        type="scrum",
    )
    assert response.status_code == 200


def test_get_board_wrong_id(service, mocked):
    mocked.add(responses.GET, BOARD_URL + "/99999999", status=404, body="Not found")
    with pytest.raises(JiraError) as info:
        service.get_board(99999999)
    assert info.value.response.status_code == 404
    assert "Not found" in str(info.value)


def test_get_board_json_error_messages(service, mocked):
    mocked.add(
        responses.GET,
        BOARD_URL + "/7",
        status=404,
        json={"errorMessages": ["Board does not exist"], "errors": {}},
    )
    with pytest.raises(JiraError) as info:
        service.get_board(7)
    assert info.value.error_messages == ["Board does not exist"]
    assert str(info.value).startswith("Board does not exist")


def test_create_board(service, mocked):
    mocked.add(
        responses.POST,
        BOARD_URL,
        status=201,
        json={"id": 17, "self": BOARD_URL + "/17", "name": "Test", "type": "kanban"},
    )
    created, _ = service.create_board(Board(name="Test", type="kanban", filter_id=17))
    assert created.id == 17
    assert created.type == "kanban"
    sent = json.loads(mocked.calls[0].request.body)
    assert sent == {"name": "Test", "type": "kanban", "filterId": 17}


def test_delete_board(service, mocked):
    mocked.add(responses.DELETE, BOARD_URL + "/1", status=204)
    response = service.delete_board(1)
    assert response.status_code == 204
    assert mocked.calls[0].request.method == "DELETE"


def test_get_all_sprints(service, mocked):
    payload = {
        "maxResults": 50,
        "startAt": 0,
        "isLast": True,
        "values": [_sprint(n, "closed") for n in (1, 2, 3)] + [_sprint(4, "active")],
    }
    mocked.add(responses.GET, BOARD_URL + "/123/sprint", json=payload)
    sprints, _ = service.get_all_sprints("123")
    assert len(sprints) == 4
    assert sprints[3].state == "active"
    assert sprints[0].origin_board_id == 123
    assert urlsplit(mocked.calls[0].request.url).query == ""


def test_get_all_sprints_rejects_non_numeric_id(service):
    with pytest.raises(ValueError):
        service.get_all_sprints("abc")


def test_get_all_sprints_with_options(service, mocked):
    payload = {"maxResults": 50, "startAt": 0, "isLast": True, "values": [_sprint(4, "active")]}
    mocked.add(responses.GET, BOARD_URL + "/123/sprint", json=payload)
    sprints, _ = service.get_all_sprints_with_options(
        123, GetAllSprintsOptions(state="active,future")
    )
    assert len(sprints.values) == 1
    query = parse_qs(urlsplit(mocked.calls[0].request.url).query)
    assert query == {"state": ["active,future"]}


def test_get_board_configuration(service, mocked):
    mocked.add(responses.GET, BOARD_URL + "/35/configuration", json=_configuration())
    configuration, _ = service.get_board_configuration(35)
    assert len(configuration.column_config.columns) == 6
    assert configuration.column_config.constraint_type == "issueCount"
    assert configuration.column_config.columns[0].status[0].id == "10000"
    assert configuration.location.key == "TE"
    assert configuration.sub_query.query == "resolution = EMPTY"


def test_sprint_parses_dates():
    sprint = Sprint.from_dict(_sprint(9, "future"))
    tz = timezone(timedelta(hours=2))
    assert sprint.start_date == datetime(2016, 6, 1, 10, 0, tzinfo=tz)
    assert sprint.complete_date is None


def test_sprint_round_trip():
    original = Sprint.from_dict(
        {"id": 1, "name": "S1", "startDate": "2015-04-11T15:22:00.5Z", "state": "active"}
    )
    data = original.to_dict()
    assert data["startDate"] == "2015-04-11T15:22:00.5Z"
    assert data["endDate"] is None
    assert Sprint.from_dict(data) == original