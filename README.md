# jirakit

A Python client for the Jira REST API. It provides an HTTP client with basic
and session authentication, services for agile boards and sprints, saved
filters, issue fields, groups and issue link types, and data classes for
issues and their parts along with their JSON form.

## Installation

```
pip install jirakit
```

## The client

Every call goes through a `jirakit.client.Client`. The client builds its
requests relative to a base URL. It raises `ValueError` if the URL has no
scheme or host.

```python
from jirakit.client import Client

client = Client("https://jira.example.com/")
client.authentication.set_basic_auth("user", "password")
```

Authentication is held by `client.authentication`, which is an
`AuthenticationService`. Every request the client builds uses it:

- `set_basic_auth(username, password)` sends HTTP basic authentication with
  every request.
- `acquire_session_cookie(username, password)` logs in at
  `rest/auth/1/session`. It keeps the returned session and its cookies in
  `client.session` and sends the cookies with later requests. It returns
  `True` on success.
- `get_current_user()` returns a `Session` (name, self URL, session cookie
  and `LoginInfo`) for the logged-in user.
- `logout()` ends the session. It expects a 204 response.
- `authenticated()` reports whether authentication details are set.

`client.new_request(method, endpoint, body)` builds a request with a JSON
body. The body can be a dict, a dataclass, or an object with `to_dict()`.
`client.new_multipart_request(method, endpoint, files)` builds an upload
request. `client.do(request)` sends a request and returns a
`jirakit.client.Response`. That object exposes `status_code`, `status`,
`headers`, `text`, `json()` and the paging values `start_at`, `max_results`
and `total` when the body has them.

`jirakit.client.add_options(endpoint, options)` sets the query string of an
endpoint. It takes the non-empty values of a mapping, or of one of the
options dataclasses, sorted by key.

## Services

Each service takes the client:

```python
from jirakit.board import BoardService, BoardListOptions, GetAllSprintsOptions

boards = BoardService(client)
board_list, response = boards.get_all_boards(BoardListOptions(board_type="scrum", name="Test"))
board, response = boards.get_board(1)
sprints, response = boards.get_all_sprints("123")
page, response = boards.get_all_sprints_with_options(123, GetAllSprintsOptions(state="active,future"))
config, response = boards.get_board_configuration(35)
```

`BoardService` also has `create_board(board)` and `delete_board(board_id)`.

```python
from jirakit.filters import FilterService, FilterSearchOptions, GetMyFiltersQueryOptions

filters = FilterService(client)
all_filters, response = filters.get_list()
favourites, response = filters.get_favourite_list()
one, response = filters.get(10000)
mine, response = filters.get_my_filters(GetMyFiltersQueryOptions(include_favourites=True))
found, response = filters.search(FilterSearchOptions(filter_name="bugs"))
```

```python
from jirakit.fields import FieldService
from jirakit.group import GroupService, GroupSearchOptions
from jirakit.issuelinktype import IssueLinkTypeService
from jirakit.models import IssueLinkType

fields, response = FieldService(client).get_list()

groups = GroupService(client)
members, response = groups.get("default")
members, response = groups.get_with_options("default", GroupSearchOptions(start_at=0, max_results=2))
group, response = groups.add("default", "theodore")
groups.remove("default", "theodore")

link_types = IssueLinkTypeService(client)
types, response = link_types.get_list()
blocked, response = link_types.get("123")
created, response = link_types.create(
    IssueLinkType(name="Problem/Incident", inward="is caused by", outward="causes")
)
link_types.update(created)
link_types.delete("100")
```

## Issue data

`jirakit.models` holds the issue data classes: `Issue`, `IssueFields`,
`Comment`, `WorklogRecord`, `Transition`, `RemoteLink` and the rest. Each one
has `from_dict()` and `to_dict()` to convert to and from Jira's JSON.
`IssueFields` keeps any field that has no attribute of its own, such as
`customfield_10220`, in `unknowns`. `to_dict()` merges those back in.
Timestamps are read and written with `parse_time` / `format_time`
(`2016-03-16T04:22:35.386+0000`) and dates with `parse_date` / `format_date`.

There is no issue service in this package. To read or write issues, send the
request through the client and use the models:

```python
from jirakit.models import Issue, IssueFields, IssueType

response = client.do(client.new_request("GET", "rest/api/2/issue/PROJ-1"))
issue = Issue.from_dict(response.json())
print(issue.key, issue.fields.summary)

new_issue = Issue(fields=IssueFields(summary="Just a demo issue", type=IssueType(name="Bug")))
response = client.do(client.new_request("POST", "rest/api/2/issue", new_issue))
```

The options dataclasses `SearchOptions`, `GetQueryOptions`,
`UpdateQueryOptions`, `GetWorklogsQueryOptions` and `AddWorklogQueryOptions`
work with `add_options` to build query strings.

## What this package does not do

- It has no service methods for issues. Fetching, creating, updating,
  deleting and searching issues, and handling comments, worklogs,
  attachments, transitions, watchers, assignees, issue links and remote
  links, all go through `Client.new_request` and `Client.do` as shown above.
- It cannot create project components.
- It has no command-line tool.

## Errors

Any response outside 2xx makes `Client.do` raise a `jirakit.errors.JiraError`.
The services rebuild it with `new_jira_error(response, error)`. For a JSON
body, that reads Jira's `errorMessages` and `errors` into `error_messages` and
`errors`. Otherwise the error includes the status line and body text. The
`response` attribute holds the response, if there was one. `str()` gives a
short message, and `long_error()` gives every message and field error.

```python
from jirakit.errors import JiraError

try:
    boards.get_board(99999999)
except JiraError as exc:
    print(exc.long_error())
```

## Running the tests

```
pip install -e ".[test]"
pytest
```