"""Errors reported by a Jira instance or raised while talking to one."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any


class JiraError(Exception):
    """An error from a Jira instance, carrying its messages and the HTTP response."""

    def __init__(
        self,
        http_error: Any = None,
        error_messages: list[str] | None = None,
        errors: dict[str, str] | None = None,
        response: Any = None,
    ) -> None:
        self.http_error = http_error
        self.error_messages = list(error_messages or [])
        self.errors = dict(errors or {})
        self.response = response
        super().__init__(str(self))

    def __str__(self) -> str:
        original = "" if self.http_error is None else str(self.http_error)
        if self.error_messages:
            head = self.error_messages[0]
        elif self.errors:
            key, value = next(iter(self.errors.items()))
            head = f"{key} - {value}"
        else:
            return original
        return f"{head}: {original}" if original else head

    def long_error(self) -> str:
        """Return a full, multi-line description of the error."""
        parts: list[str] = []
        if self.http_error is not None:
            parts.append(f"Original:\n{self.http_error}\n")
        if self.error_messages:
            parts.append("Messages:\n")
            parts.extend(f" - {message}\n" for message in self.error_messages)
        parts.extend(f" - {key} - {value}\n" for key, value in self.errors.items())
        return "".join(parts)


def _status_line(response: Any) -> str:
    code = response.status_code
    reason = getattr(response, "reason", None)
    if not reason:
        try:
            reason = HTTPStatus(code).phrase
        except ValueError:
            reason = ""
    return f"{code} {reason}".rstrip()


def new_jira_error(response: Any, http_error: Any) -> JiraError:
    """Build a JiraError from a failed response and the error that came with it."""
    if response is None:
        if http_error is None:
            return JiraError("No response returned")
        return JiraError(f"No response returned: {http_error}")

    body = response.text
    content_type = response.headers.get("Content-Type", "") or ""
    if content_type.startswith("application/json"):
        try:
            payload = json.loads(body)
        except ValueError as exc:
            return JiraError(
                f"{http_error}: could not parse JSON: {exc}", response=response
            )
        if not isinstance(payload, dict):
            return JiraError(
                f"{http_error}: could not parse JSON: expected an object",
                response=response,
            )
        messages = [str(m) for m in payload.get("errorMessages") or []]
        errors = {str(k): str(v) for k, v in (payload.get("errors") or {}).items()}
        return JiraError(http_error, messages, errors, response)

    status = _status_line(response)
    if http_error is None:
        return JiraError(f"got response status {status}:{body}", response=response)
    return JiraError(f"{status}: {body}: {http_error}", response=response)