"""Client library for the Jira REST API: authentication, boards, filters, fields, groups, issue link types and issue models."""

__version__ = "0.1.0"

__all__ = [
    "board",
    "client",
    "errors",
    "fields",
    "filters",
    "group",
    "issuelinktype",
    "models",
]