"""Constants shared by the alert ticket module."""

from __future__ import annotations


class AlertTicketConstant:
    ALERT_NAME_LABEL = "alertname"

    LEGACY_LABEL_PREFIX = "ALERT"
    HASHED_LABEL_PREFIX = "JIRALERT"

    STATUS_CATEGORY_DONE = "done"

    SEARCH_MAX_RESULTS = 2
    SEARCH_FIELDS = (
        "summary",
        "description",
        "labels",
        "status",
        "resolution",
        "resolutiondate",
    )

    TEMPLATE_MARKERS = ("{{", "{%", "{#")


class JiraApi:
    SEARCH = "/rest/api/2/search"
    ISSUE = "/rest/api/2/issue"
    ISSUE_KEY = "/rest/api/2/issue/{key}"
    TRANSITIONS = "/rest/api/2/issue/{key}/transitions"

    # internal error and service unavailable; other statuses are not retried
    TRANSIENT_STATUS_CODES = (500, 503)
