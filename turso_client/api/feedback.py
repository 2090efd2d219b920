"""
Feedback API.
"""

from ._http import HTTPClient
from ._classify import Operation


class FeedbackAPI:
    """API for product feedback."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def submit(self, summary: str, feedback: str) -> None:
        """Send product feedback."""
        self._http.call(
            "POST",
            "/v1/feedback",
            Operation("post feedback"),
            json_data={"summary": summary, "feedback": feedback},
        )
