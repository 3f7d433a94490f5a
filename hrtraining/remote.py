"""
Remote mirror: a user-configured spreadsheet webhook.

Protocol:
    GET  <url>  -> JSON array of course objects
    POST <url>  <- JSON array of the full collection (application/json)

The endpoint is outside our control, so nothing here raises. Every call
returns a RemoteResult and the caller decides what a failure means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from hrtraining.model import Course, decode_collection, encode_collection

logger = logging.getLogger(__name__)


@dataclass
class RemoteResult:
    ok: bool
    courses: Optional[List[Course]] = None
    reason: str = ""

    @classmethod
    def success(cls, courses: Optional[List[Course]] = None) -> "RemoteResult":
        return cls(ok=True, courses=courses)

    @classmethod
    def failure(cls, reason: str) -> "RemoteResult":
        return cls(ok=False, reason=reason)


class RemoteMirror:
    def __init__(self, url: str, timeout: float = 30) -> None:
        self.url = url
        self.timeout = timeout

    def fetch(self) -> RemoteResult:
        """
        Read the remote collection.

        Anything other than a 2xx response carrying a JSON array of valid
        course objects is a failure.
        """
        try:
            resp = requests.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            return RemoteResult.failure(f"GET {self.url} failed: {exc}")

        try:
            payload = resp.json()
        except ValueError as exc:
            return RemoteResult.failure(f"GET {self.url} returned invalid JSON: {exc}")

        try:
            courses = decode_collection(payload)
        except ValueError as exc:
            return RemoteResult.failure(f"GET {self.url} returned no course list: {exc}")

        logger.debug("Fetched %d courses from %s", len(courses), self.url)
        return RemoteResult.success(courses)

    def push(self, courses: List[Course]) -> RemoteResult:
        """
        Send the full collection to the endpoint.

        Fire-and-forget: the response body is never read, only transport
        errors and the status code are reported.
        """
        try:
            resp = requests.post(
                self.url,
                json=encode_collection(courses),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            return RemoteResult.failure(f"POST {self.url} failed: {exc}")

        logger.debug("Pushed %d courses to %s", len(courses), self.url)
        return RemoteResult.success()
