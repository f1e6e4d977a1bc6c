"""Test helper functions."""

import json
from contextlib import contextmanager
from io import BytesIO
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, Mock, patch


@contextmanager
def patched_supabase(module: str, client: MagicMock):
    """Patch ``<module>.SupabaseClient`` so ``async with`` yields ``client``."""
    with patch(f"{module}.SupabaseClient") as mock_client_class:
        mock_client_class.return_value.__aenter__.return_value = client
        mock_client_class.return_value.__aexit__.return_value = None
        yield mock_client_class


def change_payload(event_type: str, record: Optional[dict] = None, old_record: Optional[dict] = None) -> Dict[str, Any]:
    """Realtime postgres_changes payload as delivered by the Supabase SDK."""
    return {
        "data": {
            "type": event_type,
            "schema": "public",
            "table": "listings",
            "record": record,
            "old_record": old_record,
            "commit_timestamp": "2024-12-09T12:00:00Z",
        },
        "ids": [1],
    }


def build_request(
    method: str = "GET",
    path: str = "/",
    body: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    """Raw HTTP/1.1 request bytes for driving a BaseHTTPRequestHandler."""
    payload = json.dumps(body).encode("utf-8") if body is not None else b""
    header_lines = dict(headers or {})
    if payload:
        header_lines.setdefault("Content-Type", "application/json")
        header_lines["Content-Length"] = str(len(payload))
    head = f"{method} {path} HTTP/1.1\r\n" + "".join(f"{k}: {v}\r\n" for k, v in header_lines.items())
    return head.encode("utf-8") + b"\r\n" + payload


class MockSocket:
    """Socket stand-in whose reads replay ``raw`` and whose writes are dropped."""

    def __init__(self, raw: bytes):
        self.raw = raw

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw)

    def sendall(self, data):
        pass

    def close(self):
        pass


def run_handler(handler_class, raw: bytes, method: str):
    """Parse ``raw`` into a handler and call ``do_<method>`` once with mocked output.

    Returns the handler; ``handler.wfile`` holds the body written by the call.
    """
    with patch.object(handler_class, "handle"):
        h = handler_class(MockSocket(raw), ("127.0.0.1", 8000), None)
    h.rfile = BytesIO(raw)
    h.raw_requestline = h.rfile.readline()
    assert h.parse_request()
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    getattr(h, f"do_{method}")()
    return h


def response_status(h) -> int:
    return h.send_response.call_args[0][0]


def response_body(h) -> bytes:
    h.wfile.seek(0)
    return h.wfile.read()
