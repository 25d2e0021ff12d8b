import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from fastapi import Request

RESPONSE_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json",
}


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


@dataclass
class InboundRequest:
    """Request as seen by the proxy: path and a flat query mapping."""
    path: str
    query: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"

    @classmethod
    def from_request(cls, request: Request) -> "InboundRequest":
        # dict() over the multidict keeps the last value of a repeated name
        return cls(
            # decoded path; request.url.path would cut it at a decoded "?"
            path=request.scope["path"],
            query=dict(request.query_params),
            method=request.method,
        )

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "InboundRequest":
        """
        Build from a serverless event, e.g.
        {"path": "/.netlify/functions/tmdb-proxy/movie/550",
         "queryStringParameters": {"language": "en-US"},
         "httpMethod": "GET"}
        """
        return cls(
            path=event.get("path") or "",
            query=dict(event.get("queryStringParameters") or {}),
            method=event.get("httpMethod") or "GET",
        )


@dataclass
class ProxyResult:
    """Outcome of one forwarding step"""
    ok: bool
    status_code: int = 200
    payload: Any = None
    kind: Optional[ErrorKind] = None
    error: str = ""
    details: Optional[str] = None

    @classmethod
    def success(cls, payload: Any) -> "ProxyResult":
        return cls(ok=True, status_code=200, payload=payload)

    @classmethod
    def failure(cls, kind: ErrorKind, status_code: int, error: str,
                details: Optional[str] = None) -> "ProxyResult":
        return cls(ok=False, status_code=status_code, kind=kind, error=error, details=details)

    def body(self) -> Any:
        if self.ok:
            return self.payload
        content = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        return content


@dataclass
class OutboundResponse:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(RESPONSE_HEADERS))

    @classmethod
    def from_content(cls, status_code: int, content: Any) -> "OutboundResponse":
        return cls(
            status_code=status_code,
            body=json.dumps(content, ensure_ascii=False, separators=(",", ":")),
        )

    def to_event(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }
