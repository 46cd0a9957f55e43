"""
Request descriptor for a logical fetch.

The same FetchRequest is handed to the transport on every attempt, so
headers and body never change between retries.
"""

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


class FetchRequest(BaseModel):
    """
    Transport-agnostic description of one HTTP request.
    """
    model_config = ConfigDict(frozen=True)
    
    url: str = Field(..., description="Absolute target URL")
    method: str = Field(default="GET", description="HTTP method")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    params: Dict[str, Any] = Field(default_factory=dict, description="Query string parameters")
    json_body: Optional[Any] = Field(default=None, description="JSON-serializable body")
    content: Optional[bytes] = Field(default=None, description="Raw body bytes")
    timeout: Optional[float] = Field(default=None, gt=0, description="Per-attempt timeout override in seconds")

    def to_httpx_request(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build an httpx.Request bound to the given client's defaults."""
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return client.build_request(
            self.method.upper(),
            self.url,
            headers=self.headers or None,
            params=self.params or None,
            json=self.json_body,
            content=self.content,
            **kwargs,
        )
