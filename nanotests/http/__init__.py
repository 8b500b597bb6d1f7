"""
HTTP client for server tests.

Usage:
    from nanotests.http import HttpClient, HttpRequest

    async with HttpClient("http://localhost:8080") as client:
        request = HttpRequest.get("/search?q=hello")
        request.set_user_agent("nanotests")
        response = await client.execute(request)
        print(response.status, response.last_header("Content-Type"))
"""

from ..exceptions import HttpClientError
from .client import DEFAULT_HOST_URL, HttpClient, normalize_resource
from .models import HttpRequest, HttpResponse

__all__ = [
    "DEFAULT_HOST_URL",
    "HttpClient",
    "HttpClientError",
    "HttpRequest",
    "HttpResponse",
    "normalize_resource",
]
