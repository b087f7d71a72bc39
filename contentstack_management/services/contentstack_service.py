# Interface for logical service requests.

import abc
from typing import Dict, Optional, Union

import httpx

from contentstack_management.core.response import ContentstackResponse
from contentstack_management.options import ContentstackClientOptions

HttpClientLike = Union[httpx.Client, httpx.AsyncClient]

AUTHTOKEN_HEADER = "authtoken"


class ContentstackService(abc.ABC):
    """A logical request against the Content Management API.

    A service only describes the HTTP message to send. The runtime pipeline
    turns that description into a network exchange and never inspects
    domain semantics.

    Attributes:
        http_method (str): The HTTP method.
        resource_path (str): Path relative to the API root, e.g. "user-session".
        headers (Dict[str, str]): Service specific headers.
        query_params (Dict[str, str]): Query string parameters.
        content (Optional[bytes]): Encoded request body.
        use_authtoken (bool): Whether the client's authtoken is attached.
    """

    def __init__(
        self,
        http_method: str = "GET",
        resource_path: str = "",
        headers: Optional[Dict[str, str]] = None,
        query_params: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
        use_authtoken: bool = True,
    ):
        self.http_method = http_method.upper()
        self.resource_path = resource_path
        self.headers: Dict[str, str] = dict(headers or {})
        self.query_params: Dict[str, str] = dict(query_params or {})
        self.content = content
        self.use_authtoken = use_authtoken

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def build_request(self, http_client: HttpClientLike, options: ContentstackClientOptions) -> httpx.Request:
        """Produces the HTTP message for this service.

        Args:
            http_client: The client whose default headers and timeout apply.
            options: The configuration of the calling client.

        Returns:
            The request to send.
        """
        url = httpx.URL(options.base_url).join(self.resource_path.lstrip("/"))
        return http_client.build_request(
            self.http_method,
            url,
            params=self.query_params or None,
            headers=self.headers,
            content=self.content,
        )

    def on_response(self, response: ContentstackResponse, options: ContentstackClientOptions) -> None:
        """Hook called with every successful response to this service."""
        return None

    def __repr__(self) -> str:
        return f"<{self.name} {self.http_method} {self.resource_path}>"
