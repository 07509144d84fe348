"""
CoinFlex request signer.

Builds the URL, method, headers and body for a CoinFlex REST call.

Authentication:
    Private endpoints use HTTP Basic authentication with a static credential
    string; there is no HMAC, nonce or timestamp:

        Authorization: Basic base64("<uid>/<api_key>:<private_key>")

URL Construction:
    <base_url>/<path with {placeholders} filled from params>
    Remaining params become the query string on GET requests.
"""

import base64
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import structlog
from pydantic import BaseModel, Field

from marketfeed.config.models import ApiAccess, Credentials, ExchangeConfig
from marketfeed.exceptions import MissingCredentialsError
from marketfeed.runtime.params import extract_params, implode_params, omit

logger = structlog.get_logger(__name__)


class SignedRequest(BaseModel):
    """A request ready to hand to the transport."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(..., min_length=1)
    method: str = Field(default="GET")
    body: Optional[Any] = None
    headers: Optional[Dict[str, str]] = None


def basic_auth_value(credentials: Credentials) -> str:
    """
    Return the Authorization header value for complete credentials.

    Raises:
        MissingCredentialsError: If any credential field is empty.

    Example:
        >>> basic_auth_value(Credentials(uid="U", api_key="K", private_key="P"))
        'Basic VS9LOlA='
    """
    missing = credentials.missing()
    if missing:
        raise MissingCredentialsError(missing)
    sid = f"{credentials.uid}/{credentials.api_key}:{credentials.private_key}"
    return "Basic " + base64.b64encode(sid.encode("utf-8")).decode("ascii")


class CoinFlexSigner:
    """
    Signs CoinFlex REST requests.

    Example:
        >>> signer = CoinFlexSigner(ExchangeConfig(), Credentials())
        >>> signer.sign("tickers/{base}:{counter}", params={"base": 1, "counter": 2}).url
        'https://webapi.coinflex.com/tickers/1:2'
    """

    def __init__(self, exchange_config: ExchangeConfig, credentials: Optional[Credentials] = None):
        """
        Initialize signer.

        Args:
            exchange_config: Supplies the public and private base URLs.
            credentials: Credentials for private endpoints; read only.
        """
        self._config = exchange_config
        self._credentials = credentials or Credentials()

    def sign(
        self,
        path: str,
        api: ApiAccess | str = ApiAccess.PUBLIC,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
    ) -> SignedRequest:
        """
        Build a request for an endpoint.

        Args:
            path: Endpoint path, e.g. ``"depth/{base}:{counter}"``.
            api: "public" or "private".
            method: HTTP method.
            params: Placeholder values and query parameters.
            headers: Headers for public requests. Private requests replace
                them with the Authorization header.
            body: Body for non-GET requests, passed through unmodified.

        Returns:
            SignedRequest: url, method, body and headers.

        Raises:
            MissingCredentialsError: For private requests with incomplete
                credentials. Raised before anything is sent.
        """
        access = ApiAccess(api)
        params = params or {}
        url = self._config.get_api_url(access) + "/" + implode_params(path, params)

        query = omit(params, extract_params(path))
        if method.upper() == "GET" and query:
            url += "?" + urlencode(query)

        if access is ApiAccess.PRIVATE:
            try:
                headers = {"Authorization": basic_auth_value(self._credentials)}
            except MissingCredentialsError as e:
                logger.error(
                    "private_request_missing_credentials",
                    exchange=self._config.id,
                    path=path,
                    missing=e.missing,
                )
                raise

        return SignedRequest(url=url, method=method, body=body, headers=headers)
