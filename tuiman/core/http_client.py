"""HTTP transport built on requests."""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import quote

import requests

from tuiman.core.models.request import AuthLocation, AuthType, Request
from tuiman.security.key_store import KeyStore
from tuiman.utils.errors import KeyStoreError, TransportInitError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_KEY_NAME = "X-API-Key"
USER_AGENT = "tuiman/0.1"


@dataclass(frozen=True)
class HttpResponse:
    """Outcome of one send. ``error`` is empty on success.

    A non-2xx status is still a successful send.
    """

    status_code: int = 0
    duration_ms: int = 0
    body: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class PreparedCall:
    """Everything passed to ``requests`` for one send."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[bytes] = None
    auth: Optional[Tuple[str, str]] = None


def append_query_param(url: str, key: str, value: str) -> str:
    """Append ``key=value`` using ``?`` for the first parameter and ``&`` after."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{quote(key, safe='')}={quote(value, safe='')}"


class HttpTransport:
    """Sends one request at a time, resolving auth secrets at call time."""

    def __init__(
        self,
        keystore: Optional[KeyStore] = None,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        verify_tls: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.keystore = keystore
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_tls = verify_tls
        try:
            self.session = session or requests.Session()
        except Exception as e:
            raise TransportInitError(f"Failed to create HTTP session: {e}") from e
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _resolve_secret(self, reference: str) -> Optional[str]:
        """Look up a secret; any failure means the auth is left off."""
        if not reference or self.keystore is None:
            return None
        try:
            secret = self.keystore.retrieve(reference)
        except KeyStoreError as e:
            logger.debug(f"Secret lookup failed for reference {reference}: {e}")
            return None
        if not secret:
            logger.debug(f"No secret stored for reference {reference}")
            return None
        return secret

    def prepare(self, request: Request) -> PreparedCall:
        """Build the method, url, headers, body and auth for a request."""
        call = PreparedCall(method=(request.method or "GET").upper(), url=request.url)

        if request.header_key:
            call.headers[request.header_key] = request.header_value

        auth = request.auth
        if auth.type is not AuthType.NONE:
            secret = self._resolve_secret(auth.secret_ref)
            if secret is not None:
                if auth.type in (AuthType.BEARER, AuthType.JWT):
                    call.headers["Authorization"] = f"Bearer {secret}"
                elif auth.type is AuthType.API_KEY:
                    key_name = auth.key_name or DEFAULT_API_KEY_NAME
                    if auth.location is AuthLocation.QUERY:
                        call.url = append_query_param(call.url, key_name, secret)
                    else:
                        call.headers[key_name] = secret
                elif auth.type is AuthType.BASIC:
                    call.auth = (auth.username, secret)

        if request.body:
            call.data = request.body.encode("utf-8")

        return call

    def send(self, request: Request) -> HttpResponse:
        """Perform the call. Failures come back as ``error`` text.

        Besides network errors this covers values ``requests`` cannot put on
        the wire, such as header text outside latin-1 or a lone surrogate in
        the body.
        """
        method = (request.method or "GET").upper()
        logger.info(f"Sending {method} {request.url}")

        start = time.perf_counter()
        try:
            call = self.prepare(request)
            response = self.session.request(
                method=call.method,
                url=call.url,
                headers=call.headers or None,
                data=call.data,
                auth=call.auth,
                timeout=self.timeout,
                allow_redirects=self.follow_redirects,
                verify=self.verify_tls,
            )
            body = response.text
        except (requests.exceptions.RequestException, UnicodeError, ValueError) as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.warning(f"{method} {request.url} failed after {duration_ms}ms: {e}")
            return HttpResponse(duration_ms=duration_ms, error=str(e) or type(e).__name__)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"{method} {request.url} -> {response.status_code} in {duration_ms}ms")
        return HttpResponse(
            status_code=response.status_code,
            duration_ms=duration_ms,
            body=body,
        )

    def close(self) -> None:
        self.session.close()
