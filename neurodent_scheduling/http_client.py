"""HTTP client for the clinic backend.

Pattern: requests.Session with connection pooling, tenacity retry for
idempotent reads, and a circuit breaker in front of every call.

Error mapping (applies to every collaborator API):
- 401 -> AuthRequired
- connection errors, timeouts, 429 and 5xx -> TransientFailure
- any other status is returned to the caller with its decoded body

Bookings, reschedules and payments are never retried here: a duplicate
POST could double-book or double-charge.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.util.retry import Retry

from neurodent_scheduling import config
from neurodent_scheduling.circuit_breaker import CircuitBreaker
from neurodent_scheduling.errors import AuthRequired, TransientFailure
from neurodent_scheduling.logging_config import get_logger

logger = get_logger(__name__)

# tenacity's before_sleep_log wants a stdlib logger
_retry_logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    """Supplies the bearer token for the current user, if any."""

    def get_token(self) -> Optional[str]:
        ...


@dataclass
class StaticCredentials:
    """Fixed token (or none) - for scripts and tests."""
    token: Optional[str] = None

    def get_token(self) -> Optional[str]:
        return self.token


@dataclass
class ApiResponse:
    """Decoded backend response."""
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def success(self) -> bool:
        """Backend envelope flag; missing flag on a 2xx counts as success."""
        return self.ok and bool(self.data.get("success", True))

    @property
    def message(self) -> Optional[str]:
        return self.data.get("message") or self.data.get("error")


def create_http_session(
    max_retries: int = 2,
    backoff_factor: float = 1.0,
    timeout: int = 15
) -> requests.Session:
    """
    Create HTTP session with retry and connection pooling.

    Args:
        max_retries: Retry attempts for GET requests (default: 2)
        backoff_factor: Backoff multiplier; delays are 1s, 2s, 4s... at 1.0
        timeout: Default request timeout in seconds (default: 15)

    Returns:
        Configured requests.Session whose get() retries transient failures
    """
    session = requests.Session()

    # urllib3 handles status-level retries for reads only
    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )

    adapter = HTTPAdapter(
        max_retries=retry_strategy,
        pool_connections=10,
        pool_maxsize=10,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    original_get = session.get

    @retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=backoff_factor, min=backoff_factor, max=8),
        retry=retry_if_exception_type((
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
        )),
        before_sleep=before_sleep_log(_retry_logger, logging.WARNING),
        reraise=True
    )
    def get_with_retry(*args, **kwargs):
        kwargs.setdefault('timeout', timeout)
        return original_get(*args, **kwargs)

    session.get = get_with_retry

    return session


class ApiClient:
    """Thin JSON client for the clinic REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        credentials: Optional[CredentialProvider] = None,
        session: Optional[requests.Session] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        timeout: Optional[int] = None
    ):
        """
        Args:
            base_url: API root (default: API_BASE_URL)
            credentials: Token source; requests go out unauthenticated without one
            session: Preconfigured session (default: create_http_session())
            circuit_breaker: Shared breaker (default: one per client)
            timeout: Per-request timeout in seconds (default: API_TIMEOUT_SECONDS)
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.credentials = credentials or StaticCredentials()
        self.timeout = timeout or config.API_TIMEOUT_SECONDS
        self.session = session or create_http_session(
            max_retries=config.API_MAX_RETRIES,
            timeout=self.timeout
        )
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=config.CIRCUIT_FAILURE_THRESHOLD,
            timeout=config.CIRCUIT_RESET_SECONDS
        )

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self._request("POST", path, json=json)

    def patch(self, path: str, json: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self._request("PATCH", path, json=json)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.credentials.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> ApiResponse:
        """
        Make API call with circuit breaker protection.

        Raises:
            AuthRequired: On 401
            TransientFailure: On network failure, timeout, 429/5xx or open circuit
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        def make_request() -> ApiResponse:
            send = {
                "GET": self.session.get,
                "POST": self.session.post,
                "PATCH": self.session.patch,
            }.get(method)
            if send is None:
                raise ValueError(f"Unsupported HTTP method: {method}")

            try:
                response = send(url, headers=self._headers(), timeout=self.timeout, **kwargs)
            except requests.exceptions.Timeout as e:
                logger.warning("api_timeout", method=method, url=url)
                raise TransientFailure("Request to booking system timed out", cause=e)
            except requests.exceptions.RequestException as e:
                logger.warning("api_unreachable", method=method, url=url, error=str(e))
                raise TransientFailure("Could not connect to booking system", cause=e)

            return self._classify(method, url, response)

        return self.circuit_breaker.call(make_request)

    @staticmethod
    def _classify(method: str, url: str, response: requests.Response) -> ApiResponse:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"data": data}

        result = ApiResponse(status_code=response.status_code, data=data)

        if response.status_code == 401:
            logger.info("api_unauthenticated", method=method, url=url)
            raise AuthRequired(result.message or "Please log in to continue")

        if response.status_code == 429 or response.status_code >= 500:
            logger.warning("api_server_error", method=method, url=url, status=response.status_code)
            raise TransientFailure(
                result.message or "Booking system error. Please try again.",
                status_code=response.status_code
            )

        return result
