"""
Validator - CountriesDB validation client.

Checks ISO 3166-1 country codes and ISO 3166-2 subdivision codes against
the CountriesDB API:
1. Local shape checks (a country code is exactly two characters)
2. Normalization (country codes are uppercased before transmission)
3. One POST per call, authenticated with the private key as a bearer token

Single-code operations never raise on transport problems; the failure is
folded into a failing outcome. Batch operations raise ValidationFailure
so callers can tell a failed call apart from failed items.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError as SchemaError

from countriesdb_validator.config import DEFAULT_API_URL
from countriesdb_validator.exceptions import (
    InvalidConfiguration,
    RequestError,
    ValidationFailure,
)
from countriesdb_validator.models import (
    INVALID_COUNTRY_MESSAGE,
    BatchEnvelope,
    CodeOutcome,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)

COUNTRY_PATH = "/api/validate/country"
SUBDIVISION_PATH = "/api/validate/subdivision"


def normalize_country(code: str | None) -> str | None:
    """Return the uppercased country code, or None if it cannot be sent."""
    if not isinstance(code, str):
        return None
    code = code.strip()
    if len(code) != 2:
        return None
    return code.upper()


class Validator:
    """
    Client for the CountriesDB validation endpoints.

    The private key and endpoint are fixed at construction. Instances hold
    no other state and can be shared between threads.
    """

    def __init__(
        self,
        api_key: str,
        backend_url: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        if not isinstance(api_key, str) or not api_key.strip():
            raise InvalidConfiguration("API key is required")

        self._api_key = api_key
        self._base_url = (backend_url or DEFAULT_API_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"Validator(base_url={self._base_url!r})"

    def __enter__(self) -> "Validator":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this validator created it."""
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------
    # Countries
    # ------------------------------------------------------------------

    def validate_country(self, code: str | None, follow_upward: bool = False) -> ValidationOutcome:
        """
        Validate a single country code.

        Args:
            code: ISO 3166-1 alpha-2 country code, any case
            follow_upward: Accept a superseded code that still resolves to a
                current country

        Returns:
            ValidationOutcome; transport failures become a failing outcome
        """
        country = normalize_country(code)
        if country is None:
            return ValidationOutcome.rejected(INVALID_COUNTRY_MESSAGE)

        payload = {"code": country, "follow_upward": follow_upward}
        try:
            return self._single(COUNTRY_PATH, payload)
        except RequestError as e:
            logger.warning(f"Country validation for {country} failed: {e}")
            return ValidationOutcome.rejected(str(e))

    def validate_countries(self, codes: Sequence[str]) -> list[CodeOutcome]:
        """
        Validate several country codes in one request.

        Results come back in input order, one per code. Codes are not
        deduplicated or checked locally.

        Raises:
            ValidationFailure: the request failed or the response was unusable
        """
        if not codes:
            return []

        payload = {"code": [code.upper() for code in codes]}
        return self._batch("validate_countries", COUNTRY_PATH, payload, len(codes))

    # ------------------------------------------------------------------
    # Subdivisions
    # ------------------------------------------------------------------

    def validate_subdivision(
        self,
        code: str | None,
        country: str | None,
        follow_related: bool = False,
        allow_parent_selection: bool = False,
    ) -> ValidationOutcome:
        """
        Validate a subdivision code within a country.

        Args:
            code: Subdivision code (e.g. 'US-CA'), or None for "no subdivision
                selected"; sent verbatim, as an empty string when None
            country: ISO 3166-1 alpha-2 country code the subdivision belongs to
            follow_related: Accept a subdivision whose country was redirected
                or merged into another
            allow_parent_selection: Accept a parent-level subdivision where a
                more specific one is expected

        Returns:
            ValidationOutcome; transport failures become a failing outcome
        """
        normalized = normalize_country(country)
        if normalized is None:
            return ValidationOutcome.rejected(INVALID_COUNTRY_MESSAGE)

        payload = {
            "code": code if code is not None else "",
            "country": normalized,
            "follow_related": follow_related,
            "allow_parent_selection": allow_parent_selection,
        }
        try:
            return self._single(SUBDIVISION_PATH, payload)
        except RequestError as e:
            logger.warning(f"Subdivision validation for {normalized} failed: {e}")
            return ValidationOutcome.rejected(str(e))

    def validate_subdivisions(
        self,
        codes: Sequence[str | None],
        country: str,
        allow_parent_selection: bool = False,
    ) -> list[CodeOutcome]:
        """
        Validate several subdivision codes of one country in one request.

        None entries keep their position and are sent as empty strings.

        Raises:
            ValidationFailure: the request failed or the response was unusable
        """
        if not codes:
            return []

        payload = {
            "code": [code if code is not None else "" for code in codes],
            "country": country.strip().upper(),
            "allow_parent_selection": allow_parent_selection,
        }
        return self._batch("validate_subdivisions", SUBDIVISION_PATH, payload, len(codes))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _single(self, path: str, payload: dict[str, Any]) -> ValidationOutcome:
        data = self._request(path, payload)
        try:
            return ValidationOutcome.model_validate(data)
        except SchemaError as e:
            raise RequestError(f"Malformed response from {path}: {e.error_count()} error(s)") from e

    def _batch(
        self, operation: str, path: str, payload: dict[str, Any], expected: int
    ) -> list[CodeOutcome]:
        """Send a batch request and check the envelope covers every code."""
        try:
            data = self._request(path, payload)
            try:
                envelope = BatchEnvelope.model_validate(data)
            except SchemaError as e:
                raise RequestError(
                    f"Malformed response from {path}: {e.error_count()} error(s)"
                ) from e

            if len(envelope.results) != expected:
                raise RequestError(
                    f"Expected {expected} results from {path}, got {len(envelope.results)}"
                )
        except RequestError as e:
            raise ValidationFailure(str(e), operation, status_code=e.status_code) from e

        return envelope.results

    def _request(self, path: str, payload: dict[str, Any]) -> Any:
        """
        POST a payload to the API and return the decoded JSON body.

        Raises:
            RequestError: on network failure, non-2xx status or a non-JSON body
        """
        url = f"{self._base_url}{path}"
        codes = payload["code"]
        logger.debug(
            f"POST {path} ({len(codes) if isinstance(codes, list) else 1} code(s))"
        )

        try:
            response = self._client.post(
                url,
                headers=self._get_headers(),
                json=payload,
            )
        except httpx.HTTPError as e:
            raise RequestError(f"Cannot reach CountriesDB API: {e}") from e

        if not response.is_success:
            raise RequestError(self._error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                f"Invalid JSON in response from {path}", status_code=response.status_code
            ) from e

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with auth."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Prefer the server's error message over a generic one."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
            return data["message"]
        return f"HTTP error {response.status_code}"
