"""
V3 request signer

This module provides the signer that turns a request description into the set
of signature headers the gateway expects. The same signer is used for the
authentication call and for business calls.
"""

import logging
from typing import Mapping, Optional

from ..exceptions import ConfigurationError
from .engine import build_canonical_string, process_body, sign
from .types import (
    ACCESS_ID_HEADER,
    NONCE_HEADER,
    SIGN_VERSION,
    SIGN_VERSION_HEADER,
    SIGNATURE_HEADER,
    SIGNATURE_HEADERS_HEADER,
    TIMESTAMP_HEADER,
    NonceGenerator,
    SignatureResult,
    SigningContext,
    TimestampGenerator,
)
from .utils import (
    build_query_string,
    generate_nonce,
    generate_timestamp,
    normalize_path,
    validate_nonce,
    validate_timestamp,
)

logger = logging.getLogger(__name__)


class RequestSigner:
    """
    Signer for one access identity

    Every call to :meth:`sign` draws a fresh nonce and timestamp unless they
    are passed explicitly.
    """

    def __init__(
        self,
        access_id: str,
        secret_key: str,
        nonce_generator: Optional[NonceGenerator] = None,
        timestamp_generator: Optional[TimestampGenerator] = None
    ):
        """
        Initialize the signer.

        Args:
            access_id: Public identity of the calling application
            secret_key: Secret used only as input to the digest
            nonce_generator: Optional custom nonce generator
            timestamp_generator: Optional custom millisecond timestamp generator

        Raises:
            ConfigurationError: If identity or secret is empty
        """
        if not access_id:
            raise ConfigurationError("access_id cannot be empty")
        if not secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        self.access_id = access_id
        self._secret_key = secret_key
        self.nonce_generator = nonce_generator or generate_nonce
        self.timestamp_generator = timestamp_generator or generate_timestamp

    def headers_to_sign(self, nonce: str, timestamp: str) -> dict:
        """Return the signed headers, sorted by name."""
        headers = {
            TIMESTAMP_HEADER: timestamp,
            ACCESS_ID_HEADER: self.access_id,
            NONCE_HEADER: nonce,
            SIGN_VERSION_HEADER: SIGN_VERSION,
        }
        return dict(sorted(headers.items()))

    def build_context(
        self,
        method: str,
        path: str,
        body: Optional[str] = None,
        query_params: Optional[Mapping[str, Optional[str]]] = None,
        nonce: Optional[str] = None,
        timestamp: Optional[str] = None
    ) -> SigningContext:
        """
        Build the signing context for a request.

        Args:
            method: HTTP method
            path: Request path relative to the base URI
            body: Request body text
            query_params: Query parameters
            nonce: Fixed nonce (generated if not provided)
            timestamp: Fixed millisecond timestamp (generated if not provided)

        Returns:
            SigningContext: Context ready for canonicalization

        Raises:
            ValueError: If the nonce or timestamp is malformed, or the method
                is not a known HTTP method
        """
        if nonce is None:
            nonce = self.nonce_generator()
        if timestamp is None:
            timestamp = self.timestamp_generator()

        if not validate_nonce(nonce):
            raise ValueError(f"Invalid nonce, expected 6 decimal digits: {nonce!r}")
        if not validate_timestamp(timestamp):
            raise ValueError(f"Invalid timestamp, expected epoch milliseconds: {timestamp!r}")

        return SigningContext(
            method=method,
            path=normalize_path(path),
            sorted_headers=self.headers_to_sign(nonce, timestamp),
            query_string=build_query_string(query_params),
            body_digest=process_body(body),
            secret=self._secret_key,
        )

    def sign(
        self,
        method: str,
        path: str,
        body: Optional[str] = None,
        query_params: Optional[Mapping[str, Optional[str]]] = None,
        nonce: Optional[str] = None,
        timestamp: Optional[str] = None
    ) -> SignatureResult:
        """
        Sign a request.

        Args:
            method: HTTP method
            path: Request path relative to the base URI
            body: Request body text
            query_params: Query parameters
            nonce: Fixed nonce (generated if not provided)
            timestamp: Fixed millisecond timestamp (generated if not provided)

        Returns:
            SignatureResult: Headers to attach plus signing metadata
        """
        context = self.build_context(method, path, body, query_params, nonce, timestamp)

        canonical_string = build_canonical_string(context)
        signature = sign(canonical_string)

        signed_names = list(context.sorted_headers.keys())
        headers = dict(context.sorted_headers)
        headers[SIGNATURE_HEADERS_HEADER] = ",".join(signed_names)
        headers[SIGNATURE_HEADER] = signature

        logger.debug(f"Signed {context.method} {context.path} with headers: {headers[SIGNATURE_HEADERS_HEADER]}")

        return SignatureResult(
            headers=headers,
            signature=signature,
            canonical_string=canonical_string,
            signed_header_names=signed_names,
            nonce=context.sorted_headers[NONCE_HEADER],
            timestamp=context.sorted_headers[TIMESTAMP_HEADER],
            query_string=context.query_string,
            body_digest=context.body_digest,
        )

    def __repr__(self) -> str:
        return f"RequestSigner(access_id={self.access_id!r})"


def create_signer(access_id: str, secret_key: str) -> RequestSigner:
    """
    Create a new request signer.

    Args:
        access_id: Access identity
        secret_key: Secret key

    Returns:
        RequestSigner: Configured signer instance
    """
    return RequestSigner(access_id, secret_key)
