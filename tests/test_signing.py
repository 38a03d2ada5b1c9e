"""
Test suite for V3 request signing

This module tests the canonical string construction, the body digest, the
digest signature and the per-identity request signer.
"""

import pytest

from gateway_sdk.exceptions import ConfigurationError
from gateway_sdk.signing import (
    # Engine
    build_header_block,
    process_body,
    join,
    sign,
    build_canonical_string,
    # Signer
    RequestSigner,
    create_signer,
    SigningContext,
    HttpMethod,
    # Utilities
    generate_nonce,
    generate_timestamp,
    validate_nonce,
    validate_timestamp,
    build_query_string,
    normalize_path,
    mask_secret,
    # Constants
    SIGNATURE_HEADER,
    SIGNATURE_HEADERS_HEADER,
    ACCESS_TOKEN_HEADER,
)

from conftest import ACCESS_ID, SECRET_KEY, FIXED_NONCE, FIXED_TIMESTAMP


class TestHeaderBlock:
    """Test canonical header block construction"""

    def test_two_headers(self):
        """Test headers joined with newlines and no trailing newline"""
        assert build_header_block({"a": "1", "b": "2"}) == "a:1\nb:2"

    def test_empty_headers(self):
        """Test empty mapping yields empty string"""
        assert build_header_block({}) == ""

    def test_none_value_renders_empty(self):
        """Test missing value renders as empty"""
        assert build_header_block({"a": None, "b": "2"}) == "a:\nb:2"

    def test_order_is_preserved(self):
        """Test the block follows the given order; sorting is the caller's job"""
        assert build_header_block({"b": "2", "a": "1"}) == "b:2\na:1"


class TestProcessBody:
    """Test body digest processing"""

    def test_empty_body(self):
        """Test empty and missing bodies produce empty digest"""
        assert process_body("") == ""
        assert process_body(None) == ""

    def test_reference_vector(self):
        """Test base64 of the hex digest, not of the raw digest"""
        assert process_body("abc") == "OTAwMTUwOTgzY2QyNGZiMGQ2OTYzZjdkMjhlMTdmNzI="

    def test_json_body_vector(self):
        """Test digest of a JSON body"""
        assert process_body('{"a":1}') == "YmI2Y2I1YzY4ZGY0NjUyOTQxY2FmNjUyYTM2NmYyZDg="

    def test_deterministic(self):
        """Test same input always yields the same digest"""
        body = '{"name": "数据", "page": 1}'
        assert process_body(body) == process_body(body)
        assert process_body(body) != process_body(body + " ")


class TestJoin:
    """Test canonical string assembly"""

    def test_all_parts(self):
        """Test method upper-casing and field order"""
        assert join("post", "/x", "q", "h", "b", "s") == "POST\n/x\nq\nh\nb\ns"

    def test_empty_parts_are_skipped(self):
        """Test empty query and body are dropped from the middle line"""
        assert join("GET", "/auth", "", "h", "", "s") == "GET\n/auth\nh\ns"

    def test_all_middle_parts_empty(self):
        """Test the middle line is still emitted when empty"""
        assert join("GET", "/auth", "", "", "", "s") == "GET\n/auth\n\ns"

    def test_query_and_body_without_headers(self):
        """Test fixed order query, headers, body"""
        assert join("put", "/p", "a=1", "", "digest", "k") == "PUT\n/p\na=1\ndigest\nk"


class TestSign:
    """Test digest signature"""

    def test_reference_vector(self):
        """Test signature matches the precomputed MD5 hex"""
        assert sign("abc") == "900150983cd24fb0d6963f7d28e17f72"

    def test_lowercase_fixed_length(self):
        """Test signature is lowercase hex of fixed length"""
        signature = sign("POST\n/x\nq\nh\nb\ns")
        assert signature == "31c5497de556a00eb5d151b883a9ee9b"
        assert len(signature) == 32
        assert signature == signature.lower()

    def test_unicode_input(self):
        """Test UTF-8 encoding of non-ASCII input"""
        assert sign("中文") == "a7bac2239fcdcb3a067903d8077c4a07"


class TestSigningContext:
    """Test signing context normalization"""

    def test_method_uppercased_and_headers_sorted(self):
        """Test context normalizes method and header order"""
        context = SigningContext(
            method="get",
            path="/auth",
            sorted_headers={"x-timestamp": "1", "x-access-id": "a"},
            secret="s",
        )
        assert context.method == "GET"
        assert list(context.sorted_headers) == ["x-access-id", "x-timestamp"]
        assert build_canonical_string(context) == "GET\n/auth\nx-access-id:a\nx-timestamp:1\ns"


class TestSigningUtilities:
    """Test utility functions"""

    def test_generate_nonce(self):
        """Test nonce is a 6-digit decimal string"""
        for _ in range(50):
            nonce = generate_nonce()
            assert validate_nonce(nonce)
            assert 100000 <= int(nonce) <= 999999

    def test_validate_nonce(self):
        """Test nonce validation"""
        assert validate_nonce("123456")
        assert not validate_nonce("12345")
        assert not validate_nonce("012345")
        assert not validate_nonce("abcdef")
        assert not validate_nonce(None)

    def test_generate_timestamp(self):
        """Test millisecond timestamp generation"""
        timestamp = generate_timestamp()
        assert validate_timestamp(timestamp)
        assert len(timestamp) == 13

    def test_validate_timestamp(self):
        """Test timestamp validation"""
        assert validate_timestamp(FIXED_TIMESTAMP)
        assert not validate_timestamp("1700000000")  # seconds, not milliseconds
        assert not validate_timestamp("-1")
        assert not validate_timestamp(1700000000000)

    def test_build_query_string(self):
        """Test sorting, empty value removal and no re-encoding"""
        params = {"tenant": "t1", "size": "10", "empty": "", "name": "a%20b", "none": None}
        assert build_query_string(params) == "name=a%20b&size=10&tenant=t1"
        assert build_query_string({}) == ""
        assert build_query_string(None) == ""

    def test_normalize_path(self):
        """Test leading slash normalization"""
        assert normalize_path("auth") == "/auth"
        assert normalize_path("/oapi/x") == "/oapi/x"
        assert normalize_path("//oapi/x") == "/oapi/x"

    def test_normalize_path_rejects_query(self):
        """Test an inline query string is refused rather than dropped"""
        with pytest.raises(ValueError, match="query_params"):
            normalize_path("oapi/x?a=1")

    def test_mask_secret(self):
        """Test secret masking keeps a short prefix"""
        assert mask_secret("abcdefgh") == "abcd****"
        assert mask_secret("abc") == "***"
        assert mask_secret("") == ""


class TestRequestSigner:
    """Test the request signer"""

    def test_requires_identity_and_secret(self):
        """Test construction fails fast on missing credentials"""
        with pytest.raises(ConfigurationError):
            RequestSigner("", SECRET_KEY)
        with pytest.raises(ConfigurationError):
            RequestSigner(ACCESS_ID, "")

    def test_auth_reference_vector(self, fixed_signer):
        """Test signature of the authentication request"""
        result = fixed_signer.sign("GET", "auth")

        assert result.canonical_string == (
            "GET\n/auth\n"
            "x-access-id:app-id\nx-nonce:123456\nx-sign-version:V3\nx-timestamp:1700000000000\n"
            "secret"
        )
        assert result.signature == "fb0711213702f01813c8e6fd615c883c"
        assert result.headers[SIGNATURE_HEADER] == result.signature

    def test_business_reference_vector(self, fixed_signer):
        """Test signature covering query string and body digest"""
        result = fixed_signer.sign(
            "post",
            "/oapi/users/paginate",
            body='{"page":1}',
            query_params={"tenant": "t1", "size": "10", "empty": ""},
        )

        assert result.query_string == "size=10&tenant=t1"
        assert result.body_digest == "ZGRhYjdhMGMyNzc2ODRkNGE3NDU4ZTUwYTMwMjZmODU="
        assert result.signature == "87504427b306647313a7ae0031d12d00"

    def test_signed_headers_sorted(self, fixed_signer):
        """Test the signed header list is sorted regardless of insertion order"""
        result = fixed_signer.sign("GET", "/x")

        assert result.headers[SIGNATURE_HEADERS_HEADER] == "x-access-id,x-nonce,x-sign-version,x-timestamp"
        assert result.signed_header_names == sorted(result.signed_header_names)
        assert result.headers["x-access-id"] == ACCESS_ID
        assert result.headers["x-nonce"] == FIXED_NONCE
        assert result.headers["x-sign-version"] == "V3"
        assert result.headers["x-timestamp"] == FIXED_TIMESTAMP

    def test_no_token_header(self, fixed_signer):
        """Test the signer never adds the token header"""
        result = fixed_signer.sign("GET", "auth")
        assert ACCESS_TOKEN_HEADER not in result.headers

    def test_secret_not_in_headers(self, fixed_signer):
        """Test the secret is never transmitted"""
        result = fixed_signer.sign("POST", "/x", body="{}")
        assert SECRET_KEY not in result.headers.values()

    def test_fresh_nonce_per_request(self):
        """Test nonce and timestamp are regenerated per call"""
        nonces = iter(["111111", "222222"])
        signer = RequestSigner(ACCESS_ID, SECRET_KEY, nonce_generator=lambda: next(nonces))

        first = signer.sign("GET", "/x")
        second = signer.sign("GET", "/x")

        assert first.nonce == "111111"
        assert second.nonce == "222222"
        assert first.signature != second.signature

    def test_explicit_nonce_and_timestamp(self):
        """Test explicit values override generators"""
        signer = create_signer(ACCESS_ID, SECRET_KEY)
        result = signer.sign("GET", "auth", nonce=FIXED_NONCE, timestamp=FIXED_TIMESTAMP)
        assert result.signature == "fb0711213702f01813c8e6fd615c883c"

    @pytest.mark.parametrize("kwargs", [
        {"nonce": "12345"},
        {"nonce": "abcdef"},
        {"timestamp": "1700000000"},
        {"timestamp": "soon"},
    ])
    def test_malformed_nonce_or_timestamp(self, kwargs):
        """Test explicit nonce and timestamp values are validated"""
        signer = create_signer(ACCESS_ID, SECRET_KEY)
        with pytest.raises(ValueError):
            signer.sign("GET", "auth", **kwargs)

    def test_malformed_generated_nonce(self):
        """Test a custom generator producing a bad nonce is rejected"""
        signer = RequestSigner(ACCESS_ID, SECRET_KEY, nonce_generator=lambda: "42")
        with pytest.raises(ValueError, match="nonce"):
            signer.sign("GET", "auth")

    def test_unknown_method(self, fixed_signer):
        """Test methods outside HttpMethod are rejected"""
        with pytest.raises(ValueError):
            fixed_signer.sign("FETCH", "auth")

    def test_method_enum(self, fixed_signer):
        """Test HttpMethod members sign like their string values"""
        assert fixed_signer.sign(HttpMethod.GET, "auth").signature == "fb0711213702f01813c8e6fd615c883c"

    def test_repr_hides_secret(self, fixed_signer):
        """Test secret does not leak through repr"""
        assert SECRET_KEY not in repr(fixed_signer).replace(ACCESS_ID, "")
