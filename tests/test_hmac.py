"""Tests for webhook signature signing and verification."""

import hashlib
import hmac as std_hmac

import pytest

from cherry.common.hmac import sign, verify

SECRET = "shhh"
PAYLOAD = b'{"a":1}'
DIGEST = "82a2822723ef5d74e78b2082b74ec3369cc9cf94e58ed4dc61f5c1e2887fd7c7"


class TestSign:
    """Tests for digest creation."""

    def test_known_digest(self):
        """Known payload/secret pair yields the fixed digest."""
        assert sign(PAYLOAD, SECRET) == DIGEST

    def test_matches_stdlib_hmac(self):
        """Digest is lowercase hex HMAC-SHA256."""
        payload = b"some body \x00\xff"
        expected = std_hmac.new(b"key", payload, hashlib.sha256).hexdigest()
        assert sign(payload, "key") == expected
        assert sign(payload, "key") == sign(payload, b"key")

    def test_digest_shape(self):
        digest = sign(b"", SECRET)
        assert len(digest) == 64
        assert digest == digest.lower()


class TestVerify:
    """Tests for constant-time verification."""

    def test_known_triple_verifies(self):
        assert verify(PAYLOAD, DIGEST, SECRET) is True

    def test_last_character_changed(self):
        """Changing the final hex character fails verification."""
        tampered = DIGEST[:-1] + ("0" if DIGEST[-1] != "0" else "1")
        assert verify(PAYLOAD, tampered, SECRET) is False

    @pytest.mark.parametrize(
        "payload,secret",
        [
            (b"", "s"),
            (b"hello", "secret"),
            (b'{"event_name":"item:added"}', "test_secret"),
            (bytes(range(256)), b"\x00binary-key"),
        ],
    )
    def test_own_signature_verifies(self, payload, secret):
        assert verify(payload, sign(payload, secret), secret) is True

    def test_wrong_secret(self):
        assert verify(PAYLOAD, DIGEST, "other") is False

    def test_tampered_payload(self):
        assert verify(b'{"a":2}', DIGEST, SECRET) is False

    @pytest.mark.parametrize(
        "signature",
        [
            "",
            DIGEST[:-1],
            DIGEST + "0",
            DIGEST.upper(),
            "z" * 64,
            "not hex at all",
            "é" * 64,
            "\ud800" + DIGEST[1:],
        ],
    )
    def test_non_matching_strings_rejected(self, signature):
        """Anything not string-equal to the digest is rejected without raising."""
        assert verify(PAYLOAD, signature, SECRET) is False

    @pytest.mark.parametrize("position", [0, 1, 31, 32, 62, 63])
    def test_mismatch_position_does_not_matter(self, position):
        """A single differing character fails wherever it sits."""
        chars = list(DIGEST)
        chars[position] = "0" if chars[position] != "0" else "1"
        assert verify(PAYLOAD, "".join(chars), SECRET) is False

    def test_compared_as_string_not_decoded_bytes(self):
        """Upper-case hex decodes to the same bytes but is not accepted."""
        assert bytes.fromhex(DIGEST.upper()) == bytes.fromhex(DIGEST)
        assert verify(PAYLOAD, DIGEST.upper(), SECRET) is False
