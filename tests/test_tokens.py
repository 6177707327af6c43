"""Tests for bootstrap token encoding and persistence."""

from datetime import datetime, timedelta, timezone

import pytest

from clusterboot.store import RecordKind
from clusterboot.store.errors import ForbiddenError
from clusterboot.store.memory import InMemoryStore
from clusterboot.tokens import (
    SECRET_TYPE,
    SYSTEM_NAMESPACE,
    BootstrapToken,
    InvalidTokenError,
    decode_secret_data,
    encode_token_secret_data,
    generate_token,
    parse_token,
    token_secret_record,
    update_or_create_token,
)

from .conftest import RecordingStore


class TestEncodeTokenSecretData:
    @pytest.mark.parametrize("ttl", [timedelta(0), None, timedelta(seconds=-5)])
    def test_no_expiration_without_positive_ttl(self, ttl):
        actual = encode_token_secret_data("foo", "bar", ttl, [], "")

        assert actual == {"token-id": b"foo", "token-secret": b"bar"}

    def test_id_and_secret_are_copied_verbatim(self):
        actual = encode_token_secret_data(" f o ", "bär\n", timedelta(0), [], "")

        assert actual["token-id"] == b" f o "
        assert actual["token-secret"] == "bär\n".encode()

    def test_expiration_added_for_positive_ttl(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)

        actual = encode_token_secret_data("foo", "bar", timedelta(seconds=1), [], "")

        assert actual["expiration"]
        expiration = datetime.strptime(
            actual["expiration"].decode(), "%Y-%m-%dT%H:%M:%SZ"
        ).replace(tzinfo=timezone.utc)
        assert expiration >= before + timedelta(seconds=1)
        assert expiration <= datetime.now(timezone.utc) + timedelta(seconds=1)

    def test_usages_description_and_groups(self):
        actual = encode_token_secret_data(
            "abcdef",
            "0123456789abcdef",
            timedelta(0),
            ["bootstrap-signing", "bootstrap-authentication"],
            "first control plane",
            groups=["system:bootstrappers:kubeadm:default-node-token"],
        )

        assert actual["usage-bootstrap-signing"] == b"true"
        assert actual["usage-bootstrap-authentication"] == b"true"
        assert actual["description"] == b"first control plane"
        assert (
            actual["auth-extra-groups"]
            == b"system:bootstrappers:kubeadm:default-node-token"
        )

    def test_is_deterministic_without_ttl(self):
        args = ("abcdef", "0123456789abcdef", timedelta(0), ["x"], "desc")

        assert encode_token_secret_data(*args) == encode_token_secret_data(*args)


class TestTokenStrings:
    def test_generate_token_matches_format(self):
        token = generate_token()

        assert parse_token(token.token_string) == token

    def test_generated_tokens_differ(self):
        assert generate_token().token_string != generate_token().token_string

    def test_parse_token(self):
        token = parse_token("abcdef.0123456789abcdef", description="node")

        assert token.id == "abcdef"
        assert token.secret == "0123456789abcdef"
        assert token.description == "node"
        assert token.secret_name == "bootstrap-token-abcdef"

    @pytest.mark.parametrize(
        "value",
        ["", "abcdef", "abcdef.short", "ABCDEF.0123456789abcdef", "abcde.0123456789abcdefg"],
    )
    def test_parse_token_rejects_malformed(self, value):
        with pytest.raises(InvalidTokenError):
            parse_token(value)


class TestTokenSecretRecord:
    def test_record_shape(self):
        token = BootstrapToken(id="abcdef", secret="0123456789abcdef")

        record = token_secret_record(token)

        assert record.kind == RecordKind.SECRET
        assert record.namespace == SYSTEM_NAMESPACE
        assert record.name == "bootstrap-token-abcdef"
        assert record.type == SECRET_TYPE
        assert record.data == {
            "token-id": "YWJjZGVm",
            "token-secret": "MDEyMzQ1Njc4OWFiY2RlZg==",
        }

    def test_decoded_data_matches_encoder_output(self):
        token = BootstrapToken(
            id="abcdef",
            secret="0123456789abcdef",
            usages=["bootstrap-signing"],
            description="ünïcode",
        )

        assert decode_secret_data(token_secret_record(token)) == token.encode()


class TestUpdateOrCreateToken:
    async def test_creates_missing_secret(self):
        store = InMemoryStore()
        token = BootstrapToken(id="abcdef", secret="0123456789abcdef")

        await update_or_create_token(store, token)

        record = await store.get(
            RecordKind.SECRET, SYSTEM_NAMESPACE, "bootstrap-token-abcdef"
        )
        assert decode_secret_data(record)["token-secret"] == b"0123456789abcdef"

    async def test_replaces_existing_secret(self):
        store = InMemoryStore()
        await update_or_create_token(
            store,
            BootstrapToken(id="abcdef", secret="0123456789abcdef", description="old"),
        )

        await update_or_create_token(
            store, BootstrapToken(id="abcdef", secret="fedcba9876543210")
        )

        record = await store.get(
            RecordKind.SECRET, SYSTEM_NAMESPACE, "bootstrap-token-abcdef"
        )
        assert decode_secret_data(record) == {
            "token-id": b"abcdef",
            "token-secret": b"fedcba9876543210",
        }

    async def test_lookup_error_is_propagated(self):
        store = RecordingStore(
            get_error=ForbiddenError("Secret", SYSTEM_NAMESPACE, "bootstrap-token-abcdef")
        )

        with pytest.raises(ForbiddenError):
            await update_or_create_token(
                store, BootstrapToken(id="abcdef", secret="0123456789abcdef")
            )

        assert store.verbs == ["get"]


def test_huge_ttl_clamps_expiration():
    actual = encode_token_secret_data(
        "abcdef", "0123456789abcdef", timedelta(days=3_000_000), [], ""
    )

    assert actual["expiration"] == b"9999-12-31T23:59:59Z"
