"""Credential resolution and selection tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from hmac_gate.credentials import CredentialSpec, resolve_credentials, select_credential
from hmac_gate.digest import encode16, encode64
from hmac_gate.errors import ConfigurationError


def test_spec_defaults_and_normalization() -> None:
    spec = CredentialSpec(header_name="X-Shopify-Hmac-SHA256", secret="key")
    assert spec.header_name == "x-shopify-hmac-sha256"
    assert spec.secret == b"key"
    assert spec.algorithm == "sha256"
    assert spec.encoding is encode64


def test_spec_is_frozen() -> None:
    spec = CredentialSpec(header_name="h", secret="k")
    with pytest.raises(ValidationError):
        spec.header_name = "other"


def test_sha_alias_and_unknown_algorithm() -> None:
    assert CredentialSpec(header_name="h", secret="k", algorithm="sha").algorithm == "sha1"
    assert CredentialSpec(header_name="h", secret="k", algorithm="SHA512").algorithm == "sha512"
    with pytest.raises(ValidationError):
        CredentialSpec(header_name="h", secret="k", algorithm="whirlpool")


def test_secret_is_not_in_repr() -> None:
    assert "topsecret" not in repr(CredentialSpec(header_name="h", secret="topsecret"))


def test_empty_header_or_secret_rejected() -> None:
    with pytest.raises(ValidationError):
        CredentialSpec(header_name="h", secret="")
    with pytest.raises(ValidationError):
        CredentialSpec(header_name="", secret="k")


def test_missing_configuration_raises() -> None:
    with pytest.raises(ConfigurationError):
        resolve_credentials(None)
    with pytest.raises(ConfigurationError):
        resolve_credentials([])
    with pytest.raises(ConfigurationError):
        resolve_credentials(("only-a-header",))
    with pytest.raises(ConfigurationError):
        resolve_credentials(("h", ""))
    with pytest.raises(ConfigurationError):
        resolve_credentials([("h1", "k1"), ("h2", "k2", "whirlpool")])


def test_partial_entries_inherit_defaults() -> None:
    specs = resolve_credentials(
        [("h1", "k1"), ("h2", "k2", "sha1", encode16)],
        hash_algo="sha512",
    )
    assert [s.header_name for s in specs] == ["h1", "h2"]
    assert specs[0].algorithm == "sha512"
    assert specs[0].encoding is encode64
    assert specs[1].algorithm == "sha1"
    assert specs[1].encoding is encode16


def test_bytes_tuple_is_a_single_credential() -> None:
    (spec,) = resolve_credentials((b"X-Sig", b"secret"))
    assert spec.header_name == "x-sig"
    assert spec.secret == b"secret"


def test_tuple_of_tuples_is_a_credential_list() -> None:
    specs = resolve_credentials((("h1", "k1"), ("h2", "k2")))
    assert [s.header_name for s in specs] == ["h1", "h2"]


def test_single_credential_always_selected() -> None:
    specs = resolve_credentials(("h1", "k1"))
    assert select_credential({}, specs) is specs[0]


def test_first_present_header_wins() -> None:
    specs = resolve_credentials([("h1", "k1"), ("h2", "k2"), ("h3", "k3")])
    assert select_credential({"h2": "sig", "h3": "sig"}, specs) is specs[1]


def test_fallback_is_last_credential() -> None:
    specs = resolve_credentials([("h1", "k1"), ("h2", "k2")])
    selected = select_credential({"content-type": "application/json"}, specs)
    assert selected is specs[-1]
    assert selected.header_name not in {"content-type": "application/json"}


def test_empty_credentials_select_nothing() -> None:
    assert select_credential({"h1": "x"}, ()) is None
