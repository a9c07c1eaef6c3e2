"""Tests for domain value objects."""

import pytest

from taskauth.domain.value_objects import EmailAddress


def test_parse_normalizes() -> None:
    assert EmailAddress.parse("  Alice@X.COM ").value == "alice@x.com"


@pytest.mark.parametrize("raw", ["", None, "alice", "alice@", "@x.com", "alice@x", "a b@x.com"])
def test_invalid_addresses_raise(raw) -> None:
    with pytest.raises(ValueError):
        EmailAddress.parse(raw)


def test_too_long_address_raises() -> None:
    with pytest.raises(ValueError):
        EmailAddress.parse("a" * 250 + "@x.com")


def test_redacted_hides_local_part() -> None:
    assert EmailAddress.parse("alice@x.com").redacted() == "al***@x.com"
    assert str(EmailAddress.parse("alice@x.com")) == "alice@x.com"
