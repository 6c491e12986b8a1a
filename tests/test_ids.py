import pytest

from manifesto.kernel.ids import Email, FirstName, LastName, Phone, TenantID, UserID


@pytest.mark.parametrize("cls", [UserID, TenantID])
def test_empty_identifier(cls):
    assert cls("").is_empty() is True


@pytest.mark.parametrize("cls", [UserID, TenantID])
def test_non_empty_identifier(cls):
    assert cls("abc").is_empty() is False


@pytest.mark.parametrize("cls", [UserID, TenantID, Email, Phone, FirstName, LastName])
def test_string_round_trip(cls):
    value = cls("some-value")
    assert str(value) == "some-value"
    assert value == "some-value"


def test_identifiers_hash_like_strings():
    mapping = {TenantID("t1"): 1}
    assert mapping["t1"] == 1


def test_repr_names_the_type():
    assert repr(UserID("u1")).startswith("UserID(")


def test_email_keeps_content():
    email = Email("someone@example.com")
    assert email.split("@")[1] == "example.com"