import time

import pytest

from localstorage.sign import (
    ExpireInvalidError,
    ExpireMissingError,
    HMACSign,
    SignError,
    SignExpiredError,
    SignInvalidError,
    new_hmac_sign,
)

SECRET = b"secret"


@pytest.fixture
def signer() -> HMACSign:
    return new_hmac_sign(SECRET)


def test_sign_ends_with_expire(signer):
    signature = signer.sign("/data/file", 123)
    assert signature.endswith(":123")
    assert signature == signer.sign("/data/file", 123)


def test_round_trip_never_expiring(signer):
    signature = signer.sign("/data/file", 0)
    assert signer.verify("/data/file", signature) is None


def test_round_trip_future_expiry(signer):
    signature = signer.sign("/data/file", int(time.time()) + 3600)
    assert signer.verify("/data/file", signature) is None


def test_expired(signer):
    signature = signer.sign("/data/file", int(time.time()) - 10)
    with pytest.raises(SignExpiredError):
        signer.verify("/data/file", signature)


def test_wrong_data_is_invalid(signer):
    signature = signer.sign("/data/file", 0)
    with pytest.raises(SignInvalidError):
        signer.verify("/data/other", signature)


def test_wrong_secret_is_invalid(signer):
    other = new_hmac_sign(b"placeholder")
    signature = other.sign("/data/file", 0)
    with pytest.raises(SignInvalidError):
        signer.verify("/data/file", signature)


def test_missing_expire(signer):
    with pytest.raises(ExpireMissingError):
        signer.verify("/data/file", "abc:")


def test_invalid_expire(signer):
    with pytest.raises(ExpireInvalidError):
        signer.verify("/data/file", "abc:xyz")


def test_errors_share_base_and_messages():
    error = SignExpiredError()
    assert isinstance(error, SignError)
    assert str(error) == "sign expired"
    assert str(ExpireMissingError()) == "expire missing"