from datetime import timedelta

import pytest
from jose import jwt

from innovatefund.infrastructure.security import create_access_token, decode_access_token


def test_token_carries_principal_and_user_type():
    claims = decode_access_token(create_access_token("user-1", "investor"))

    assert claims["sub"] == "user-1"
    assert claims["userType"] == "investor"


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-token",
        create_access_token("user-1", "innovator", timedelta(seconds=-5)),
        jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256"),
        jwt.encode({"userType": "innovator"}, "test-secret", algorithm="HS256"),
    ],
)
def test_invalid_tokens_are_rejected(token):
    with pytest.raises(ValueError):
        decode_access_token(token)
