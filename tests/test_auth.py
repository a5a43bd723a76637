import time

import pytest
from itsdangerous import TimestampSigner, URLSafeTimedSerializer

from pelada.auth import TokenSigner, check_password
from pelada.errors import AuthFailure


_SALT = "pelada-admin-session"


class _PastSigner(TimestampSigner):
    def get_timestamp(self) -> int:
        return int(time.time()) - 3600


def test_issue_and_verify_round_trip():
    signer = TokenSigner("secret", max_age=60)
    assert signer.verify(signer.issue())["sub"] == "admin"


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token_rejected(token):
    with pytest.raises(AuthFailure):
        TokenSigner("secret", max_age=60).verify(token)


def test_tampered_token_rejected():
    signer = TokenSigner("secret", max_age=60)
    parts = signer.issue().split(".")
    parts[-1] = "A" * len(parts[-1])
    with pytest.raises(AuthFailure):
        signer.verify(".".join(parts))


def test_token_signed_with_other_key_rejected():
    token = TokenSigner("other", max_age=60).issue()
    with pytest.raises(AuthFailure):
        TokenSigner("secret", max_age=60).verify(token)


def test_expired_token_rejected():
    stale = URLSafeTimedSerializer("secret", salt=_SALT, signer=_PastSigner).dumps({"sub": "admin"})
    with pytest.raises(AuthFailure, match="expirada"):
        TokenSigner("secret", max_age=60).verify(stale)
    # Still valid inside a wider window.
    assert TokenSigner("secret", max_age=7200).verify(stale)["sub"] == "admin"


def test_non_admin_payload_rejected():
    serializer = URLSafeTimedSerializer("secret", salt=_SALT)
    with pytest.raises(AuthFailure):
        TokenSigner("secret", max_age=60).verify(serializer.dumps({"sub": "guest"}))


def test_check_password():
    assert check_password("segredo", "segredo")
    assert not check_password("errado", "segredo")
    assert not check_password(None, "segredo")
