import asyncio
import base64
import json
import time
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID
from fastapi import HTTPException

from airtime import auth
from airtime.main import app

PROJECT = "airtime-test"
KID = "test-key-1"


@pytest.fixture(scope="module")
def signing_key():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "securetoken.test")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    pem = cert.public_bytes(serialization.Encoding.PEM).decode()
    return key, {KID: pem}


@pytest.fixture(autouse=True)
def google_keys(monkeypatch, signing_key):
    _, certs = signing_key

    async def fake_keys(refresh=False):
        return certs

    monkeypatch.setattr(auth, "get_google_public_keys", fake_keys)


def b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def run_verify(token):
    return asyncio.run(auth.verify_firebase_token(token))


def make_token(key, **overrides):
    now = int(time.time())
    claims = {
        "aud": PROJECT,
        "iss": f"https://securetoken.google.com/{PROJECT}",
        "sub": "host-uid",
        "iat": now - 10,
        "exp": now + 3600,
    }
    claims.update(overrides)
    header = b64(json.dumps({"alg": "RS256", "kid": KID}).encode())
    payload = b64(json.dumps(claims).encode())
    signature = key.sign(f"{header}.{payload}".encode(), padding.PKCS1v15(), hashes.SHA256())
    return f"{header}.{payload}.{b64(signature)}"


def test_valid_token(signing_key):
    key, _ = signing_key

    claims = run_verify(make_token(key))

    assert claims["sub"] == "host-uid"


@pytest.mark.parametrize(
    "overrides,detail",
    [
        ({"aud": "someone-else"}, "Invalid token audience"),
        ({"iss": "https://evil.example"}, "Invalid token issuer"),
        ({"exp": int(time.time()) - 5}, "Token has expired. Please refresh your session."),
        ({"sub": ""}, "Invalid token claims"),
    ],
)
def test_rejected_claims(signing_key, overrides, detail):
    key, _ = signing_key

    with pytest.raises(HTTPException) as exc:
        run_verify(make_token(key, **overrides))

    assert exc.value.status_code == 401
    assert exc.value.detail == detail


def test_tampered_payload_fails_signature(signing_key):
    key, _ = signing_key
    header, _, signature = make_token(key).split(".")
    forged = b64(json.dumps({"sub": "admin-uid", "aud": PROJECT}).encode())

    with pytest.raises(HTTPException) as exc:
        run_verify(f"{header}.{forged}.{signature}")

    assert exc.value.detail == "Invalid token signature"


def test_malformed_token():
    with pytest.raises(HTTPException) as exc:
        run_verify("not-a-jwt")

    assert exc.value.status_code == 401


def test_bearer_token_resolves_profile(signing_key, client):
    key, _ = signing_key
    app.dependency_overrides.pop(auth.get_current_user)

    res = client.get("/users/me", headers={"Authorization": f"Bearer {make_token(key)}"})

    assert res.status_code == 200
    assert res.json()["id"] == "host-uid"


def test_token_without_profile_must_sign_up(signing_key, client):
    key, _ = signing_key
    app.dependency_overrides.pop(auth.get_current_user)
    token = make_token(key, sub="nobody-uid")

    res = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 403
    assert res.json()["detail"] == "User profile not found. Please complete signup."


def test_missing_bearer_token_is_rejected(client):
    app.dependency_overrides.pop(auth.get_current_user)

    res = client.get("/jobs")

    assert res.status_code in (401, 403)
