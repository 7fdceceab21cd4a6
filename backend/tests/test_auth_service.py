"""
Test cases for registration and login.
"""
import logging

import pytest
from jose import jwt
from sqlalchemy import func, select

from task_api.core.config import settings
from task_api.core.security import create_access_token, decode_access_token
from task_api.models.user import User
from task_api.schemas.auth import LoginRequest, RegisterRequest
from task_api.services.auth_service import AuthService
from task_api.services.credential_store import CredentialStore, validate_password

PASSWORD = "Passw0rd!"

def registration(email="carol@example.com", username="carol", password=PASSWORD, confirm=None):
    return RegisterRequest(
        email=email,
        username=username,
        password=password,
        confirm_password=password if confirm is None else confirm,
    )

@pytest.mark.asyncio
async def test_register_returns_token_and_user_role(db):
    response = await AuthService(db).register(registration())

    assert response.success is True
    assert response.message == "User registered successfully"
    assert response.token
    assert response.user.email == "carol@example.com"
    assert response.user.username == "carol"
    assert response.user.roles == ["User"]

    claims = decode_access_token(response.token)
    assert claims["sub"] == response.user.id
    assert claims["roles"] == ["User"]

@pytest.mark.asyncio
async def test_register_rejects_mismatched_passwords(db):
    response = await AuthService(db).register(registration(confirm="Different1!"))

    assert response.success is False
    assert response.message == "Passwords do not match"
    assert response.token is None
    count = await db.execute(select(func.count()).select_from(User))
    assert count.scalar_one() == 0

@pytest.mark.asyncio
async def test_register_same_email_twice_keeps_one_user(db):
    service = AuthService(db)
    first = await service.register(registration())
    second = await service.register(registration(username="carol2"))

    assert first.success is True
    assert second.success is False
    assert "already exists" in second.message
    count = await db.execute(select(func.count()).select_from(User))
    assert count.scalar_one() == 1

@pytest.mark.asyncio
async def test_register_reports_every_password_rule(db):
    response = await AuthService(db).register(registration(password="abc"))

    assert response.success is False
    assert response.message.startswith("User creation failed: ")
    assert "at least 6 characters" in response.message
    assert "non alphanumeric" in response.message
    assert "digit" in response.message
    assert "uppercase" in response.message

@pytest.mark.asyncio
async def test_register_rejects_taken_username(db):
    service = AuthService(db)
    await service.register(registration())
    response = await service.register(registration(email="other@example.com"))

    assert response.success is False
    assert "Username 'carol' is already taken." in response.message

@pytest.mark.asyncio
async def test_login_success_issues_token(db):
    service = AuthService(db)
    registered = await service.register(registration())

    response = await service.login(LoginRequest(email="carol@example.com", password=PASSWORD))

    assert response.success is True
    assert response.message == "Login successful"
    assert response.user.id == registered.user.id
    assert response.user.roles == ["User"]
    claims = jwt.get_unverified_claims(response.token)
    assert claims["email"] == "carol@example.com"

@pytest.mark.asyncio
async def test_login_email_lookup_ignores_case(db):
    service = AuthService(db)
    await service.register(registration())

    response = await service.login(LoginRequest(email="Carol@Example.com", password=PASSWORD))

    assert response.success is True

@pytest.mark.asyncio
async def test_login_failures_share_one_message(db):
    service = AuthService(db)
    await service.register(registration())

    wrong_password = await service.login(LoginRequest(email="carol@example.com", password="Wrong0ne!"))
    unknown_email = await service.login(LoginRequest(email="nobody@example.com", password=PASSWORD))

    assert wrong_password.success is False
    assert unknown_email.success is False
    assert wrong_password.message == unknown_email.message == "Invalid email or password"

class ExplodingStore(CredentialStore):
    async def find_by_email(self, email):
        raise RuntimeError("database is gone")

@pytest.mark.asyncio
async def test_unexpected_errors_become_generic_failures(db, caplog):
    service = AuthService(db, credentials=ExplodingStore(db))

    with caplog.at_level(logging.ERROR):
        registered = await service.register(registration())
        logged_in = await service.login(LoginRequest(email="carol@example.com", password=PASSWORD))

    assert registered.success is False
    assert registered.message == "An error occurred during registration"
    assert logged_in.success is False
    assert logged_in.message == "An error occurred during login"
    assert "database is gone" not in registered.message
    assert "Error during registration" in caplog.text
    assert "Error during login" in caplog.text

def test_validate_password_accepts_strong_password():
    assert validate_password(PASSWORD) == []

def test_token_carries_configured_issuer():
    claims = jwt.get_unverified_claims(create_access_token({"sub": "abc"}))
    assert claims["iss"] == settings.JWT_ISSUER
    assert claims["aud"] == settings.JWT_AUDIENCE

@pytest.mark.asyncio
async def test_username_with_trailing_newline_is_invalid(db):
    await CredentialStore(db).create_user("bob@example.com", "bob", PASSWORD)

    result = await CredentialStore(db).create_user("nl@example.com", "bob\n", PASSWORD)

    assert not result.succeeded
    assert any("is invalid" in error for error in result.errors)
    count = await db.execute(select(func.count()).select_from(User))
    assert count.scalar_one() == 1

@pytest.mark.asyncio
async def test_username_uniqueness_ignores_case(db):
    service = AuthService(db)
    await service.register(registration())

    response = await service.register(registration(email="other@example.com", username="CAROL"))

    assert response.success is False
    assert "Username 'CAROL' is already taken." in response.message
