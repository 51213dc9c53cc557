from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from bookdaan.auth.dependencies import require_admin
from bookdaan.core import config
from bookdaan.models.enums import UserRole
from bookdaan.models.user import User
from bookdaan.routes.auth_routes import resolve_role


def test_login_creates_account_and_returns_token(client, db) -> None:
    response = client.post('/api/auth/login', json={'email': ' New.Donor@Example.com ', 'role': 'donor', 'firstName': 'Nia'})

    assert response.status_code == 200
    body = response.json()
    assert body['token_type'] == 'bearer'

    user = db.query(User).filter(User.email == 'new.donor@example.com').one()
    assert user.role == 'donor'
    assert user.first_name == 'Nia'

    me = client.get('/api/auth/user', headers={'Authorization': f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()['email'] == 'new.donor@example.com'
    assert me.json()['preferences'] == []


def test_login_never_changes_existing_role(client, db, make_user) -> None:
    make_user('reader@example.com')

    response = client.post('/api/auth/login', json={'email': 'reader@example.com', 'role': 'donor'})

    assert response.status_code == 200
    assert db.query(User).filter(User.email == 'reader@example.com').one().role == UserRole.RECIPIENT.value


def test_login_refuses_self_assigned_admin(client) -> None:
    response = client.post('/api/auth/login', json={'email': 'sneaky@example.com', 'role': 'admin'})

    assert response.status_code == 400


def test_login_is_hidden_when_disabled(client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'DEMO_LOGIN_ENABLED', False)

    response = client.post('/api/auth/login', json={'email': 'someone@example.com'})

    assert response.status_code == 404


def test_resolve_role_promotes_configured_admins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'ADMIN_EMAILS', {'boss@example.com'})

    assert resolve_role('boss@example.com', 'recipient') == 'admin'
    assert resolve_role('reader@example.com', 'donor') == 'donor'


def test_current_user_requires_token(client) -> None:
    response = client.get('/api/auth/user')

    assert response.status_code == 401


def test_expired_token_is_rejected(client, make_user) -> None:
    user = make_user('reader@example.com')
    expired = jwt.encode(
        {'sub': user.email, 'exp': datetime.now(timezone.utc) - timedelta(minutes=1)},
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
    )

    response = client.get('/api/auth/user', headers={'Authorization': f'Bearer {expired}'})

    assert response.status_code == 401
    assert response.json()['detail'] == 'Invalid token'


def test_token_for_unknown_user_is_rejected(client, headers_for) -> None:
    ghost = User(email='ghost@example.com', role='recipient')

    response = client.get('/api/auth/user', headers=headers_for(ghost))

    assert response.status_code == 401
    assert response.json()['detail'] == 'User not found'


def test_require_admin_rejects_other_roles(make_user) -> None:
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)

    with pytest.raises(HTTPException) as exception_info:
        require_admin(current_user=donor)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'Admin access required'


def test_update_profile_sets_preferences(client, make_user, headers_for) -> None:
    user = make_user('reader@example.com')

    response = client.patch(
        '/api/users/profile',
        headers=headers_for(user),
        json={'preferences': [' Science ', 'History', 'Science', ''], 'phone': '555-0100'},
    )

    assert response.status_code == 200
    assert response.json()['preferences'] == ['Science', 'History']
    assert response.json()['phone'] == '555-0100'
    assert response.json()['role'] == 'recipient'
