import pytest
from pydantic import ValidationError

from sweetshop.auth.dependencies import Identity
from sweetshop.core import config
from sweetshop.core.errors import Conflict
from sweetshop.routes.auth_routes import CredentialsRequest, me, register

AUTH = f'{config.API_PREFIX}/auth'


def test_credentials_request_keeps_email_case() -> None:
    request = CredentialsRequest(email=' Buyer@Example.com ', password='secret')

    assert request.email == 'Buyer@Example.com'


@pytest.mark.parametrize(('email', 'password'), [('   ', 'secret'), ('buyer@example.com', '')])
def test_credentials_request_requires_both_fields(email: str, password: str) -> None:
    with pytest.raises(ValidationError):
        CredentialsRequest(email=email, password=password)


def test_register_returns_token_and_user(db) -> None:
    response = register(CredentialsRequest(email='admin.ops@mithai.com', password='secret'), db=db)

    assert response.token
    assert response.user.email == 'admin.ops@mithai.com'
    assert response.user.role == 'admin'


def test_register_duplicate_raises_conflict(db) -> None:
    register(CredentialsRequest(email='buyer@example.com', password='secret'), db=db)

    with pytest.raises(Conflict):
        register(CredentialsRequest(email='buyer@example.com', password='secret'), db=db)


def test_me_echoes_identity() -> None:
    response = me(identity=Identity(id=4, email='buyer@example.com', role='user'))

    assert response.model_dump() == {'id': 4, 'email': 'buyer@example.com', 'role': 'user'}


def test_register_then_login_over_http(client) -> None:
    registered = client.post(f'{AUTH}/register', json={'email': 'buyer@example.com', 'password': 'secret'})
    logged_in = client.post(f'{AUTH}/login', json={'email': 'buyer@example.com', 'password': 'secret'})

    assert registered.status_code == 201
    assert logged_in.status_code == 200
    assert logged_in.json()['user'] == registered.json()['user']

    me_response = client.get(f'{AUTH}/me', headers={'Authorization': f"Bearer {logged_in.json()['token']}"})
    assert me_response.json()['email'] == 'buyer@example.com'


def test_register_duplicate_over_http_is_400(client) -> None:
    client.post(f'{AUTH}/register', json={'email': 'buyer@example.com', 'password': 'secret'})

    response = client.post(f'{AUTH}/register', json={'email': 'buyer@example.com', 'password': 'secret'})

    assert response.status_code == 400
    assert response.json() == {'error': 'User already exists'}


@pytest.mark.parametrize(
    ('email', 'password', 'error'),
    [
        ('ghost@example.com', 'secret', 'User not found'),
        ('buyer@example.com', 'wrong', 'Invalid password'),
    ],
)
def test_login_failures_are_400(client, email: str, password: str, error: str) -> None:
    client.post(f'{AUTH}/register', json={'email': 'buyer@example.com', 'password': 'secret'})

    response = client.post(f'{AUTH}/login', json={'email': email, 'password': password})

    assert response.status_code == 400
    assert response.json() == {'error': error}


def test_me_without_token_is_401(client) -> None:
    assert client.get(f'{AUTH}/me').status_code == 401
