from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from sweetshop.auth.dependencies import Identity, get_current_identity
from sweetshop.database import get_db
from sweetshop.services import accounts

router = APIRouter(tags=['auth'])


class CredentialsRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        # Stored as given; only surrounding whitespace is dropped.
        normalized = value.strip()
        if not normalized:
            raise ValueError('Email and password are required')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Email and password are required')
        return value


class UserResponse(BaseModel):
    id: int
    email: str
    role: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


def _auth_response(result: accounts.AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: CredentialsRequest, db: Session = Depends(get_db)):
    return _auth_response(accounts.register(db, data.email, data.password))


@router.post('/login', response_model=AuthResponse)
def login(data: CredentialsRequest, db: Session = Depends(get_db)):
    return _auth_response(accounts.login(db, data.email, data.password))


@router.get('/me', response_model=UserResponse)
def me(identity: Identity = Depends(get_current_identity)):
    return UserResponse(id=identity.id, email=identity.email, role=identity.role)
