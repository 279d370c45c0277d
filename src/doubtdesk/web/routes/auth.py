"""Sign-up and login endpoints."""

from fastapi import APIRouter, status

from doubtdesk.auth.service import login_user, sign_up_user
from doubtdesk.web.schemas import (
    LoggedInUser,
    LoginRequest,
    LoginResponse,
    SignedUpUser,
    SignUpRequest,
    SignUpResponse,
)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED
)
def signup(request: SignUpRequest) -> SignUpResponse:
    """Register a student or professor."""
    user = sign_up_user(
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        role=request.role,
        role_details=request.role_details,
    )

    return SignUpResponse(
        message="User successfully registered. Please log in.",
        user=SignedUpUser(user_id=user.user_id, email=user.email, role=user.role.value),
    )


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest) -> LoginResponse:
    """Log in and receive a bearer token."""
    user = login_user(request.email, request.password, request.role)

    return LoginResponse(
        message="Login successful.",
        token=user.token,
        user=LoggedInUser(
            user_id=user.user_id, full_name=user.full_name, role=user.role.value
        ),
    )
