from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from famcal.api.di import DiContainer
from famcal.api.endpoints.csrf import CSRF_HEADER_NAME
from famcal.api.endpoints.di import get_di
from famcal.api.infra.session_repo import SessionRepo
from famcal.api.infra.setup_token_repo import SetupTokenRepo
from famcal.api.infra.update_repo import UpdateRepo
from famcal.api.infra.user_repo import UserRepo
from famcal.api.middleware import (
    famcal_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from famcal.application.exceptions import FamcalException
from famcal.application.user.create_user import CreateUser
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import Role, User
from test.api.common import TEST_ADMIN_PW, TEST_ADMIN_USERNAME, SqliteTestWrapper


class TestDiContainer(SqliteTestWrapper, DiContainer):
    @classmethod
    def user_repo(cls) -> IUserRepo:
        cls._setup()

        return UserRepo(cls.connection)

    @classmethod
    def session_repo(cls) -> ISessionRepo:
        cls._setup()

        return SessionRepo(cls.connection)

    @classmethod
    def setup_token_repo(cls) -> ISetupTokenRepo:
        cls._setup()

        return SetupTokenRepo(cls.connection)

    @classmethod
    def update_repo(cls) -> IUpdateRepo:
        cls._setup()

        return UpdateRepo(cls.connection)


class TestEndpointWrapper:
    app: FastAPI
    client: TestClient
    di: TestDiContainer
    routers: tuple[APIRouter, ...] = ()

    test_admin_username: str = TEST_ADMIN_USERNAME
    test_admin_pw: str = TEST_ADMIN_PW

    @classmethod
    def setup_class(cls) -> None:
        if not hasattr(cls, "app"):
            cls.app = FastAPI()

        for router in cls.routers:
            cls.app.include_router(router)

        cls.di = TestDiContainer()
        cls.di.reset()
        cls.app.dependency_overrides[get_di] = lambda: cls.di

        cls.app.add_exception_handler(FamcalException, famcal_exception_handler)  # type: ignore[arg-type]
        cls.app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
        cls.app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]

        # https so that the session cookie is sent back even if it is `Secure`
        cls.client = TestClient(cls.app, base_url="https://testserver")

    def setup_method(self) -> None:
        self.di.reset()
        self.client.cookies.clear()

    def login(
        self, username: str | None = None, password: str | None = None
    ) -> str:
        """Login and return the CSRF token, the session cookie is kept by the client."""

        response = self.client.post(
            "/api/auth/login",
            json={
                "username": username or self.test_admin_username,
                "password": password or self.test_admin_pw,
            },
        )

        assert response.status_code == 200, response.text

        return response.json()["csrfToken"]

    def csrf_headers(self, csrf_token: str) -> dict[str, str]:
        return {CSRF_HEADER_NAME: csrf_token}

    def create_user(self, username: str, **kwargs: Any) -> User:  # type: ignore[misc]
        kwargs.setdefault("role", Role.USER)

        return CreateUser(self.di.user_repo()).handle(username, **kwargs)
