import logging
from dataclasses import dataclass
from datetime import timedelta

from famcal.application.exceptions import InvalidCredentials, InvalidRequest
from famcal.application.session.start_session import LoginSucceeded, StartSession
from famcal.application.user.issue_setup_token import IssueSetupToken
from famcal.domain.password_hash import PasswordHash, verify_dummy_password
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.setup_token import SetupTokenId


@dataclass(frozen=True)
class PasswordSetupRequired:
    setup_token: SetupTokenId
    username: str
    display_name: str | None


LoginResult = LoginSucceeded | PasswordSetupRequired

MAX_USERNAME_LEN = 64


class LocalUserLogin:
    """
    Login with a username and password. The outcome is decided entirely from
    what is stored in the database, nothing is kept between attempts:

    * Unknown user: rejected.
    * User without a password: the submitted password is ignored and a setup
      token is handed out instead of a session.
    * Wrong password: rejected.
    * Correct password: a new session is started.

    Unknown users and wrong passwords raise the same error to prevent
    enumeration attacks. A dummy hash is verified for unknown users so the
    timing doesn't give it away either.
    """

    def __init__(
        self,
        user_repo: IUserRepo,
        session_repo: ISessionRepo,
        setup_token_repo: ISetupTokenRepo,
        session_ttl: timedelta,
    ) -> None:
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.setup_token_repo = setup_token_repo
        self.session_ttl = session_ttl
        self.logger = logging.getLogger("famcal")

    def handle(self, username: str, password: str = "") -> LoginResult:
        username = username.strip()

        if not username or len(username) > MAX_USERNAME_LEN:
            raise InvalidRequest("Username is empty or too long")

        if len(password) > PasswordHash.MAX_PASSWORD_LEN:
            raise InvalidRequest("Password is too long")

        user = self.user_repo.get_user_by_username(username)

        if not user:
            verify_dummy_password()

            raise InvalidCredentials("Incorrect username or password")

        if user.must_set_password:
            token = IssueSetupToken(self.setup_token_repo).handle(user)

            return PasswordSetupRequired(
                setup_token=token.id,
                username=user.username,
                display_name=user.display_name,
            )

        if not user.verify_password(password):
            self.logger.info("Failed login attempt for user %s", user.id)

            raise InvalidCredentials("Incorrect username or password")

        cmd = StartSession(self.user_repo, self.session_repo, self.session_ttl)

        return cmd.handle(user)
