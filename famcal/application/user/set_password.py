import logging
from dataclasses import replace
from datetime import timedelta

from famcal.application.exceptions import InvalidRequest, InvalidSetupToken
from famcal.application.session.start_session import LoginSucceeded, StartSession
from famcal.domain.password_hash import PasswordHash
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.setup_token import SetupTokenId
from famcal.domain.user import HasPassword


class SetPasswordFromToken:
    """
    Consume a password setup token: store the new password and log the user
    in. Storing the hash, deleting the token, revoking old sessions, and
    creating the new session all happen in a single transaction, so a token
    can only ever be used once.
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

    def handle(self, token_id: SetupTokenId, password: str) -> LoginSucceeded:
        try:
            PasswordHash.validate_password(password)

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        token = self.setup_token_repo.get_token(token_id)

        if not token:
            raise InvalidSetupToken("Setup token is invalid or expired")

        if token.is_expired():
            self.setup_token_repo.delete_token(token.id)

            raise InvalidSetupToken("Setup token is invalid or expired")

        user = self.user_repo.get_user_by_id(token.user_id)

        if not user:
            self.setup_token_repo.delete_token(token.id)

            raise InvalidSetupToken("Setup token is invalid or expired")

        # Hash before taking the write lock
        hash = PasswordHash.from_password(password)

        with self.user_repo.transaction():
            # Re-check the token now that we hold the write lock, someone else
            # might have used it while we were hashing.
            if not self.setup_token_repo.get_token(token.id):
                raise InvalidSetupToken("Setup token is invalid or expired")

            self.setup_token_repo.delete_token(token.id)
            self.user_repo.set_password_hash(user.id, hash)

            user = replace(user, credential=HasPassword(hash))

            cmd = StartSession(self.user_repo, self.session_repo, self.session_ttl)
            result = cmd.handle(user)

        self.logger.info("User %s set their password", user.id)

        return result
