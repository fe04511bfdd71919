import logging

from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo


class PurgeExpiredCredentials:
    """
    Housekeeping run at startup to keep the session and setup token tables
    from growing forever. Expiration is still enforced at lookup time.
    """

    def __init__(
        self,
        session_repo: ISessionRepo,
        setup_token_repo: ISetupTokenRepo,
    ) -> None:
        self.session_repo = session_repo
        self.setup_token_repo = setup_token_repo
        self.logger = logging.getLogger("famcal")

    def handle(self) -> None:
        now = UtcDatetime.now()

        sessions = self.session_repo.delete_expired(now)
        tokens = self.setup_token_repo.delete_expired(now)

        self.logger.info(
            "Purged %d expired sessions and %d expired setup tokens",
            sessions,
            tokens,
        )
