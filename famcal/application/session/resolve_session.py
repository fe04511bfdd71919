from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.session import Session, SessionId
from famcal.domain.user import User


class ResolveSession:
    """
    Find the session (and its owner) for a session cookie. Expired sessions
    are deleted when they are looked up, there is no background sweeper that
    needs to run for expiration to be enforced.
    """

    def __init__(self, session_repo: ISessionRepo) -> None:
        self.session_repo = session_repo

    def handle(self, session_id: SessionId) -> tuple[Session, User] | None:
        if not session_id:
            return None

        found = self.session_repo.get_session_and_user(session_id)

        if not found:
            return None

        session, user = found

        if session.is_expired():
            self.session_repo.delete_session(session.id)

            return None

        return session, user
