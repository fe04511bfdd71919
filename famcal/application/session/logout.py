from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.session import SessionId


class Logout:
    def __init__(self, session_repo: ISessionRepo) -> None:
        self.session_repo = session_repo

    def handle(self, session_id: SessionId | None) -> None:
        # Logging out without a (valid) session is not an error
        if session_id:
            self.session_repo.delete_session(session_id)
