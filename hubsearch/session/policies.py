"""Session lifetime policy."""

from hubsearch.session.types import Session
from hubsearch.utils.env_cfg import SessionConfig, load_session_env


class IdlePolicy:
    """
    Abandons unfinished sessions after a period without activity.
    The backend owns the turn limit; only idleness is decided here.
    """

    def __init__(self, config: SessionConfig | None = None) -> None:
        """
        Initialize the IdlePolicy.

        Args:
            config (SessionConfig | None, optional): Session configuration. Defaults to the environment configuration.
        """
        self.config = config or load_session_env()

    def is_expired(self, session: Session, now: float) -> bool:
        """
        Decide whether an unfinished session has been idle for too long.

        Args:
            session (Session): The session to check.
            now (float): Current time on the orchestrator's clock.

        Returns:
            bool: True if the session should be abandoned.
        """
        timeout = self.config.idle_timeout_seconds
        if timeout <= 0 or session.is_complete or session.last_activity is None:
            return False
        return now - session.last_activity > timeout
