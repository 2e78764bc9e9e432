import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ApiConfig:
    """
    Dataclass for backend API configuration.
    """

    base_url: str
    request_timeout: float
    wake_timeout: float
    telemetry_workers: int
    api_token: str | None = None
    workspace_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionConfig:
    """
    Dataclass for refinement session configuration.
    """

    idle_timeout_seconds: float


@dataclass(frozen=True)
class PathConfig:
    """
    Dataclass for path configuration.
    """

    logs: Path
    results: Path


def load_api_env() -> ApiConfig:
    """
    Loads backend API configuration from environment variables or defaults.

    Returns:
        ApiConfig: Dataclass containing API configuration.
        - base_url (str): The backend origin every client call is made against.
        - request_timeout (float): Timeout in seconds for regular API calls.
        - wake_timeout (float): Timeout in seconds for the health wake-up call.
        - telemetry_workers (int): Worker threads for fire-and-forget telemetry.
        - api_token (str | None): Optional bearer token for the CLI and UI shell.
        - workspace_ids (tuple[str, ...]): Default workspaces to search across.
    """
    return ApiConfig(
        base_url=os.getenv("API_URL", "http://localhost:8001").rstrip("/"),
        request_timeout=float(os.getenv("API_REQUEST_TIMEOUT", "60")),
        wake_timeout=float(os.getenv("API_WAKE_TIMEOUT", "30")),
        telemetry_workers=int(os.getenv("TELEMETRY_WORKERS", "2")),
        api_token=os.getenv("API_TOKEN") or None,
        workspace_ids=tuple(
            w.strip() for w in os.getenv("WORKSPACE_IDS", "").split(",") if w.strip()
        ),
    )


def load_session_env() -> SessionConfig:
    """
    Loads refinement session configuration from environment variables or defaults.

    Returns:
        SessionConfig: Dataclass containing session configuration.
        - idle_timeout_seconds (float): Seconds of inactivity after which an
          unfinished session is abandoned.
    """
    return SessionConfig(
        idle_timeout_seconds=float(os.getenv("SESSION_IDLE_TIMEOUT", "900")),
    )


def load_path_env() -> PathConfig:
    """
    Loads path configuration from environment variables or defaults.

    Returns:
        PathConfig: Dataclass containing path configuration.
        - logs (Path): Path to the logs file.
        - results (Path): Path to the directory search results are stored in.
    """
    project_root: Path = Path(__file__).parents[2].resolve()
    data_dir: Path = Path.home() / "hubsearch"
    return PathConfig(
        logs=Path(
            os.getenv("LOG_PATH", project_root / ".logs" / "hubsearch.log")
        ).expanduser(),
        results=Path(os.getenv("RESULTS_PATH", data_dir / "results")).expanduser(),
    )
