"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/cycle_predictor.db"

    # App
    APP_NAME: str = "Cycle Predictor"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # Files
    DATA_DIR: Path = Path("./data")
    PENDING_PREDICTION_FILE: Path = Path("./data/pending_prediction.json")
    VERIFICATION_LOG_FILE: Path = Path("./data/prediction_history.txt")

    # Remote sources
    COUNTDOWN_URL: str = "http://localhost:8080/countdown"
    REFRESH_URL: str = "http://localhost:8080/refresh"
    DRAWS_URL: str = "http://localhost:8080/draws"
    COUNTDOWN_READ_TIMEOUT: float = 3.0
    INGEST_READ_TIMEOUT: float = 10.0

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    POLL_PERIOD_SECONDS: float = 1.0
    INGEST_PERIOD_SECONDS: float = 5.0
    SHUTDOWN_GRACE_SECONDS: float = 10.0

    # Countdown state machine
    COUNTDOWN_MAX: int = 180
    FIRE_WINDOW_LOW: int = 15
    FIRE_WINDOW_HIGH: int = 28
    ROLLOVER_FLOOR: int = 1          # "at or near zero"
    ROLLOVER_THRESHOLD: int = 30     # a jump above this after the floor is a new cycle
    EARLY_RESET_AT: int = 1
    ERROR_THRESHOLD: int = 5
    ERROR_DECAY_SECONDS: float = 60.0

    # Scoring pipeline
    SLOT_COUNT: int = 5
    HISTORY_WINDOW: int = 10
    HISTORY_FETCH_LIMIT: int = 50
    RECENT_TREND_COUNT: int = 5
    SHORT_WINDOW: int = 5
    MEDIUM_WINDOW: int = 10
    RUN_LENGTH_NORM: float = 10.0
    POSITION_BIAS_STEP: float = 0.05
    TREND_BIAS_STEP: float = 0.2
    PROB_CLAMP_LOW: float = 0.1
    PROB_CLAMP_HIGH: float = 0.9
    DECISION_THRESHOLD: float = 0.5

    # Scorers
    SCORERS: list[str] = ["ratio", "logistic"]
    LOGISTIC_WEIGHTS: list[float] = [
        1.2, -0.3, -0.2, 0.0, 0.0, 0.0, 0.0, 0.4, 0.6, 0.3, 0.2, 0.2,
    ]
    LOGISTIC_BIAS: float = -1.4

    @model_validator(mode="after")
    def _check_bands(self) -> "Settings":
        if not 0 <= self.FIRE_WINDOW_LOW <= self.FIRE_WINDOW_HIGH <= self.COUNTDOWN_MAX:
            raise ValueError("firing window must lie inside [0, COUNTDOWN_MAX]")
        if self.ROLLOVER_THRESHOLD <= self.ROLLOVER_FLOOR:
            raise ValueError("ROLLOVER_THRESHOLD must be above ROLLOVER_FLOOR")
        if not 0.0 <= self.PROB_CLAMP_LOW < self.PROB_CLAMP_HIGH <= 1.0:
            raise ValueError("probability clamp band must satisfy 0 <= low < high <= 1")
        if self.SLOT_COUNT < 1:
            raise ValueError("SLOT_COUNT must be positive")
        if min(self.HISTORY_WINDOW, self.RECENT_TREND_COUNT, self.ERROR_THRESHOLD) < 1:
            raise ValueError("window lengths and ERROR_THRESHOLD must be positive")
        if self.POLL_PERIOD_SECONDS <= 0 or self.INGEST_PERIOD_SECONDS <= 0:
            raise ValueError("scheduler periods must be positive")
        return self


settings = Settings()
