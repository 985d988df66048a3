"""Engine configuration."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Engine defaults loaded from environment variables.

    Every value can be overridden with an ``ANCHORPOINT_`` prefixed
    variable (e.g. ``ANCHORPOINT_SIMPLIFY_TOLERANCE=0.5``) or a ``.env``
    file. Callers passing explicit parameters always win.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANCHORPOINT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Simplification
    simplify_tolerance: float = 1.0  # max perpendicular deviation
    simplify_min_spacing: float = 10.0  # distance pre-filter
    curve_samples: int = 16  # line segments per flattened curve

    # Curve fitting
    curve_fit_tolerance: float = 1.0
    fit_lookahead: int = 8  # max anchors spanned by one fitted curve

    # Anchor normalization
    max_handle_length: float = 30.0  # cap for synthesized handles
    handle_ratio: float = 0.3  # handle length as a fraction of segment length
    break_angle_degrees: float = 15.0

    # Closed path detection
    close_epsilon: float = 1e-6

    # Logging
    log_json: bool = False
    log_level: str = "INFO"
    log_file: str | None = None  # rotating main log, stream only when unset
    error_log_file: str | None = None  # ERROR and above only


settings = Settings()
