"""
Configuration management for the POMDP solver.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration settings."""

    # Base paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    PROBLEMS_DIR: Path = PROJECT_ROOT / "problems"

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Solver defaults
    DEFAULT_RANDOM_SEED: int = int(os.getenv("RANDOM_SEED", "42"))
    BELIEF_SIZE: int = int(os.getenv("BELIEF_SIZE", "1000"))
    HORIZON: int = int(os.getenv("HORIZON", "100"))
    EPSILON: float = float(os.getenv("EPSILON", "0.01"))

    # Margin below which an LP witness is not trusted
    PRUNE_TOLERANCE: float = float(os.getenv("PRUNE_TOLERANCE", "1e-9"))
