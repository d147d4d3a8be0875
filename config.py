import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = 'False') -> bool:
    return os.environ.get(name, default).lower() == 'true'


@dataclass
class Config:
    """Configuration for the AI opponent runtime"""

    # Agent settings
    AGENT_NAME: str = os.environ.get('AGENT_NAME', 'grimwald')
    DIFFICULTY: str = os.environ.get('AGENT_DIFFICULTY', 'medium')  # 'easy', 'medium', 'hard'
    SAFETY_STEPS: int = int(os.environ.get('AGENT_SAFETY_STEPS', '15'))  # Max actions per AI turn
    SPEED_MULTIPLIER: float = float(os.environ.get('AGENT_SPEED_MULTIPLIER', '1.0'))
    MIN_STEP_DELAY_MS: int = 50      # Floor for the inter-step pause

    # Headless mode skips the inter-step pause entirely (tests, batch runs)
    HEADLESS: bool = _env_bool('AGENT_HEADLESS')

    # Logging
    LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'WARNING')
    DECISION_LOG_ENABLED: bool = _env_bool('AGENT_DECISION_LOG', 'True')

    # Paths
    BASE_DIR: str = os.path.dirname(os.path.abspath(__file__))
    LOG_DIR: str = os.path.join(BASE_DIR, 'logs')


# Create global config instance
config = Config()
