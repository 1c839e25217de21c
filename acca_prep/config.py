from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of acca_prep folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'acca_prep.db'}"
    
    # Review targets
    daily_review_target: int = 10  # questions per day shown on the streak card
    
    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # JSON lines instead of console rendering
    
    class Config:
        env_file = str(PROJECT_ROOT / ".env")

settings = Settings()
