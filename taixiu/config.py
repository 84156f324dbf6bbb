from pydantic_settings import BaseSettings
import os

# Component predictors mixed by the ensemble, in evaluation order
MODELS = ('markov', 'run_length', 'momentum', 'pattern')


class Settings(BaseSettings):
    max_history: int = int(os.getenv("MAX_HISTORY", 2000))
    markov_order: int = int(os.getenv("MARKOV_ORDER", 3))
    run_window_short: int = int(os.getenv("RUN_WINDOW_SHORT", 6))
    run_window_long: int = int(os.getenv("RUN_WINDOW_LONG", 20))
    base_confidence: float = float(os.getenv("BASE_CONFIDENCE", 0.5))
    pattern_max_len: int = int(os.getenv("PATTERN_MAX_LEN", 8))
    pattern_memory_limit: int = int(os.getenv("PATTERN_MEMORY_LIMIT", 5000))
    upstream_url: str = os.getenv("UPSTREAM_URL", "https://sun-predict-5ghi.onrender.com/api/taixiu/sunwin")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", 10))
    api_key: str | None = os.getenv("API_KEY")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
