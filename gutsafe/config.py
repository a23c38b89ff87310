from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "INFO"

    # Ingredient result cache
    ingredient_cache_ttl_seconds: int = 3600  # 1 hour
    ingredient_cache_max_entries: int = 2048

    # Pattern mining: confidence = min(cap, frequency / total + floor)
    pattern_confidence_cap: float = 0.95
    pattern_confidence_floor: float = 0.1
    food_trigger_min_confidence: float = 0.7
    symptom_pattern_min_confidence: float = 0.6
    timing_pattern_min_confidence: float = 0.6

    # Symptom timing windows (in hours)
    immediate_window_hours: int = 2
    related_scan_window_hours: int = 24

    # Data quality targets
    completeness_target_points: int = 100
    recency_window_days: int = 7
    recency_target_items: int = 10

    # Heuristic constants not yet derived from data
    data_consistency: float = 0.8
    learning_accuracy: float = 0.75
    prediction_accuracy: float = 0.70
    user_satisfaction: float = 0.80
    adaptation_rate: float = 0.60

    class Config:
        env_file = ".env"
        env_prefix = "GUTSAFE_"


settings = Settings()
