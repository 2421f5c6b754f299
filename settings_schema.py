from pydantic import BaseModel, Field, ValidationError, field_validator


class SettingsSchema(BaseModel):
    db_path: str = "workout.db"
    host: str = "0.0.0.0"
    port: int = Field(default=5001, ge=1, le=65535)
    frontend_url: str = "*"
    recommendation_limit: int = Field(default=20, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
