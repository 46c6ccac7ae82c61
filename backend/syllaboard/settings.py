from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	app_name: str = Field(default="Syllabus Board API", validation_alias="APP_NAME")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Logging (LOG_DIR unset means console only)
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	log_dir: str | None = Field(default=None, validation_alias="LOG_DIR")

	# Comma separated list, "*" allows every origin
	cors_allow_origins: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGINS")

	# Board generation when a course is saved without a path
	path_cells_per_task: int = Field(default=3, validation_alias="PATH_CELLS_PER_TASK")
	reward_min: int = Field(default=1, validation_alias="REWARD_MIN")
	reward_max: int = Field(default=20, validation_alias="REWARD_MAX")

	# Server
	host: str = Field(default="0.0.0.0", validation_alias="HOST")
	port: int = Field(default=8000, validation_alias="PORT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def cors_origins(self) -> list[str]:
		return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()] or ["*"]

settings = Settings()
