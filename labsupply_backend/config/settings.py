"""환경 변수 및 앱 설정."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """앱 설정 (env 로드)."""

    # App
    app_name: str = "Lab Supply Notifications"
    debug: bool = False
    port: int = 8000
    log_level: str = "INFO"

    # 학교 REST API (solicitudes 조회)
    api_url: str = "https://universidad-la9h.onrender.com"
    request_timeout_seconds: float = 10.0

    # Polling / 알림
    poll_interval_seconds: float = 10.0
    poll_on_startup: bool = False
    reminders_enabled: bool = True
    reminder_window_hours: int = 24
    notification_retention_days: int = 30
    notification_sound: str = "default"
    # 알림 본문 날짜 표시용 현지 UTC offset (시간)
    local_utc_offset_hours: float = -5.0

    # Badge
    badge_interval_seconds: float = 30.0
    badge_max_count: int = 99

    # Expo push (토큰 없으면 로그 출력만)
    expo_push_token: str = ""
    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    push_retry_attempts: int = 3
    push_retry_delay_ms: int = 1000

    # DB: 기본은 로컬 SQLite, USE_MYSQL=true 이면 MySQL
    use_mysql: bool = False
    sqlite_path: str = "labsupply.db"
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: str = "root"
    mysql_password: str = ""
    mysql_database: str = "lab_supply"

    # CORS (관리자 패널 / 앱 웹뷰)
    cors_origins: str = "http://localhost:3000,http://localhost:8081"

    @property
    def database_url(self) -> str:
        if self.use_mysql:
            return (
                f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}"
                f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"
            )
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]

    @property
    def push_enabled(self) -> bool:
        return bool(self.expo_push_token.strip())

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
