from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "SignDesk"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    # Origin of the web client; signing links are shared as absolute URLs under it.
    public_base_url: str = "http://127.0.0.1:5173"
    demo_password: str = "password"
    demo_admin_email: str = "admin@example.com"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    # Simulated network latency for the demo flows.
    login_delay_seconds: float = 1.0
    upload_delay_seconds: float = 1.5
    sign_delay_seconds: float = 1.0
    simulated_failure_rate: float = 0.0

    @property
    def db_path(self) -> Path:
        return self.data_path / "store.sqlite"

    @property
    def documents_dir(self) -> Path:
        return self.data_path / "documents"

    model_config = {"env_prefix": "SIGNDESK_"}


settings = Settings()
