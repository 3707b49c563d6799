import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


BASE_DIR = Path(__file__).resolve().parent

MIN_REPLY_DELAY = 1
MAX_REPLY_DELAY = 30


def clamp_delay(seconds: int) -> int:
    return max(MIN_REPLY_DELAY, min(MAX_REPLY_DELAY, int(seconds)))


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass(frozen=True)
class Config:
    data_dir: Path = Path(os.getenv("AUTOREPLY_DATA_DIR", str(BASE_DIR / "data")))
    # Defaults to <data_dir>/local_storage.json
    storage_file: Optional[str] = os.getenv("AUTOREPLY_STORAGE_FILE")

    # Seconds before a simulated reply shows up
    reply_delay: int = clamp_delay(os.getenv("AUTOREPLY_REPLY_DELAY", "3"))
    reply_seed: Optional[int] = _optional_int("AUTOREPLY_SEED")

    # Dashboard server
    secret_key: str = os.getenv("AUTOREPLY_SECRET_KEY", "autoreply_dev_secret_key")
    host: str = os.getenv("AUTOREPLY_HOST", "127.0.0.1")
    port: int = int(os.getenv("AUTOREPLY_PORT", "3000"))
    debug: bool = os.getenv("AUTOREPLY_DEBUG", "false").lower() == "true"

    @property
    def storage_path(self) -> Path:
        if self.storage_file:
            return Path(self.storage_file)
        return self.data_dir / "local_storage.json"


cfg = Config()
