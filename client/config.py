import os
from pathlib import Path
from dotenv import load_dotenv

current_file_path = Path(__file__).resolve()
root_dir = current_file_path.parent.parent
env_path = root_dir / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()

class ClientConfig:
    def __init__(self) -> None:
        self.API_BASE = os.getenv("API_BASE", "http://localhost:8000")
        self.CLIENT_EMAIL = os.getenv("CLIENT_EMAIL")
        self.CLIENT_PASSWORD = os.getenv("CLIENT_PASSWORD")
        self.CLIENT_STATE_DIR = Path(os.getenv("CLIENT_STATE_DIR", Path.home() / ".taskmeup"))
        self.CLIENT_REFRESH_SECONDS = float(os.getenv("CLIENT_REFRESH_SECONDS", 300))
        self.TIMEZONE = os.getenv("TIMEZONE", "America/Phoenix")

config = ClientConfig()
