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

class PushConfig:
    def __init__(self) -> None:
        self.PUSH_API_BASE = os.getenv("PUSH_API_BASE", "https://fcm.googleapis.com/v1")
        self.PUSH_PROJECT_ID = os.getenv("PUSH_PROJECT_ID")
        self.PUSH_ACCESS_TOKEN = os.getenv("PUSH_ACCESS_TOKEN")
        self.PUSH_ICON = os.getenv("PUSH_ICON", "/icon-192.png")
        self.PUSH_TIMEOUT_SECONDS = float(os.getenv("PUSH_TIMEOUT_SECONDS", 15))

config = PushConfig()
