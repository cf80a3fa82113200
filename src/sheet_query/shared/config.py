import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from .paths import ROOT_PATH


class Config(BaseModel):
    # Keys
    KEYS_PATH: str

    # Sheets
    SHEET_ID: str
    SHEET_NAME: str

    # Retries on rate limit
    MAX_RETRIES: int = 3

    @property
    def key_file(self) -> Path:
        return ROOT_PATH.joinpath(self.KEYS_PATH)

    @staticmethod
    def from_env(dotenv_path: str = "settings.env") -> "Config":
        load_dotenv(dotenv_path)
        return Config.model_validate(os.environ)
