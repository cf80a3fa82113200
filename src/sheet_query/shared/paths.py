from pathlib import Path

ROOT_PATH = Path(__file__).resolve().parents[3]
