import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from apsmatch.core.scoring import DEFAULT_SUBJECT_LIMIT, NON_COUNTING_SUBJECTS

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_DATA_DIR = os.path.join(PROJECT_ROOT, "data")


@dataclass(frozen=True)
class Settings:
    data_dir: str = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    subject_limit: int = DEFAULT_SUBJECT_LIMIT
    excluded_subjects: Tuple[str, ...] = NON_COUNTING_SUBJECTS


def _split(value: str) -> Tuple[str, ...]:
    return tuple(v.strip() for v in value.split(",") if v.strip())


def load_settings() -> Settings:
    load_dotenv()
    excluded = os.getenv("APSMATCH_EXCLUDED_SUBJECTS")
    subject_limit = int(os.getenv("APSMATCH_SUBJECT_LIMIT", str(DEFAULT_SUBJECT_LIMIT)))
    if subject_limit < 0:
        raise ValueError(f"APSMATCH_SUBJECT_LIMIT must be >= 0, got {subject_limit}")
    return Settings(
        data_dir=os.getenv("APSMATCH_DATA_DIR", DEFAULT_DATA_DIR),
        log_level=os.getenv("APSMATCH_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("APSMATCH_HOST", "0.0.0.0"),
        port=int(os.getenv("APSMATCH_PORT", "8000")),
        subject_limit=subject_limit,
        excluded_subjects=_split(excluded) if excluded is not None else NON_COUNTING_SUBJECTS,
    )
