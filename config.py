import os
from pydantic_settings import BaseSettings
from pydantic import model_validator, field_validator
from typing import Optional

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
# Not shipped: place the current RangeMessage.xml from isbn-international.org here
# or point ISBN_RANGES_FILE elsewhere.
DEFAULT_RANGES_FILE = os.path.join(BASE_DIR, 'data', 'RangeMessage.xml')

KNOWN_FORMATS = ('ISBN-10', 'ISBN-13', 'ISBN', 'GTIN-14', 'EAN')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Config(BaseSettings):
    # Range dataset (ISBN International RangeMessage.xml).
    # Relative paths are resolved against the project root.
    ISBN_RANGES_FILE: Optional[str] = None

    # Output defaults
    DEFAULT_FORMAT: str = 'ISBN-13'
    DEFAULT_GTIN14_PREFIX: int = 1

    # Logging
    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = True

    # Application environment: development | staging | production
    APP_ENV: str = os.getenv('FLASK_ENV', 'development')

    # Flask JSON responses keep the key order built by the API
    JSON_SORT_KEYS: bool = False

    @field_validator('DEFAULT_FORMAT', mode='before')
    def _normalize_format(cls, v):
        """Accept 'isbn-13', ' Isbn-10 ' etc. and reject unknown format names."""
        v = str(v).strip().upper()
        if v not in KNOWN_FORMATS:
            raise ValueError(f"DEFAULT_FORMAT must be one of {', '.join(KNOWN_FORMATS)}")
        return v

    @field_validator('DEFAULT_GTIN14_PREFIX', mode='before')
    def _parse_gtin14_prefix(cls, v):
        """GTIN-14 logistic indicator is a single digit.
        Inline comments in .env ('1  # cartons') are stripped before parsing.
        """
        if isinstance(v, str):
            v = v.split('#', 1)[0].strip()
        v = int(v)
        if not 0 <= v <= 9:
            raise ValueError('DEFAULT_GTIN14_PREFIX must be a single digit (0-9)')
        return v

    @field_validator('LOG_LEVEL', mode='before')
    def _normalize_log_level(cls, v):
        v = str(v).strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return v

    @model_validator(mode='after')
    def resolve_ranges_file(self) -> 'Config':
        """Default to data/RangeMessage.xml and make relative paths absolute"""
        if not self.ISBN_RANGES_FILE:
            self.ISBN_RANGES_FILE = DEFAULT_RANGES_FILE
        elif not os.path.isabs(self.ISBN_RANGES_FILE):
            self.ISBN_RANGES_FILE = os.path.join(BASE_DIR, self.ISBN_RANGES_FILE)
        return self

    class Config:
        env_file = '.env'
        env_file_encoding = 'utf-8'
        case_sensitive = False
        extra = 'ignore'  # Ignore extra fields from .env
