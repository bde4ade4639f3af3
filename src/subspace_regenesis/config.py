from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .project_constants import DEFAULT_NODE_URL, DEFAULT_PAGE_SIZE, DEFAULT_SS58_FORMAT
from .ss58 import validate_ss58_format


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    node_url: str
    page_size: int = DEFAULT_PAGE_SIZE
    ss58_format: int = DEFAULT_SS58_FORMAT

    @staticmethod
    def from_env(
        node_url_override: str | None = None,
        page_size_override: int | None = None,
        ss58_format_override: int | None = None,
    ) -> "Settings":
        load_dotenv(find_dotenv(usecwd=True))

        # CLI flags win, then NODE_URL / PAGE_SIZE / SS58_FORMAT, then defaults.
        node_url = node_url_override or os.getenv("NODE_URL", "").strip() or DEFAULT_NODE_URL

        page_size = page_size_override
        if page_size is None:
            page_size = _int_from_env("PAGE_SIZE", DEFAULT_PAGE_SIZE)
        if page_size <= 0:
            raise ConfigError(f"Page size must be positive, got {page_size}")

        ss58_format = ss58_format_override
        if ss58_format is None:
            ss58_format = _int_from_env("SS58_FORMAT", DEFAULT_SS58_FORMAT)
        try:
            validate_ss58_format(ss58_format)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return Settings(node_url=node_url, page_size=page_size, ss58_format=ss58_format)
