# Author: Bradley R. Kinnard — env vars or bust

"""
Settings via pydantic-settings. Reads from env, falls back to .env file.
Path patterns are comma-separated fnmatch globs over /-normalized paths.
"""

from pydantic_settings import BaseSettings


def split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"
    max_code_bytes: int = 200_000  # 200KB per source unit
    cache_ttl: int = 604800  # 7 days, same code + same rules = same answer

    # batch analysis
    file_timeout: float = 5.0  # seconds per file
    batch_timeout: float = 30.0  # whole batch, hard cap
    max_batch_files: int = 200

    # calls that count as "already parallel", dotted two-part names only
    parallel_combinators: str = "asyncio.gather,asyncio.wait"

    # both rules run here: request handlers, route modules, actions
    handler_patterns: str = (
        "*/api/*,*/routes/*,*/handlers/*,*/actions/*,"
        "*/route.py,*/routes.py,*/routes_*.py,*_routes.py,*_action.py,*_actions.py"
    )
    # waterfall rule also runs here
    service_patterns: str = "*/services/*,*/workers/*,*_service.py,*_worker.py"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # ignore unknown env vars

    @property
    def combinators(self) -> frozenset[str]:
        return frozenset(split_csv(self.parallel_combinators))


settings = Settings()
