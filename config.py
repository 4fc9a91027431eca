"""
Process configuration read from the environment.

RETIRE_HOST, RETIRE_PORT          where uvicorn binds
RETIRE_LOG_LEVEL                  logging level name
RETIRE_CORS_ORIGINS               comma separated origins, "*" for any
RETIRE_SELECTION_SEED             integer seed for start-year sampling
RETIRE_SERVICE_NAME               name reported by /health
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


@dataclass(frozen=True)
class AppConfig:
    host: str = '0.0.0.0'
    port: int = 5001
    log_level: str = 'INFO'
    cors_origins: Tuple[str, ...] = ('*',)
    selection_seed: Optional[int] = None
    service_name: str = 'retirement-corpus-planner'


def load_config(environ=None) -> AppConfig:
    env = os.environ if environ is None else environ

    origins = tuple(o.strip() for o in env.get('RETIRE_CORS_ORIGINS', '*').split(',') if o.strip())
    seed = env.get('RETIRE_SELECTION_SEED', '').strip()

    return AppConfig(
        host=env.get('RETIRE_HOST', AppConfig.host),
        port=int(env.get('RETIRE_PORT', AppConfig.port)),
        log_level=env.get('RETIRE_LOG_LEVEL', AppConfig.log_level).upper(),
        cors_origins=origins or ('*',),
        selection_seed=int(seed) if seed else None,
        service_name=env.get('RETIRE_SERVICE_NAME', AppConfig.service_name),
    )


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config()
