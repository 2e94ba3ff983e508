"""로깅 설정 및 안전한 로그 직렬화 유틸리티.

Logging configuration and safe log-payload serialization.
Loggers live under the ``user_directory`` namespace. When Axiom credentials
are configured, records are shipped to Axiom through axiom_py's handler.
Sensitive fields (password, secret, token, backup codes) are masked.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import Any
from uuid import UUID

from axiom_py import Client as AxiomClient
from axiom_py.logging import AxiomHandler
from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase

from user_directory.config import settings

ROOT_LOGGER_NAME: str = "user_directory"

_LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# 마스킹 대상 필드 패턴 — Fields to mask in log payloads
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|backup_codes|backupcodes|credential)",
    re.IGNORECASE,
)

_MAX_DEPTH: int = 6


def get_logger(name: str) -> logging.Logger:
    """모듈 로거를 반환합니다 (Return the module logger ``user_directory.<name>``)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """패키지 루트 로거를 설정합니다.

    Configure the package root logger: level from settings, a stdout stream
    handler, and an Axiom handler when AXIOM_API_TOKEN and AXIOM_DATASET are
    set. Safe to call more than once.

    Args:
        level: 로그 레벨, None이면 settings.LOG_LEVEL 사용
               (Log level; defaults to settings.LOG_LEVEL)

    Returns:
        logging.Logger: 설정된 루트 로거 (The configured root logger)
    """
    root: logging.Logger = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level if level is not None else settings.LOG_LEVEL.upper())

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(stream_handler)

    # Axiom 미설정시 로컬 로깅만 — Local logging only when Axiom is not configured
    if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
        if not any(isinstance(h, AxiomHandler) for h in root.handlers):
            client = AxiomClient(token=settings.AXIOM_API_TOKEN)
            root.addHandler(AxiomHandler(client, settings.AXIOM_DATASET))

    return root


def _orm_to_dict(obj: DeclarativeBase) -> dict[str, Any]:
    # 이미 로드된 컬럼만 읽음 — only already-loaded columns, never triggers IO
    state = inspect(obj)
    column_keys = {attr.key for attr in state.mapper.column_attrs}
    return {k: v for k, v in state.dict.items() if k in column_keys}


def _to_loggable(value: Any, depth: int = 0) -> Any:
    """로그용 값으로 변환하며 민감 필드를 마스킹합니다.

    Convert a value into JSON-friendly data, masking sensitive keys.
    """
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(value, BaseModel):
        value = value.model_dump()
    elif isinstance(value, DeclarativeBase):
        value = _orm_to_dict(value)

    if isinstance(value, dict):
        return {
            str(k): "***" if _SENSITIVE_KEYS.search(str(k)) else _to_loggable(v, depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return [_to_loggable(item, depth + 1) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def safe_stringify(value: Any) -> str:
    """로그 페이로드를 JSON 문자열로 직렬화합니다. 실패하지 않습니다.

    Serialize a log payload to JSON with sensitive fields masked.
    Never raises; unserializable payloads fall back to ``repr``.
    """
    try:
        return json.dumps(_to_loggable(value), default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)
