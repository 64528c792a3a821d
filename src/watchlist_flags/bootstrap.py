"""セッション起動時のストア・コンテキスト構築"""

from __future__ import annotations

import os
from typing import Mapping

import structlog

from . import catalog
from .context import EvaluationContext
from .logger import configure_from_settings
from .settings import RolloutSettings
from .store import ConfigurationStore

logger = structlog.stdlib.get_logger(__name__)


def create_store(
    settings: RolloutSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> ConfigurationStore:
    """カタログ・設定・環境変数から ConfigurationStore を作る。

    不正な設定は ConfigurationError として呼び出し元（起動処理）に伝播する。
    """
    settings = settings or RolloutSettings()
    return ConfigurationStore.initialize(
        catalog.defaults(),
        env_overrides=os.environ if environ is None else environ,
        environment=settings.runtime_environment,
        env_prefix=settings.env_prefix,
        feature_overrides=settings.features,
    )


def create_context(
    settings: RolloutSettings | None = None,
    environ: Mapping[str, str] | None = None,
    user_id: str | None = None,
) -> EvaluationContext:
    """初期化済みの EvaluationContext を返す。

    settings を渡した場合はその log セクションでロガーも設定する。
    """
    if settings is None:
        settings = RolloutSettings()
    else:
        configure_from_settings(settings.log)
    store = create_store(settings, environ)
    logger.debug(
        "evaluation context created",
        hash_algorithm=settings.hash_algorithm.value,
        strict=settings.strict_context,
    )
    return EvaluationContext(
        store,
        user_id=user_id,
        algorithm=settings.hash_algorithm,
        strict=settings.strict_context,
    )
