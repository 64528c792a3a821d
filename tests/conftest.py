"""テスト共通フィクスチャ"""

import logging
from collections.abc import Iterator

import pytest
import structlog
from watchlist_flags import ConfigurationStore, EvaluationContext, defaults


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """ロガー設定を変更するテストの後で元に戻す。"""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def store() -> ConfigurationStore:
    """カタログのデフォルトだけで初期化したストア。"""
    return ConfigurationStore.initialize(defaults(), env_overrides={})


@pytest.fixture
def context(store: ConfigurationStore) -> EvaluationContext:
    """ストアに束縛済みの評価コンテキスト。"""
    return EvaluationContext(store)
