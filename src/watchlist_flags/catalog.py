"""フィーチャーカタログ（ビルド時に固定されたデフォルト設定）"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .exceptions import ConfigurationError
from .models import Environment, Feature, FeatureConfig

# Feature ごとのデフォルトロールアウト率。全フィーチャーが必ず 1 件ずつ持つ。
_ROLLOUT_DEFAULTS: Mapping[Feature, int] = MappingProxyType(
    {
        Feature.ADVANCED_CHARTS: 100,
        Feature.AI_MARKET_INSIGHTS: 75,
        Feature.WATCHLIST_COLLABORATION: 100,
        Feature.PORTFOLIO_TRACKING: 50,
        Feature.RESEARCH_ASSISTANT: 80,
        Feature.NEWS_SENTIMENT_ANALYSIS: 100,
        Feature.REAL_TIME_UPDATES: 25,
        Feature.BULK_IMPORTS: 30,
        Feature.CUSTOM_WATCHLIST_VIEWS: 25,
        Feature.ENHANCED_ANALYTICS: 50,
        Feature.MARKET_ALERTS: 40,
        Feature.EXPORT_CAPABILITIES: 75,
        Feature.SOCIAL_SHARING: 50,
        Feature.PERFORMANCE_TRACKING: 35,
        Feature.MOBILE_OPTIMIZATIONS: 100,
        Feature.DARK_MODE: 100,
        Feature.INVESTMENT_IDEAS: 20,
    }
)


def defaults() -> dict[Feature, FeatureConfig]:
    """全フィーチャーのデフォルト設定を返す。

    呼び出しごとに新しい辞書を返す。エントリが欠けているフィーチャーが
    あれば ConfigurationError。
    """
    missing = [f.name for f in Feature if f not in _ROLLOUT_DEFAULTS]
    if missing:
        raise ConfigurationError(
            f"Feature catalog has no default for: {', '.join(missing)}"
        )
    return {
        feature: FeatureConfig(
            enabled=True,
            rollout_percentage=_ROLLOUT_DEFAULTS[feature],
            environment=Environment.ALL,
        )
        for feature in Feature
    }
