"""フィーチャーフラグ データモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConfigurationError, UnknownFeatureError


class Feature(str, Enum):
    """段階的ロールアウト対象のフィーチャー（閉じた列挙）。"""

    ADVANCED_CHARTS = "advanced_charts"
    AI_MARKET_INSIGHTS = "ai_market_insights"
    WATCHLIST_COLLABORATION = "watchlist_collaboration"
    PORTFOLIO_TRACKING = "portfolio_tracking"
    RESEARCH_ASSISTANT = "research_assistant"
    NEWS_SENTIMENT_ANALYSIS = "news_sentiment_analysis"
    REAL_TIME_UPDATES = "real_time_updates"

    # ベータ版で追加
    BULK_IMPORTS = "bulk_imports"
    CUSTOM_WATCHLIST_VIEWS = "custom_watchlist_views"
    ENHANCED_ANALYTICS = "enhanced_analytics"
    MARKET_ALERTS = "market_alerts"
    EXPORT_CAPABILITIES = "export_capabilities"
    SOCIAL_SHARING = "social_sharing"
    PERFORMANCE_TRACKING = "performance_tracking"
    MOBILE_OPTIMIZATIONS = "mobile_optimizations"
    DARK_MODE = "dark_mode"
    INVESTMENT_IDEAS = "investment_ideas"


class Environment(str, Enum):
    """デプロイ環境。ALL はフィーチャー設定側でのみ使う。"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    ALL = "all"

    def matches(self, runtime: Environment) -> bool:
        """この設定環境が実行環境に適用されるか。"""
        return self is Environment.ALL or self is runtime


def parse_feature(value: object) -> Feature:
    """シリアライズ境界から来た識別子を Feature に変換する。

    メンバー名 (MARKET_ALERTS) と値 (market_alerts) のどちらも受け付ける。
    """
    if isinstance(value, Feature):
        return value
    if isinstance(value, str):
        # メンバー名は値を大文字化したものと一致する
        try:
            return Feature(value.strip().lower())
        except ValueError:
            pass
    raise UnknownFeatureError(value)


@dataclass(frozen=True)
class FeatureConfig:
    """フィーチャー 1 件分の設定。

    更新は ConfigurationStore.override による置き換えでのみ行う。
    """

    enabled: bool = True
    rollout_percentage: int | None = None
    enabled_for: frozenset[str] = field(default_factory=frozenset)
    disabled_for: frozenset[str] = field(default_factory=frozenset)
    environment: Environment = Environment.ALL

    def __post_init__(self) -> None:
        pct = self.rollout_percentage
        if pct is not None:
            if isinstance(pct, bool) or not isinstance(pct, int):
                raise ConfigurationError(
                    f"rollout_percentage must be an integer, got {pct!r}"
                )
            if not 0 <= pct <= 100:
                raise ConfigurationError(
                    f"rollout_percentage must be within [0, 100], got {pct}"
                )
        # list や set で渡されても frozenset に正規化する
        object.__setattr__(self, "enabled_for", frozenset(self.enabled_for))
        object.__setattr__(self, "disabled_for", frozenset(self.disabled_for))
        try:
            environment = Environment(self.environment)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown environment: {self.environment!r}", cause=e
            ) from e
        object.__setattr__(self, "environment", environment)

    def to_dict(self) -> dict[str, object]:
        """管理画面向けのシリアライズ可能な辞書を返す。"""
        return {
            "enabled": self.enabled,
            "rollout_percentage": self.rollout_percentage,
            "enabled_for": sorted(self.enabled_for),
            "disabled_for": sorted(self.disabled_for),
            "environment": self.environment.value,
        }


class EvaluationReason:
    """評価理由コード定数。"""

    FLAG_DISABLED: str = "FLAG_DISABLED"
    USER_DENIED: str = "USER_DENIED"
    USER_ALLOWED: str = "USER_ALLOWED"
    ROLLOUT_INCLUDED: str = "ROLLOUT_INCLUDED"
    ROLLOUT_EXCLUDED: str = "ROLLOUT_EXCLUDED"
    FLAG_ENABLED: str = "FLAG_ENABLED"
    UNKNOWN_FEATURE: str = "UNKNOWN_FEATURE"
    CONTEXT_UNBOUND: str = "CONTEXT_UNBOUND"


@dataclass(frozen=True)
class EvaluationResult:
    """フラグ評価結果。"""

    feature: Feature | None
    enabled: bool
    reason: str = ""
    bucket: int | None = None
