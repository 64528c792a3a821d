"""ConfigurationStore: フィーチャー設定のインメモリ保持"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

import structlog

from .exceptions import ConfigurationError, UnknownFeatureError
from .merger import deep_merge
from .models import Environment, Feature, FeatureConfig, parse_feature
from .settings import FeatureSection

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_ENV_PREFIX = "FEATURE_"


def env_var_name(feature: Feature, prefix: str = DEFAULT_ENV_PREFIX) -> str:
    """フィーチャーを上書きする環境変数名 (FEATURE_MARKET_ALERTS など)。"""
    return f"{prefix}{feature.name}"


def parse_env_bool(value: str) -> bool | None:
    """環境変数の値を真偽値に変換する。true/false 以外は None。"""
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    return None


def _require_complete(configs: Mapping[Feature, FeatureConfig]) -> None:
    missing = [f.name for f in Feature if f not in configs]
    if missing:
        raise ConfigurationError(
            f"Missing configuration for: {', '.join(missing)}"
        )


def _apply_section(
    feature: Feature, config: FeatureConfig, section: FeatureSection
) -> FeatureConfig:
    data: dict[str, Any] = deep_merge(
        config.to_dict(), section.model_dump(exclude_unset=True)
    )
    try:
        return FeatureConfig(**data)
    except ConfigurationError as e:
        raise ConfigurationError(
            f"Invalid configuration for {feature.name}: {e}", cause=e
        ) from e


class ConfigurationStore:
    """フィーチャーごとに 1 件の FeatureConfig を保持するストア。

    enabled フィールドは override でのみ変更できる。それ以外の再構成は
    ストアごと作り直す。
    """

    def __init__(
        self,
        configs: Mapping[Feature, FeatureConfig],
        environment: Environment = Environment.DEVELOPMENT,
    ) -> None:
        _require_complete(configs)
        for feature, config in configs.items():
            if not isinstance(feature, Feature):
                raise ConfigurationError(
                    f"Unknown feature in configuration: {feature!r}"
                )
            if not isinstance(config, FeatureConfig):
                raise ConfigurationError(
                    f"Configuration for {feature.name} must be a FeatureConfig"
                )
        if environment is Environment.ALL:
            raise ConfigurationError("Runtime environment must not be 'all'")
        self._configs: dict[Feature, FeatureConfig] = dict(configs)
        self._environment = environment

    @classmethod
    def initialize(
        cls,
        defaults: Mapping[Feature, FeatureConfig],
        env_overrides: Mapping[str, str] | None = None,
        environment: Environment = Environment.DEVELOPMENT,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        feature_overrides: Mapping[str, FeatureSection] | None = None,
    ) -> ConfigurationStore:
        """カタログのデフォルトから起動時の設定を組み立てる。

        優先順位: デフォルト < feature_overrides < 環境変数（enabled のみ）。
        最後に環境ゲートを適用し、環境が一致しない設定は enabled=False にする。
        """
        configs = dict(defaults)
        _require_complete(configs)
        env_overrides = env_overrides or {}

        for name, section in (feature_overrides or {}).items():
            try:
                feature = parse_feature(name)
            except UnknownFeatureError as e:
                raise ConfigurationError(
                    f"Settings reference unknown feature: {name!r}", cause=e
                ) from e
            configs[feature] = _apply_section(feature, configs[feature], section)

        for feature in Feature:
            config = configs[feature]
            var = env_var_name(feature, env_prefix)
            raw = env_overrides.get(var)
            if raw is not None:
                parsed = parse_env_bool(raw)
                if parsed is None:
                    logger.warning(
                        "ignoring non-boolean feature variable",
                        variable=var,
                        value=raw,
                    )
                else:
                    logger.info(
                        "feature enabled overridden by environment",
                        feature=feature.value,
                        enabled=parsed,
                    )
                    config = replace(config, enabled=parsed)
            if config.enabled and not config.environment.matches(environment):
                logger.info(
                    "feature disabled by environment gate",
                    feature=feature.value,
                    feature_environment=config.environment.value,
                    runtime_environment=environment.value,
                )
                config = replace(config, enabled=False)
            configs[feature] = config

        store = cls(configs, environment)
        logger.info(
            "configuration store initialized",
            environment=environment.value,
            features=len(configs),
        )
        return store

    @property
    def environment(self) -> Environment:
        return self._environment

    def get(self, feature: Feature) -> FeatureConfig:
        """現在の設定を返す。列挙外の値なら UnknownFeatureError。"""
        config = self._configs.get(feature) if isinstance(feature, Feature) else None
        if config is None:
            raise UnknownFeatureError(feature)
        return config

    def override(self, feature: Feature, enabled: bool) -> None:
        """enabled フィールドだけを置き換える。ロールアウト率や許可・拒否リストは保持する。"""
        current = self.get(feature)
        if not isinstance(enabled, bool):
            raise ConfigurationError(
                f"enabled for {feature.name} must be a bool, got {enabled!r}"
            )
        self._configs[feature] = replace(current, enabled=enabled)
        logger.info(
            "feature flag overridden",
            feature=feature.value,
            old_enabled=current.enabled,
            new_enabled=enabled,
        )

    def snapshot(self) -> dict[Feature, FeatureConfig]:
        """全フィーチャー設定のコピーを返す（列挙順）。"""
        return {feature: self._configs[feature] for feature in Feature}
