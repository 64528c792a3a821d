"""フィーチャーカタログのユニットテスト"""

import pytest
from watchlist_flags import ConfigurationError, Environment, Feature, catalog


def test_every_feature_has_default() -> None:
    """すべてのフィーチャーにデフォルト設定があること。"""
    configs = catalog.defaults()
    assert set(configs) == set(Feature)
    assert len(configs) == 17


def test_defaults_enabled_for_all_environments() -> None:
    """デフォルトは全環境で有効、許可・拒否リストは空。"""
    for config in catalog.defaults().values():
        assert config.enabled is True
        assert config.environment is Environment.ALL
        assert not config.enabled_for
        assert not config.disabled_for


def test_default_rollout_percentages() -> None:
    """代表的なフィーチャーのロールアウト率。"""
    configs = catalog.defaults()
    assert configs[Feature.MARKET_ALERTS].rollout_percentage == 40
    assert configs[Feature.INVESTMENT_IDEAS].rollout_percentage == 20
    assert configs[Feature.DARK_MODE].rollout_percentage == 100
    assert configs[Feature.AI_MARKET_INSIGHTS].rollout_percentage == 75


def test_defaults_returns_fresh_mapping() -> None:
    """呼び出しごとに独立した辞書を返すこと。"""
    first = catalog.defaults()
    first.pop(Feature.DARK_MODE)
    assert Feature.DARK_MODE in catalog.defaults()


def test_missing_entry_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """カタログにエントリが欠けていれば ConfigurationError。"""
    partial = {f: 100 for f in Feature if f is not Feature.SOCIAL_SHARING}
    monkeypatch.setattr(catalog, "_ROLLOUT_DEFAULTS", partial)
    with pytest.raises(ConfigurationError, match="SOCIAL_SHARING"):
        catalog.defaults()
