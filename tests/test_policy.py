"""ロールアウトポリシーのユニットテスト"""

import pytest
from watchlist_flags import (
    EvaluationReason,
    Feature,
    FeatureConfig,
    HashAlgorithm,
    bucket,
    decide,
    evaluate,
)

USERS = [f"user-{i}" for i in range(300)]


def test_disabled_flag_is_off_for_everyone() -> None:
    """enabled=False なら許可リストやロールアウト率に関係なく無効。"""
    for pct in (None, 0, 50, 100):
        config = FeatureConfig(
            enabled=False, rollout_percentage=pct, enabled_for=frozenset(USERS)
        )
        assert not decide(Feature.DARK_MODE, config)
        assert not any(decide(Feature.DARK_MODE, config, u) for u in USERS)


def test_disabled_reason() -> None:
    """マスタースイッチ off の理由コード。"""
    result = evaluate(Feature.DARK_MODE, FeatureConfig(enabled=False), "u1")
    assert result.enabled is False
    assert result.reason == EvaluationReason.FLAG_DISABLED
    assert result.feature is Feature.DARK_MODE


def test_deny_beats_allow() -> None:
    """拒否リストと許可リストの両方にいるユーザーは無効。"""
    config = FeatureConfig(
        rollout_percentage=100,
        enabled_for=frozenset({"u1"}),
        disabled_for=frozenset({"u1"}),
    )
    result = evaluate(Feature.SOCIAL_SHARING, config, "u1")
    assert result.enabled is False
    assert result.reason == EvaluationReason.USER_DENIED


def test_allow_overrides_rollout() -> None:
    """許可リストのユーザーはロールアウト率 0 でも有効。"""
    config = FeatureConfig(rollout_percentage=0, enabled_for=frozenset({"u1"}))
    result = evaluate(Feature.BULK_IMPORTS, config, "u1")
    assert result.enabled is True
    assert result.reason == EvaluationReason.USER_ALLOWED
    assert not decide(Feature.BULK_IMPORTS, config, "u2")


def test_zero_percent_excludes_everyone() -> None:
    """ロールアウト率 0 は全員無効。"""
    config = FeatureConfig(rollout_percentage=0)
    assert not any(decide(Feature.MARKET_ALERTS, config, u) for u in USERS)


def test_full_rollout_includes_everyone() -> None:
    """ロールアウト率 100 は全員有効。"""
    config = FeatureConfig(rollout_percentage=100)
    assert all(decide(Feature.MARKET_ALERTS, config, u) for u in USERS)


def test_rollout_compares_bucket() -> None:
    """バケットがロールアウト率未満なら有効。"""
    config = FeatureConfig(rollout_percentage=40)
    for u in USERS:
        result = evaluate(Feature.MARKET_ALERTS, config, u)
        expected = bucket(u, Feature.MARKET_ALERTS)
        assert result.bucket == expected
        assert result.enabled is (expected < 40)
        assert result.reason == (
            EvaluationReason.ROLLOUT_INCLUDED
            if expected < 40
            else EvaluationReason.ROLLOUT_EXCLUDED
        )


def test_known_users_for_market_alerts() -> None:
    """MARKET_ALERTS (40%): u-004 はバケット 21 で有効、u-777 は 94 で無効。"""
    config = FeatureConfig(rollout_percentage=40)
    assert decide(Feature.MARKET_ALERTS, config, "u-004") is True
    assert decide(Feature.MARKET_ALERTS, config, "u-777") is False


@pytest.mark.parametrize("user_id", [None, ""])
def test_anonymous_user_falls_back_to_enabled(user_id: str | None) -> None:
    """匿名評価ではロールアウト率を見ずに enabled を返す。"""
    result = evaluate(Feature.MARKET_ALERTS, FeatureConfig(rollout_percentage=0), user_id)
    assert result.enabled is True
    assert result.reason == EvaluationReason.FLAG_ENABLED
    assert result.bucket is None


def test_no_rollout_percentage_is_enabled() -> None:
    """ロールアウト率が無ければ enabled をそのまま返す。"""
    result = evaluate(Feature.DARK_MODE, FeatureConfig(), "u1")
    assert result.enabled is True
    assert result.reason == EvaluationReason.FLAG_ENABLED


def test_decision_is_deterministic() -> None:
    """同じ入力に対する判定は繰り返しても同じ。"""
    config = FeatureConfig(rollout_percentage=35)
    first = [decide(Feature.PERFORMANCE_TRACKING, config, u) for u in USERS]
    bucket.cache_clear()
    second = [decide(Feature.PERFORMANCE_TRACKING, config, u) for u in USERS]
    assert first == second


def test_legacy_algorithm_changes_assignment() -> None:
    """アルゴリズムを切り替えるとバケットは旧実装の値になる。"""
    config = FeatureConfig(rollout_percentage=40)
    # u-001 は FNV1A でバケット 54、旧ハッシュで 90
    assert evaluate(Feature.MARKET_ALERTS, config, "u-001").bucket == 54
    legacy = evaluate(Feature.MARKET_ALERTS, config, "u-001", HashAlgorithm.LEGACY)
    assert legacy.bucket == 90
    assert legacy.enabled is False
