"""deep_merge ユーティリティのユニットテスト"""

from watchlist_flags.merger import deep_merge


def test_merge_simple_override() -> None:
    """シンプルなキーの上書き。"""
    base = {"environment": "development", "strict_context": True}
    override = {"environment": "staging", "env_prefix": "VITE_FEATURE_"}
    result = deep_merge(base, override)
    assert result == {
        "environment": "staging",
        "strict_context": True,
        "env_prefix": "VITE_FEATURE_",
    }


def test_merge_nested_features() -> None:
    """フィーチャー設定のネストされたマージ。"""
    base = {"features": {"dark_mode": {"enabled": True, "rollout_percentage": 50}}}
    override = {"features": {"dark_mode": {"rollout_percentage": 100}}}
    result = deep_merge(base, override)
    assert result["features"]["dark_mode"] == {"enabled": True, "rollout_percentage": 100}


def test_merge_user_list_replacement() -> None:
    """許可リストは置換されること。"""
    base = {"enabled_for": ["a", "b"]}
    override = {"enabled_for": ["c"]}
    assert deep_merge(base, override)["enabled_for"] == ["c"]


def test_merge_does_not_mutate_inputs() -> None:
    """入力辞書を変更しないこと。"""
    base = {"features": {"dark_mode": {"enabled": True}}}
    override = {"features": {"dark_mode": {"enabled": False}}}
    deep_merge(base, override)
    assert base["features"]["dark_mode"]["enabled"] is True


def test_merge_none_overrides_value() -> None:
    """override の None も値として上書きすること。"""
    base = {"features": {"dark_mode": {"enabled": True, "rollout_percentage": 40}}}
    override = {"features": {"dark_mode": {"rollout_percentage": None}}}
    assert deep_merge(base, override) == {
        "features": {"dark_mode": {"enabled": True, "rollout_percentage": None}}
    }
