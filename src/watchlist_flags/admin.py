"""管理ダッシュボード向けの操作"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from .client import FeatureFlagClientProtocol
from .exceptions import ConfigurationError
from .models import EvaluationResult, Feature, parse_feature
from .store import parse_env_bool

logger = structlog.stdlib.get_logger(__name__)


def _parse_enabled(feature: Feature, value: object) -> bool:
    """ダッシュボードから届いた enabled を真偽値にする。

    bool と "true"/"false" 文字列だけを受け付け、それ以外は ConfigurationError。
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        parsed = parse_env_bool(value)
        if parsed is not None:
            return parsed
    raise ConfigurationError(
        f"enabled for {feature.name} must be a boolean, got {value!r}"
    )


class FlagAdmin:
    """管理画面からの参照・トグル操作をクライアントに委譲する。

    ダッシュボードはロールアウト率の編集をローカルに保持するが、
    確定されるのは enabled だけ。ロールアウト率の変更は反映しない。
    """

    def __init__(self, client: FeatureFlagClientProtocol) -> None:
        self._client = client

    def list_flags(self) -> list[dict[str, Any]]:
        """全フィーチャー設定を表示用の行として返す。"""
        rows: list[dict[str, Any]] = []
        for feature, config in self._client.flags().items():
            row: dict[str, Any] = {"feature": feature.value}
            row.update(config.to_dict())
            rows.append(row)
        return rows

    def toggle(self, feature_name: str, enabled: bool | str) -> Feature:
        """1 フィーチャーの enabled を確定する。古い識別子は UnknownFeatureError。"""
        feature = parse_feature(feature_name)
        self._client.override_flag(feature, _parse_enabled(feature, enabled))
        return feature

    def save_changes(self, edits: Mapping[str, Mapping[str, Any]]) -> list[Feature]:
        """ダッシュボードの編集内容を保存する。

        各フィーチャーの enabled だけを override_flag で確定する。
        現在値と異なるロールアウト率の編集は破棄し、そのフィーチャーの一覧を返す。
        """
        current = self._client.flags()
        # 全識別子と enabled の値を検証してから確定する
        parsed: list[tuple[Feature, Mapping[str, Any], bool | None]] = []
        for name, edit in edits.items():
            feature = parse_feature(name)
            enabled = None
            if "enabled" in edit:
                enabled = _parse_enabled(feature, edit["enabled"])
            parsed.append((feature, edit, enabled))

        dropped: list[Feature] = []
        for feature, edit, enabled in parsed:
            if enabled is not None:
                self._client.override_flag(feature, enabled)
            if "rollout_percentage" not in edit:
                continue
            live = current.get(feature)
            if live is None or edit["rollout_percentage"] != live.rollout_percentage:
                dropped.append(feature)

        if dropped:
            logger.warning(
                "rollout percentage edits are not persisted",
                features=[f.value for f in dropped],
            )
        return dropped

    def explain(self, feature_name: str, user_id: str | None = None) -> EvaluationResult:
        """指定ユーザーに対する評価結果を理由付きで返す。"""
        return self._client.evaluate(feature_name, user_id)
