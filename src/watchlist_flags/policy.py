"""ロールアウトポリシー（評価関数）"""

from __future__ import annotations

from .hashing import HashAlgorithm, bucket
from .models import EvaluationReason, EvaluationResult, Feature, FeatureConfig


def evaluate(
    feature: Feature,
    config: FeatureConfig,
    user_id: str | None = None,
    algorithm: HashAlgorithm = HashAlgorithm.FNV1A,
) -> EvaluationResult:
    """フィーチャー設定とユーザーから評価結果を求める。

    先に一致した規則が優先される:
    マスタースイッチ off → 拒否リスト → 許可リスト → ロールアウト率 → enabled。
    空文字列の user_id は匿名として扱う。
    """
    if not config.enabled:
        return EvaluationResult(feature, False, EvaluationReason.FLAG_DISABLED)
    if user_id and user_id in config.disabled_for:
        return EvaluationResult(feature, False, EvaluationReason.USER_DENIED)
    if user_id and user_id in config.enabled_for:
        return EvaluationResult(feature, True, EvaluationReason.USER_ALLOWED)
    if config.rollout_percentage is not None and user_id:
        b = bucket(user_id, feature, algorithm)
        if b < config.rollout_percentage:
            return EvaluationResult(feature, True, EvaluationReason.ROLLOUT_INCLUDED, b)
        return EvaluationResult(feature, False, EvaluationReason.ROLLOUT_EXCLUDED, b)
    return EvaluationResult(feature, True, EvaluationReason.FLAG_ENABLED)


def decide(
    feature: Feature,
    config: FeatureConfig,
    user_id: str | None = None,
    algorithm: HashAlgorithm = HashAlgorithm.FNV1A,
) -> bool:
    """フィーチャーが表示対象かを返す。"""
    return evaluate(feature, config, user_id, algorithm).enabled
