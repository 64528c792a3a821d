"""EvaluationContext: セッション単位のフラグ評価 API"""

from __future__ import annotations

import structlog

from .exceptions import ContextUnboundError, UnknownFeatureError
from .hashing import HashAlgorithm
from .models import (
    EvaluationReason,
    EvaluationResult,
    Feature,
    FeatureConfig,
    parse_feature,
)
from .policy import evaluate
from .store import ConfigurationStore

logger = structlog.stdlib.get_logger(__name__)


class EvaluationContext:
    """現在のユーザーと ConfigurationStore を保持する評価コンテキスト。

    ストアは明示的に渡す。プロセス全体で共有されるグローバル状態は持たない。
    strict=True のとき、ストア未設定での呼び出しは ContextUnboundError を送出する。
    strict=False のときはエラーログを出して無効（False）として扱う。
    """

    def __init__(
        self,
        store: ConfigurationStore | None = None,
        user_id: str | None = None,
        algorithm: HashAlgorithm = HashAlgorithm.FNV1A,
        strict: bool = True,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._algorithm = HashAlgorithm(algorithm)
        self._strict = strict

    @property
    def store(self) -> ConfigurationStore | None:
        return self._store

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    def bind(self, store: ConfigurationStore) -> None:
        """ストアを丸ごと差し替える（再構成）。"""
        self._store = store

    def set_user_identity(self, user_id: str) -> None:
        """以降の評価で使うセッションユーザーを設定する。"""
        self._user_id = user_id
        logger.debug("user identity bound", user_id=user_id)

    def _require_store(self, operation: str) -> ConfigurationStore | None:
        if self._store is not None:
            return self._store
        if self._strict:
            raise ContextUnboundError(operation)
        logger.error("evaluation context is not bound to a store", operation=operation)
        return None

    def evaluate(
        self, feature: Feature | str, user_id: str | None = None
    ) -> EvaluationResult:
        """評価結果を理由付きで返す。未知のフィーチャーは無効として扱う。"""
        return self._evaluate(feature, user_id, "evaluate")

    def _evaluate(
        self, feature: Feature | str, user_id: str | None, operation: str
    ) -> EvaluationResult:
        store = self._require_store(operation)
        if store is None:
            return EvaluationResult(None, False, EvaluationReason.CONTEXT_UNBOUND)
        try:
            resolved = parse_feature(feature)
            config = store.get(resolved)
        except UnknownFeatureError:
            logger.warning(
                "unknown feature evaluated as disabled", feature=repr(feature)
            )
            return EvaluationResult(None, False, EvaluationReason.UNKNOWN_FEATURE)

        effective_user = user_id or self._user_id
        result = evaluate(resolved, config, effective_user, self._algorithm)
        logger.debug(
            "feature evaluated",
            feature=resolved.value,
            user_id=effective_user,
            enabled=result.enabled,
            reason=result.reason,
        )
        return result

    def is_enabled(self, feature: Feature | str, user_id: str | None = None) -> bool:
        """フィーチャーが有効かを返す。

        user_id を省略するとセッションユーザー、それも無ければ匿名で評価する。
        """
        return self._evaluate(feature, user_id, "is_enabled").enabled

    def override_flag(self, feature: Feature | str, enabled: bool) -> None:
        """フィーチャーの enabled だけを更新する。未知の識別子は UnknownFeatureError。"""
        store = self._require_store("override_flag")
        if store is None:
            return
        store.override(parse_feature(feature), enabled)

    def flags(self) -> dict[Feature, FeatureConfig]:
        """管理画面向けに全フィーチャー設定を返す。"""
        store = self._require_store("flags")
        if store is None:
            return {}
        return store.snapshot()
