"""FeatureFlagClient プロトコル"""

from __future__ import annotations

from typing import Protocol

from .models import EvaluationResult, Feature, FeatureConfig


class FeatureFlagClientProtocol(Protocol):
    """フィーチャーフラグクライアントプロトコル。

    管理画面などの利用側はこのプロトコルだけに依存する。
    """

    def is_enabled(self, feature: Feature | str, user_id: str | None = None) -> bool: ...

    def evaluate(
        self, feature: Feature | str, user_id: str | None = None
    ) -> EvaluationResult: ...

    def set_user_identity(self, user_id: str) -> None: ...

    def override_flag(self, feature: Feature | str, enabled: bool) -> None: ...

    def flags(self) -> dict[Feature, FeatureConfig]: ...
