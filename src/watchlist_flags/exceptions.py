"""watchlist_flags ライブラリの例外型定義"""

from __future__ import annotations


class FeatureFlagError(Exception):
    """watchlist_flags ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class FeatureFlagErrorCodes:
    """エラーコード定数。"""

    CONFIG_ERROR: str = "CONFIG_ERROR"
    UNKNOWN_FEATURE: str = "UNKNOWN_FEATURE"
    CONTEXT_UNBOUND: str = "CONTEXT_UNBOUND"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class ConfigurationError(FeatureFlagError):
    """フィーチャー設定が不変条件を満たさない（起動時に致命的）。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FeatureFlagErrorCodes.CONFIG_ERROR, message, cause)


class UnknownFeatureError(FeatureFlagError):
    """カタログに存在しないフィーチャー識別子。"""

    def __init__(self, feature: object) -> None:
        super().__init__(
            FeatureFlagErrorCodes.UNKNOWN_FEATURE,
            f"Unknown feature: {feature!r}",
        )
        self.feature = feature


class ContextUnboundError(FeatureFlagError):
    """ConfigurationStore が未初期化のまま評価コンテキストが使われた。"""

    def __init__(self, operation: str) -> None:
        super().__init__(
            FeatureFlagErrorCodes.CONTEXT_UNBOUND,
            f"{operation} called before the configuration store was initialized",
        )


class SettingsError(FeatureFlagError):
    """設定ファイルの読み込み・検証エラー。"""
