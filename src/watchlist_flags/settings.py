"""ロールアウト設定（pydantic BaseModel）と YAML 読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import FeatureFlagErrorCodes, SettingsError
from .hashing import HashAlgorithm
from .merger import deep_merge
from .models import Environment


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class FeatureSection(BaseModel):
    """フィーチャー単位のカタログ上書き。

    明示的に指定したフィールドだけが反映される (model_fields_set)。
    rollout_percentage: null はカタログのロールアウト率を解除する。
    """

    enabled: bool = True
    rollout_percentage: int | None = None
    enabled_for: list[str] = Field(default_factory=list)
    disabled_for: list[str] = Field(default_factory=list)
    environment: Environment = Environment.ALL


class RolloutSettings(BaseModel):
    """フィーチャーフラグ評価器の設定全体。"""

    environment: Literal["development", "staging", "production"] = "development"
    env_prefix: str = "FEATURE_"
    hash_algorithm: HashAlgorithm = HashAlgorithm.FNV1A
    strict_context: bool = True
    features: dict[str, FeatureSection] = Field(default_factory=dict)
    log: LogSection = Field(default_factory=LogSection)

    @property
    def runtime_environment(self) -> Environment:
        return Environment(self.environment)


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(
            code=FeatureFlagErrorCodes.READ_FILE,
            message=f"Failed to read settings file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SettingsError(
            code=FeatureFlagErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(
            code=FeatureFlagErrorCodes.VALIDATION,
            message=f"Settings root must be a mapping: {path}",
        )
    return data


def load_settings(base_path: Path, env_path: Path | None = None) -> RolloutSettings:
    """設定ファイルを読み込んで RolloutSettings を返す。

    base_path: ベース設定ファイルパス（必須）
    env_path: 環境別設定ファイルパス（オプション）。存在する場合はベースにマージ。
    """
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = deep_merge(data, _read_yaml(env_path))
    try:
        return RolloutSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(
            code=FeatureFlagErrorCodes.VALIDATION,
            message=f"Settings validation failed: {e}",
            cause=e,
        ) from e
