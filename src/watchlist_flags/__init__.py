"""watchlist feature flag library."""

from .admin import FlagAdmin
from .bootstrap import create_context, create_store
from .catalog import defaults
from .client import FeatureFlagClientProtocol
from .context import EvaluationContext
from .exceptions import (
    ConfigurationError,
    ContextUnboundError,
    FeatureFlagError,
    FeatureFlagErrorCodes,
    SettingsError,
    UnknownFeatureError,
)
from .hashing import HashAlgorithm, bucket, stable_hash
from .logger import new_logger
from .models import (
    Environment,
    EvaluationReason,
    EvaluationResult,
    Feature,
    FeatureConfig,
    parse_feature,
)
from .policy import decide, evaluate
from .settings import RolloutSettings, load_settings
from .store import ConfigurationStore

__all__ = [
    "ConfigurationError",
    "ConfigurationStore",
    "ContextUnboundError",
    "Environment",
    "EvaluationContext",
    "EvaluationReason",
    "EvaluationResult",
    "Feature",
    "FeatureConfig",
    "FeatureFlagClientProtocol",
    "FeatureFlagError",
    "FeatureFlagErrorCodes",
    "FlagAdmin",
    "HashAlgorithm",
    "RolloutSettings",
    "SettingsError",
    "UnknownFeatureError",
    "bucket",
    "create_context",
    "create_store",
    "decide",
    "defaults",
    "evaluate",
    "load_settings",
    "new_logger",
    "parse_feature",
    "stable_hash",
]
