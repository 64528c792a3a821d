"""ロールアウト用の安定ハッシュとバケット割り当て

ここで定義するアルゴリズムは公開契約の一部。変更すると全ユーザーの
バケットが一斉に入れ替わるため、既存アルゴリズムは変更せず追加のみ行う。
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from .models import Feature

FNV_OFFSET_BASIS_32 = 0x811C9DC5
FNV_PRIME_32 = 0x01000193
BUCKET_COUNT = 100

_UINT32_MASK = 0xFFFFFFFF


class HashAlgorithm(str, Enum):
    """バケット割り当てに使うハッシュアルゴリズム。"""

    # UTF-8("<user_id>:<FEATURE_NAME>") の 32bit FNV-1a
    FNV1A = "fnv1a"
    # 旧フロントエンド互換: UTF-16("<user_id>-<feature_value>") の h*31+c（符号付き 32bit）
    LEGACY = "legacy"


def fnv1a_32(data: bytes) -> int:
    """32bit FNV-1a ハッシュ。"""
    h = FNV_OFFSET_BASIS_32
    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME_32) & _UINT32_MASK
    return h


def legacy_string_hash(text: str) -> int:
    """旧実装の文字列ハッシュを再現する。

    UTF-16 コードユニットごとに h = h * 31 + c を 32bit で折り返し、
    符号付き 32bit 整数として返す。
    """
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & _UINT32_MASK
    if h & 0x80000000:
        return h - 0x100000000
    return h


def rollout_key(
    user_id: str, feature: Feature, algorithm: HashAlgorithm = HashAlgorithm.FNV1A
) -> str:
    """ハッシュ入力となるキー文字列を返す。"""
    if algorithm == HashAlgorithm.LEGACY:
        return f"{user_id}-{feature.value}"
    return f"{user_id}:{feature.name}"


def stable_hash(
    user_id: str, feature: Feature, algorithm: HashAlgorithm = HashAlgorithm.FNV1A
) -> int:
    """(user_id, feature) の決定的ハッシュ値。

    FNV1A は非負、LEGACY は旧実装どおり負値になり得る。
    """
    key = rollout_key(user_id, feature, algorithm)
    if algorithm == HashAlgorithm.LEGACY:
        return legacy_string_hash(key)
    return fnv1a_32(key.encode("utf-8"))


@lru_cache(maxsize=4096)
def bucket(
    user_id: str, feature: Feature, algorithm: HashAlgorithm = HashAlgorithm.FNV1A
) -> int:
    """ユーザーのバケット番号 (0..99) を返す。"""
    # Python の剰余は常に非負なので LEGACY の負のハッシュも旧実装と同じ値になる
    return stable_hash(user_id, feature, algorithm) % BUCKET_COUNT
