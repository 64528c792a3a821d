"""設定辞書のディープマージ"""

from __future__ import annotations

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """base に override を重ねた新しい辞書を返す。

    override 側の None もそのまま上書きする（ロールアウト率の解除など）。
    リスト（許可・拒否リスト）は要素単位でマージせず丸ごと置き換える。
    """
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged
