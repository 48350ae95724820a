"""設定檔載入與基本驗證."""

import json
import os
from pathlib import Path
from typing import Any, Optional

from .cache import DEFAULT_MAX_SIZE, DEFAULT_SWEEP_INTERVAL, DEFAULT_TTL, ComponentCache
from .options import FRAMEWORKS, STYLINGS, CustomCode, GenerationOptions
from .token_exporter import EXPORT_FORMATS

DEFAULT_CONFIG_PATH = "figcode.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "generation", "cache", "export"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "fileKey", "nodeId"},
    "generation": {
        "framework", "styling", "typescript", "accessibility", "responsive",
        "optimizeImages", "includeComments", "outputDir", "customCode",
    },
    "cache": {"enabled", "ttlSeconds", "maxSize", "sweepIntervalSeconds"},
    "export": {"format", "prefix", "includeComments", "outputDir"},
}

_CUSTOM_CODE_KEYS = {"markup", "stylesheet", "advancedStylesheet", "imports"}

_BOOL_KEYS = {
    "generation": ("typescript", "accessibility", "responsive", "optimizeImages", "includeComments"),
    "cache": ("enabled",),
    "export": ("includeComments",),
}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 JSON 物件，已忽略")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    generation = _section(cfg, "generation")
    framework = generation.get("framework")
    if framework and framework not in FRAMEWORKS:
        _warn(f"generation.framework '{framework}' 不在已知值中（{', '.join(FRAMEWORKS)}）")
    styling = generation.get("styling")
    if styling and styling not in STYLINGS:
        _warn(f"generation.styling '{styling}' 不在已知值中（{', '.join(STYLINGS)}）")

    custom = generation.get("customCode", {})
    if not isinstance(custom, dict):
        _warn("generation.customCode 應為 JSON 物件")
    else:
        for key, value in custom.items():
            if key not in _CUSTOM_CODE_KEYS:
                _warn(f"[generation.customCode] 未知欄位 '{key}'（已知欄位：{', '.join(sorted(_CUSTOM_CODE_KEYS))}）")
            elif not isinstance(value, str):
                _warn(f"generation.customCode.{key} 應為字串，目前是 {type(value).__name__}")

    # 布林值類型
    for section, keys in _BOOL_KEYS.items():
        section_cfg = _section(cfg, section)
        for key in keys:
            val = section_cfg.get(key)
            if val is not None and not isinstance(val, bool):
                _warn(f"{section}.{key} 應為布林值，目前是 {type(val).__name__}")

    # cache 數值
    cache = _section(cfg, "cache")
    for key in ("ttlSeconds", "maxSize", "sweepIntervalSeconds"):
        val = cache.get(key)
        if val is None:
            continue
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            _warn(f"cache.{key} 應為數字，目前是 {type(val).__name__}")
        elif val <= 0 and key != "sweepIntervalSeconds":
            _warn(f"cache.{key} 應大於 0，目前是 {val}")

    fmt = _section(cfg, "export").get("format")
    if fmt and fmt not in EXPORT_FORMATS:
        _warn(f"export.format '{fmt}' 不在已知值中（{', '.join(EXPORT_FORMATS)}）")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        _warn(f"'{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


# ─── runtime objects ─────────────────────────────────────────

def _section(cfg: dict, name: str) -> dict:
    value = (cfg or {}).get(name, {})
    return value if isinstance(value, dict) else {}


def _flag(section: dict, key: str, default: bool) -> bool:
    value = section.get(key)
    return value if isinstance(value, bool) else default


def _number(section: dict, key: str, default: float) -> float:
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def figma_token(cfg: dict) -> Optional[str]:
    """FIGMA_TOKEN 環境變數優先，其次 figma.personalAccessToken."""
    return os.environ.get("FIGMA_TOKEN") or _section(cfg, "figma").get("personalAccessToken")


def options_from_config(cfg: dict, **overrides) -> GenerationOptions:
    """generation 區塊 → GenerationOptions；overrides 為 None 的項目沿用設定檔."""
    generation = _section(cfg, "generation")
    defaults = GenerationOptions()
    custom = generation.get("customCode")
    custom = custom if isinstance(custom, dict) else {}

    values = {
        "framework": generation.get("framework") or defaults.framework,
        "styling": generation.get("styling") or defaults.styling,
        "typescript": _flag(generation, "typescript", defaults.typescript),
        "accessibility": _flag(generation, "accessibility", defaults.accessibility),
        "responsive": _flag(generation, "responsive", defaults.responsive),
        "optimize_images": _flag(generation, "optimizeImages", defaults.optimize_images),
        "include_comments": _flag(generation, "includeComments", defaults.include_comments),
        "custom_code": CustomCode(
            markup=str(custom.get("markup", "") or ""),
            stylesheet=str(custom.get("stylesheet", "") or ""),
            advanced_stylesheet=str(custom.get("advancedStylesheet", "") or ""),
            imports=str(custom.get("imports", "") or ""),
        ),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return GenerationOptions(**values)


def cache_from_config(cfg: dict) -> Optional[ComponentCache]:
    """cache.enabled 為 false 時回傳 None."""
    cache = _section(cfg, "cache")
    if not _flag(cache, "enabled", True):
        return None
    sweep = _number(cache, "sweepIntervalSeconds", DEFAULT_SWEEP_INTERVAL)
    max_size = int(_number(cache, "maxSize", DEFAULT_MAX_SIZE))
    return ComponentCache(
        ttl=_number(cache, "ttlSeconds", DEFAULT_TTL),
        max_size=max_size if max_size >= 1 else DEFAULT_MAX_SIZE,
        sweep_interval=sweep if sweep > 0 else None,
    )
