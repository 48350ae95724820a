"""圖層名稱 → 元件名稱 / CSS class / 檔名."""

import re


def to_pascal_case(name: str) -> str:
    words = re.sub(r"[^a-zA-Z0-9]", " ", name).split()
    return "".join(w[:1].upper() + w[1:] for w in words)


def sanitize_name(name: str) -> str:
    """合法的元件識別字；以數字開頭時補 Component 前綴."""
    safe = to_pascal_case(name)
    if not safe:
        return "Component"
    if safe[0].isdigit():
        safe = f"Component{safe}"
    return safe


def kebab(name: str) -> str:
    out = []
    for index, ch in enumerate(name):
        if ch.isupper() and index > 0 and name[index - 1].islower():
            out.append("-")
        out.append(ch.lower() if ch.isalnum() else "-")
    slug = "".join(out).strip("-")
    while "--" in slug:
        slug = slug.replace("--", "-")
    return slug or "unnamed"
