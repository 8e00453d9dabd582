from __future__ import annotations

from typing import Any, Dict, List, Optional

from models.schema import FIELD_REGION_ID


def _norm(v: Any) -> str:
    return str(v or "").strip().casefold()


def region_names(regions: List[Dict[str, Any]]) -> Dict[str, str]:
    return {r["id"]: str(r.get("name") or "") for r in regions if r.get("id")}


def search_items(
    items: List[Dict[str, Any]],
    regions: List[Dict[str, Any]],
    query: str = "",
    region_id: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 200,
) -> List[Dict[str, Any]]:
    """
    Filter the live item list for the search tab.

    - `query` matches case-insensitively as a substring of name or category
    - `region_id` and `category` are exact filters (category ignores case)
    - results are sorted by name and carry `regionName` (None if the region is gone)
    """
    names = region_names(regions)
    q = _norm(query)
    cat = _norm(category)

    out: List[Dict[str, Any]] = []
    for it in items:
        if region_id and it.get(FIELD_REGION_ID) != region_id:
            continue
        if cat and _norm(it.get("category")) != cat:
            continue
        if q and q not in _norm(it.get("name")) and q not in _norm(it.get("category")):
            continue
        out.append({**it, "regionName": names.get(it.get(FIELD_REGION_ID) or "")})

    out.sort(key=lambda r: (_norm(r.get("name")), r.get("id") or ""))
    return out[: max(0, int(limit))]


def region_usage(items: List[Dict[str, Any]], regions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = {}
    for it in items:
        rid = it.get(FIELD_REGION_ID)
        if rid:
            counts[rid] = counts.get(rid, 0) + 1
    return [{**r, "itemCount": counts.get(r["id"], 0)} for r in regions]


def categories(items: List[Dict[str, Any]]) -> List[str]:
    seen = {str(it.get("category")).strip() for it in items if str(it.get("category") or "").strip()}
    return sorted(seen, key=lambda c: (c.casefold(), c))
