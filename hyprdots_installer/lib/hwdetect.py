from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

_GPU_VENDOR_MAP = {
    "0x8086": "intel",
    "0x1002": "amd",
    "0x10de": "nvidia",
}

GPU_VENDORS = tuple(sorted(set(_GPU_VENDOR_MAP.values())))


def detect_gpu(drm_root: str = "/sys/class/drm") -> Dict[str, Any]:
    """Best-effort GPU detection from DRM cards.

    Hybrid laptops expose more than one card, so every vendor is reported.
    """

    gpu: Dict[str, Any] = {"present": False, "vendors": [], "vendor_ids": []}

    drm = Path(drm_root)
    cards = sorted([p for p in drm.glob("card[0-9]*") if p.is_dir() and "-" not in p.name]) if drm.exists() else []
    vendors: List[str] = []
    vendor_ids: List[str] = []
    for card in cards:
        try:
            vendor_id = (card / "device" / "vendor").read_text(encoding="utf-8").strip().lower()
        except OSError:
            continue
        if vendor_id not in vendor_ids:
            vendor_ids.append(vendor_id)
        vendor = _GPU_VENDOR_MAP.get(vendor_id)
        if vendor and vendor not in vendors:
            vendors.append(vendor)

    gpu["present"] = bool(vendor_ids)
    gpu["vendors"] = vendors
    gpu["vendor_ids"] = vendor_ids

    logger.info("GPU: vendors=%s", ",".join(vendors) or "none")
    return gpu
