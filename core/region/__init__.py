"""
core/region - 리전 데이터와 가용 리전 조회

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = ["ALL_REGIONS", "REGION_NAMES", "COMMON_REGIONS", "get_available_regions", "order_regions"]


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in ("ALL_REGIONS", "REGION_NAMES", "COMMON_REGIONS"):
        from . import data

        return getattr(data, name)
    if name in ("get_available_regions", "order_regions"):
        from . import availability

        return getattr(availability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
