"""
core/region/data.py - AWS 리전 데이터

리전 목록 API 호출이 실패했을 때 사용하는 정적 리전 목록입니다.
"""

# 전체 상용 리전 (알파벳순)
ALL_REGIONS: list[str] = [
    "af-south-1",
    "ap-east-1",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    "ap-south-1",
    "ap-south-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-southeast-3",
    "ap-southeast-4",
    "ap-southeast-5",
    "ca-central-1",
    "ca-west-1",
    "eu-central-1",
    "eu-central-2",
    "eu-north-1",
    "eu-south-1",
    "eu-south-2",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "il-central-1",
    "me-central-1",
    "me-south-1",
    "mx-central-1",
    "sa-east-1",
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
]

# 선택 화면 상단에 표시할 주요 리전
COMMON_REGIONS: list[str] = [
    "us-east-1",
    "us-west-2",
    "ap-northeast-2",
    "ap-northeast-1",
    "eu-west-1",
    "eu-central-1",
]

REGION_NAMES: dict[str, str] = {
    "us-east-1": "미국 동부 (버지니아 북부)",
    "us-east-2": "미국 동부 (오하이오)",
    "us-west-1": "미국 서부 (캘리포니아 북부)",
    "us-west-2": "미국 서부 (오레곤)",
    "ap-northeast-1": "아시아 태평양 (도쿄)",
    "ap-northeast-2": "아시아 태평양 (서울)",
    "ap-northeast-3": "아시아 태평양 (오사카)",
    "ap-southeast-1": "아시아 태평양 (싱가포르)",
    "ap-southeast-2": "아시아 태평양 (시드니)",
    "ap-south-1": "아시아 태평양 (뭄바이)",
    "ca-central-1": "캐나다 (중부)",
    "eu-central-1": "유럽 (프랑크푸르트)",
    "eu-west-1": "유럽 (아일랜드)",
    "eu-west-2": "유럽 (런던)",
    "eu-west-3": "유럽 (파리)",
    "eu-north-1": "유럽 (스톡홀름)",
    "sa-east-1": "남아메리카 (상파울루)",
}
