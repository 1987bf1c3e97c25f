# core/__init__.py
"""
core - awsnav 코어

TUI 와 무관한 AWS 탐색 인프라를 포함하는 최상위 패키지입니다.

아키텍처:
    core/
    ├── auth/           # 세션, 프로파일, 계정 ID 조회
    ├── dao/            # 리소스/DAO 계약과 출처 래퍼
    ├── parallel/       # 리전 x 프로파일 팬아웃 (executor, retry)
    ├── region/         # 리전 데이터 및 가용성
    ├── registry/       # 리소스 레지스트리, 페이지네이션/팬아웃 래퍼
    ├── resources/      # 내장 boto3 어댑터 (ec2, s3, cloudformation, logs, lambda)
    ├── config.py       # 설정 파일과 환경변수
    ├── context.py      # 선택 상태 (리전, 프로파일, 계정 ID)
    ├── refresh.py      # 비동기 갱신 조정
    ├── render.py       # 렌더러 계약
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.context import AppContext
    from core.dao import RequestContext
    from core.registry import get_registry

    app = AppContext(regions=["ap-northeast-2"])
    registry = get_registry()
    dao = registry.create_dao(RequestContext(app), "ec2", "instances")
    for resource in dao.list():
        print(resource.get_name())
"""

from core import auth, config, context, dao, exceptions, parallel, region, registry

__all__: list[str] = [
    # 서브패키지
    "auth",
    "dao",
    "parallel",
    "region",
    "registry",
    # 모듈
    "config",
    "context",
    "exceptions",
]
