"""
cli/i18n/messages/cli_commands.py - CLI Command Messages

Contains translations for the awsnav command help text and argument errors.
"""

from __future__ import annotations

CLI_MESSAGES = {
    # =========================================================================
    # CLI Help Text
    # =========================================================================
    "help_intro": {
        "ko": "여러 계정과 리전의 AWS 리소스를 터미널에서 탐색하는 대화형 내비게이터입니다.",
        "en": "An interactive terminal navigator for AWS resources across accounts and regions.",
    },
    "help_basic_usage": {
        "ko": "[기본 사용법]",
        "en": "[Basic Usage]",
    },
    "help_start_services": {
        "ko": "서비스 목록에서 시작",
        "en": "Start from the service list",
    },
    "help_start_resource": {
        "ko": "특정 리소스 목록에서 시작",
        "en": "Start from a resource list",
    },
    "help_start_detail": {
        "ko": "특정 리소스 상세에서 시작",
        "en": "Start from a resource detail",
    },
    "help_multi": {
        "ko": "여러 프로파일/리전 동시 조회",
        "en": "Browse several profiles and regions at once",
    },
    "help_env": {
        "ko": "[환경 변수]",
        "en": "[Environment]",
    },
    "help_env_config": {
        "ko": "설정 파일 경로",
        "en": "Config file path",
    },
    "help_env_read_only": {
        "ko": "1 또는 true 면 읽기 전용",
        "en": "Read-only when 1 or true",
    },
    # =========================================================================
    # Argument Errors
    # =========================================================================
    "invalid_profile": {
        "ko": "잘못된 프로파일 이름: {name}",
        "en": "Invalid profile name: {name}",
    },
    "invalid_region": {
        "ko": "잘못된 리전: {region}",
        "en": "Invalid region: {region}",
    },
    "resource_id_requires_service": {
        "ko": "--resource-id 는 --service 와 함께 사용해야 합니다",
        "en": "--resource-id requires --service",
    },
    "env_profile_conflict": {
        "ko": "--env 와 --profile 은 함께 사용할 수 없습니다",
        "en": "--env cannot be combined with --profile",
    },
    "not_a_tty": {
        "ko": "대화형 터미널에서 실행해야 합니다",
        "en": "awsnav must run in an interactive terminal",
    },
    "interrupted": {
        "ko": "사용자에 의해 중단되었습니다",
        "en": "Interrupted by user",
    },
}
