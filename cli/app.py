# cli/app.py
"""
awsnav 진입점 (click)

인자를 검증하고 설정/컨텍스트/레지스트리를 구성한 뒤 내비게이터를 실행합니다.

    awsnav                                  서비스 목록에서 시작
    awsnav -s ec2/instances                 리소스 목록에서 시작
    awsnav -s ec2 -i i-0abc1234             리소스 상세에서 시작
    awsnav -p dev,prod -r ap-northeast-2    여러 프로파일 동시 조회

인자 오류는 TUI 진입 전에 콘솔로 출력하고 종료 코드 1로 끝납니다.
"""

from __future__ import annotations

import logging
import sys

import click

from cli.i18n import t
from cli.tui import NavigatorApp, Runtime, StartupPath
from cli.ui import console, print_error, print_warning, setup_logging
from core.config import (
    NavConfig,
    get_default_region,
    get_env_bool,
    get_version,
    is_valid_profile_name,
    is_valid_region,
    load_config,
    set_config,
    settings,
)
from core.context import AppContext, ProfileSelection
from core.registry import FetchPolicy, Registry, get_registry

logger = logging.getLogger(__name__)


# =============================================================================
# 인자 해석
# =============================================================================


def _split_values(values: tuple[str, ...] | list[str]) -> list[str]:
    """반복/쉼표 구분 값을 순서 유지하며 펼침 (중복 제거)"""
    result: list[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part and part not in result:
                result.append(part)
    return result


def _fail(message: str) -> None:
    print_error(message)
    raise SystemExit(1)


def resolve_selections(profiles: list[str], env_only: bool, config: NavConfig) -> list[ProfileSelection]:
    """프로파일 선택 결정

    우선순위: --env > --profile > 설정 파일 startup.profiles > SDK 기본 체인
    """
    if env_only:
        return [ProfileSelection.env_only()]
    names = profiles or config.startup.profiles
    if names:
        return [ProfileSelection.named(name) for name in names]
    return [ProfileSelection.sdk_default()]


def resolve_regions(regions: list[str], config: NavConfig) -> list[str]:
    """리전 결정

    우선순위: --region > 설정 파일 startup.regions > AWS_REGION 환경변수.
    모두 없으면 빈 목록이고, 세션 초기화에서 프로파일 리전으로 채웁니다.
    """
    if regions:
        return regions
    if config.startup.regions:
        return list(config.startup.regions)
    default_region = get_default_region()
    return [default_region] if default_region else []


def parse_startup_path(service: str | None, resource_id: str | None) -> StartupPath | None:
    """--service / --resource-id 를 시작 경로로 변환 (해석은 앱에서)"""
    if not service:
        return None
    service_name, _, resource_type = service.strip().partition("/")
    return StartupPath(service_name, resource_type, (resource_id or "").strip())


def configure_registry(registry: Registry, config: NavConfig) -> Registry:
    """설정의 기본 리소스와 목록 상한 적용"""
    registry.set_user_defaults(config.defaults)
    registry.policy = FetchPolicy.from_config(config)
    return registry


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _build_help_text() -> str:
    """help 텍스트 생성"""
    lines = [
        "awsnav - AWS Navigator",
        "",
        t("cli.help_intro"),
        "",
        "\b",  # Click keeps line breaks
        t("cli.help_basic_usage"),
        f"  awsnav                                {t('cli.help_start_services')}",
        f"  awsnav -s ec2/instances               {t('cli.help_start_resource')}",
        f"  awsnav -s ec2 -i i-0abc1234           {t('cli.help_start_detail')}",
        f"  awsnav -p dev,prod -r ap-northeast-2  {t('cli.help_multi')}",
        "",
        "\b",
        t("cli.help_env"),
        f"  {settings.CONFIG_ENV_VAR}      {t('cli.help_env_config')}",
        f"  {settings.READ_ONLY_ENV_VAR}   {t('cli.help_env_read_only')}",
    ]
    return "\n".join(lines)


# =============================================================================
# 명령
# =============================================================================


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(get_version(), "--version", prog_name="awsnav")
@click.option(
    "-p",
    "--profile",
    "profiles",
    multiple=True,
    help="AWS 프로파일 (쉼표 구분, 다중 가능)",
)
@click.option(
    "-r",
    "--region",
    "regions",
    multiple=True,
    help="리전 (쉼표 구분, 다중 가능)",
)
@click.option("-s", "--service", default=None, help="시작 서비스 또는 service/resource (별칭 가능)")
@click.option("-i", "--resource-id", default=None, help="시작 리소스 ID (--service 필요)")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help=f"설정 파일 경로 (기본: ${settings.CONFIG_ENV_VAR} 또는 ~/.config/awsnav/config.yaml)",
)
@click.option("-l", "--log-file", default=None, type=click.Path(dir_okay=False), help="로그 파일 경로")
@click.option("--read-only", is_flag=True, help="읽기 전용 모드 (삭제 등 변경 작업 차단)")
@click.option("-e", "--env", "env_only", is_flag=True, help="환경변수 자격 증명만 사용 (설정 파일 무시)")
@click.option(
    "--lang",
    type=click.Choice(["ko", "en"]),
    default="ko",
    help="UI 언어 설정 / UI language (ko: 한국어, en: English)",
)
def cli(
    profiles: tuple[str, ...],
    regions: tuple[str, ...],
    service: str | None,
    resource_id: str | None,
    config_path: str | None,
    log_file: str | None,
    read_only: bool,
    env_only: bool,
    lang: str,
) -> None:
    from cli.i18n import set_lang

    set_lang(lang)

    profile_names = _split_values(profiles)
    region_names = _split_values(regions)

    for name in profile_names:
        if not is_valid_profile_name(name):
            _fail(t("cli.invalid_profile", name=name))
    for region in region_names:
        if not is_valid_region(region):
            _fail(t("cli.invalid_region", region=region))
    if resource_id and not service:
        _fail(t("cli.resource_id_requires_service"))
    if env_only and profile_names:
        _fail(t("cli.env_profile_conflict"))
    if not _is_interactive():
        _fail(t("cli.not_a_tty"))

    setup_logging(log_file, tui=True)
    config = load_config(config_path)
    set_config(config)

    read_only = read_only or get_env_bool(settings.READ_ONLY_ENV_VAR)
    app_ctx = AppContext(
        regions=resolve_regions(region_names, config),
        selections=resolve_selections(profile_names, env_only, config),
        read_only=read_only,
    )
    registry = configure_registry(get_registry(), config)
    startup_path = parse_startup_path(service, resource_id)

    logger.info(
        f"awsnav {get_version()} 시작: profiles={[s.display_name for s in app_ctx.get_selections()]}, "
        f"regions={app_ctx.get_regions()}, read_only={read_only}"
    )

    app = NavigatorApp(app_ctx, registry, config, startup_path)
    try:
        Runtime(app, console).run()
    except KeyboardInterrupt:
        print_warning(t("cli.interrupted"))
        raise SystemExit(130) from None


# help 텍스트 동적 설정
cli.help = _build_help_text()
