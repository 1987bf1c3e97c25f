"""
cli/i18n/messages/tui.py - 내비게이터 화면 메시지

헤더, 상태 표시줄, 각 뷰의 제목과 키 도움말 문구입니다.
"""

from __future__ import annotations

TUI_MESSAGES = {
    # =========================================================================
    # 헤더 / 상태
    # =========================================================================
    "aws_initializing": {
        "ko": "AWS 초기화 중...",
        "en": "AWS initializing...",
    },
    "refreshing_profile": {
        "ko": "프로파일 갱신 중...",
        "en": "Refreshing profile...",
    },
    "profile_error": {
        "ko": "⚠ 프로파일 오류",
        "en": "⚠ Profile error",
    },
    "profile": {
        "ko": "프로파일",
        "en": "Profile",
    },
    "regions": {
        "ko": "리전",
        "en": "Regions",
    },
    "loading": {
        "ko": "불러오는 중...",
        "en": "Loading...",
    },
    "regions_changed": {
        "ko": "리전 변경: {regions}",
        "en": "Regions changed: {regions}",
    },
    "resource_not_found": {
        "ko": "리소스를 찾을 수 없습니다: {id}",
        "en": "Resource not found: {id}",
    },
    # =========================================================================
    # 시작 경고
    # =========================================================================
    "warnings_title": {
        "ko": "시작 경고 ({count})",
        "en": "Startup warnings ({count})",
    },
    "warnings_dismiss": {
        "ko": "아무 키나 눌러 계속",
        "en": "Press any key to continue",
    },
    "warnings_wait": {
        "ko": "화면 준비 중...",
        "en": "Preparing screen...",
    },
    # =========================================================================
    # 서비스 목록
    # =========================================================================
    "services_title": {
        "ko": "서비스",
        "en": "Services",
    },
    "no_matches": {
        "ko": "일치하는 항목이 없습니다",
        "en": "No matches",
    },
    "services_hint": {
        "ko": "enter 열기 · / 필터 · c 필터 해제 · : 명령 · ? 도움말",
        "en": "enter open · / filter · c clear · : command · ? help",
    },
    # =========================================================================
    # 리소스 목록
    # =========================================================================
    "partial_failure": {
        "ko": "{total}개 대상 중 {failed}개 조회 실패: {first}",
        "en": "{failed} of {total} target(s) failed: {first}",
    },
    "deleted": {
        "ko": "삭제됨: {name}",
        "en": "Deleted: {name}",
    },
    "diff_expected": {
        "ko": "현재 목록의 리소스 이름",
        "en": "a resource name in the current list",
    },
    "confirm_delete": {
        "ko": "{kind} '{name}' 을(를) 삭제할까요?",
        "en": "Delete {kind} '{name}'?",
    },
    "truncated": {
        "ko": "(일부만 표시)",
        "en": "(truncated)",
    },
    "marked": {
        "ko": "[표시: {name}]",
        "en": "[marked: {name}]",
    },
    "no_resources": {
        "ko": "리소스가 없습니다",
        "en": "No resources",
    },
    "browser_hint": {
        "ko": "enter 상세 · / 필터 · a 작업 · m 비교 표시 · ctrl+r 새로고침 · tab 리소스 전환",
        "en": "enter detail · / filter · a actions · m mark · ctrl+r refresh · tab switch",
    },
    "more_available": {
        "ko": "(아래로 이동하면 더 불러옴)",
        "en": "(scroll down for more)",
    },
    "loading_more": {
        "ko": "(더 불러오는 중...)",
        "en": "(loading more...)",
    },
    # =========================================================================
    # 작업 메뉴
    # =========================================================================
    "actions_title": {
        "ko": "작업: {name}",
        "en": "Actions: {name}",
    },
    "actions_hint": {
        "ko": "단축키 또는 enter 실행 · esc 취소",
        "en": "shortcut or enter to run · esc cancel",
    },
    "no_actions": {
        "ko": "실행할 수 있는 작업이 없습니다",
        "en": "No actions available",
    },
    "action_confirm": {
        "ko": "{name} 에 '{action}' 을(를) 실행할까요?",
        "en": "Run '{action}' on {name}?",
    },
    "action_danger": {
        "ko": "위험: {action} → {token}",
        "en": "DANGER: {action} → {token}",
    },
    "action_type_confirm": {
        "ko": "확인하려면 '{suffix}' 입력 후 enter",
        "en": "Type '{suffix}' and press enter to confirm",
    },
    "action_done": {
        "ko": "{action} 완료: {name}",
        "en": "{action} done: {name}",
    },
    # =========================================================================
    # 확인 / 상세 / 비교
    # =========================================================================
    "confirm_title": {
        "ko": "확인",
        "en": "Confirm",
    },
    "confirm_hint": {
        "ko": "y 실행 · n 취소",
        "en": "y confirm · n cancel",
    },
    "refreshed": {
        "ko": "새로고침 완료",
        "en": "Refreshed",
    },
    "detail_hint": {
        "ko": "j/k 스크롤 · ctrl+r 새로고침 · esc 뒤로",
        "en": "j/k scroll · ctrl+r refresh · esc back",
    },
    "no_differences": {
        "ko": "차이가 없습니다",
        "en": "No differences",
    },
    "scroll_hint": {
        "ko": "j/k 스크롤 · g/G 처음/끝 · esc 뒤로",
        "en": "j/k scroll · g/G top/bottom · esc back",
    },
    # =========================================================================
    # 로그
    # =========================================================================
    "log_title": {
        "ko": "로그: {group}",
        "en": "Logs: {group}",
    },
    "paused": {
        "ko": "[일시정지]",
        "en": "[paused]",
    },
    "following": {
        "ko": "[따라가기]",
        "en": "[following]",
    },
    "waiting_logs": {
        "ko": "로그 이벤트를 기다리는 중...",
        "en": "Waiting for log events...",
    },
    "log_hint": {
        "ko": "space 일시정지 · c 지우기 · G 따라가기 · esc 뒤로",
        "en": "space pause · c clear · G follow · esc back",
    },
    # =========================================================================
    # 대시보드
    # =========================================================================
    "dashboard_title": {
        "ko": "대시보드",
        "en": "Dashboard",
    },
    "context_title": {
        "ko": "현재 컨텍스트",
        "en": "Context",
    },
    "dashboard_hint": {
        "ko": "enter 열기 · ctrl+r 새로고침 · : 명령",
        "en": "enter open · ctrl+r refresh · : command",
    },
    # =========================================================================
    # 선택기
    # =========================================================================
    "selector_hint": {
        "ko": "space 선택 · a 전체 · / 필터 · enter 확정 ({count}개 선택)",
        "en": "space toggle · a all · / filter · enter confirm ({count} selected)",
    },
    "select_regions": {
        "ko": "리전 선택",
        "en": "Select regions",
    },
    "select_profiles": {
        "ko": "프로파일 선택",
        "en": "Select profiles",
    },
    # =========================================================================
    # 도움말
    # =========================================================================
    "help_title": {
        "ko": "도움말",
        "en": "Help",
    },
    "help_global": {
        "ko": "전역",
        "en": "Global",
    },
    "help_command": {
        "ko": "명령 입력",
        "en": "Command input",
    },
    "help_help": {
        "ko": "도움말",
        "en": "Help",
    },
    "help_regions": {
        "ko": "리전 선택",
        "en": "Select regions",
    },
    "help_profiles": {
        "ko": "프로파일 선택",
        "en": "Select profiles",
    },
    "help_back": {
        "ko": "뒤로",
        "en": "Back",
    },
    "help_quit": {
        "ko": "종료 (상세 화면에서는 뒤로)",
        "en": "Quit (back from detail views)",
    },
    "help_list": {
        "ko": "목록",
        "en": "List",
    },
    "help_move": {
        "ko": "커서 이동",
        "en": "Move cursor",
    },
    "help_filter": {
        "ko": "이름 필터",
        "en": "Filter by name",
    },
    "help_clear": {
        "ko": "필터/정렬 해제",
        "en": "Clear filters and sort",
    },
    "help_refresh": {
        "ko": "새로고침",
        "en": "Refresh",
    },
    "help_detail": {
        "ko": "상세 보기",
        "en": "Show detail",
    },
    "help_mark": {
        "ko": "비교 대상 표시",
        "en": "Mark for diff",
    },
    "help_actions": {
        "ko": "작업 메뉴 (시작/중지, 드리프트 감지 등)",
        "en": "Actions menu (start/stop, drift detection, ...)",
    },
    "help_delete": {
        "ko": "삭제",
        "en": "Delete",
    },
    "help_tabs": {
        "ko": "리소스 종류 전환",
        "en": "Switch resource type",
    },
    "help_commands": {
        "ko": "명령",
        "en": "Commands",
    },
    "help_cmd_navigate": {
        "ko": "서비스/리소스로 이동 (예: ec2/instances, sg)",
        "en": "Go to service/resource (e.g. ec2/instances, sg)",
    },
    "help_cmd_filter": {
        "ko": "이름 필터 적용",
        "en": "Apply name filter",
    },
    "help_cmd_tag": {
        "ko": "태그 필터 (key, key=value, key~part)",
        "en": "Tag filter (key, key=value, key~part)",
    },
    "help_cmd_sort": {
        "ko": "컬럼 정렬 (asc|desc)",
        "en": "Sort by column (asc|desc)",
    },
    "help_cmd_diff": {
        "ko": "두 리소스 비교",
        "en": "Compare two resources",
    },
    "help_cmd_tags": {
        "ko": "태그로 모든 서비스의 리소스 검색",
        "en": "Search resources across services by tag",
    },
    "help_cmd_home": {
        "ko": "처음 화면으로",
        "en": "Go to start screen",
    },
}
