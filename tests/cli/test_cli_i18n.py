"""
tests/cli/test_cli_i18n.py - 다국어 메시지 테스트
"""

import threading

import pytest

from cli.i18n import DEFAULT_LANG, get_lang, get_text, set_lang, t
from cli.i18n.messages import MESSAGES, register_messages


class TestTranslate:
    """t() 테스트"""

    def test_default_korean(self):
        """기본 언어는 한국어"""
        assert get_lang() == DEFAULT_LANG == "ko"
        assert t("tui.loading") == "불러오는 중..."

    def test_lang_override(self):
        """언어 인자 우선"""
        assert t("tui.loading", lang="en") == "Loading..."

    def test_interpolation(self):
        """포맷 인자 치환"""
        assert t("tui.deleted", lang="en", name="i-0abc") == "Deleted: i-0abc"

    def test_missing_format_args_kept(self):
        """포맷 인자가 부족하면 원문 유지"""
        assert t("tui.deleted", other="x") == "삭제됨: {name}"

    def test_unknown_key(self):
        """없는 키는 키 그대로"""
        assert t("tui.nope") == "tui.nope"

    def test_english_fallback(self):
        """영어가 없으면 한국어"""
        register_messages("test", {"only_ko": {"ko": "한국어만"}})
        try:
            assert t("test.only_ko", lang="en") == "한국어만"
        finally:
            MESSAGES.pop("test.only_ko", None)


class TestSetLang:
    """set_lang() 테스트"""

    def test_switch(self):
        """언어 전환"""
        set_lang("en")
        assert get_lang() == "en"
        assert t("tui.loading") == "Loading..."

    def test_unsupported_falls_back(self):
        """지원하지 않는 언어는 기본 언어"""
        set_lang("ja")
        assert get_lang() == "ko"

    def test_worker_threads_follow_process_lang(self):
        """나중에 시작된 작업 스레드도 같은 언어"""
        set_lang("en")
        seen = []
        worker = threading.Thread(target=lambda: seen.append(t("tui.loading")))
        worker.start()
        worker.join()
        assert seen == ["Loading..."]


class TestGetText:
    """get_text() 테스트"""

    def test_inline(self):
        """인라인 번역"""
        assert get_text("저장됨", "Saved", lang="en") == "Saved"
        assert get_text("저장됨", "Saved") == "저장됨"


class TestMessageRegistry:
    """메시지 레지스트리 무결성 테스트"""

    @pytest.mark.parametrize("key", sorted(MESSAGES))
    def test_both_languages(self, key):
        """모든 메시지는 ko/en 을 가짐"""
        assert MESSAGES[key].get("ko")
        assert MESSAGES[key].get("en")

    def test_namespaces(self):
        """cli / tui 네임스페이스"""
        assert {key.split(".", 1)[0] for key in MESSAGES} == {"cli", "tui"}
