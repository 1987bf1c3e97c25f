"""
tests/core/test_core_context.py - 선택 상태(AppContext, ProfileSelection) 테스트
"""

from core.context import ENV_ONLY_ID, SDK_DEFAULT_ID, AppContext, ProfileMode, ProfileSelection


class TestProfileSelection:
    """ProfileSelection 테스트"""

    def test_ids(self):
        """모드별 식별자"""
        assert ProfileSelection.sdk_default().id == SDK_DEFAULT_ID
        assert ProfileSelection.env_only().id == ENV_ONLY_ID
        assert ProfileSelection.named("dev").id == "dev"

    def test_display_names(self):
        """표시 이름"""
        assert ProfileSelection.sdk_default().display_name == "(sdk default)"
        assert ProfileSelection.env_only().display_name == "(env/IMDS)"
        assert str(ProfileSelection.named("dev")) == "dev"

    def test_from_id_round_trip(self):
        """식별자에서 복원"""
        for selection in (ProfileSelection.sdk_default(), ProfileSelection.env_only(), ProfileSelection.named("ops")):
            assert ProfileSelection.from_id(selection.id) == selection
        assert ProfileSelection.from_id("").mode is ProfileMode.SDK_DEFAULT

    def test_is_named(self):
        """명명 프로파일 여부"""
        assert ProfileSelection.named("dev").is_named
        assert not ProfileSelection.env_only().is_named


class TestAppContextRegions:
    """AppContext 리전 테스트"""

    def test_defaults(self):
        """기본 상태"""
        ctx = AppContext()
        assert ctx.get_regions() == []
        assert ctx.get_region() == ""
        assert ctx.get_selection() == ProfileSelection.sdk_default()
        assert not ctx.read_only

    def test_dedup_preserves_order(self):
        """중복 제거와 순서 유지"""
        ctx = AppContext(regions=["us-east-1", "ap-northeast-2", "us-east-1"])
        assert ctx.get_regions() == ["us-east-1", "ap-northeast-2"]
        assert ctx.get_region() == "us-east-1"
        assert ctx.is_multi_region()

    def test_add_region(self):
        """리전 추가 (중복 무시)"""
        ctx = AppContext(regions=["ap-northeast-2"])
        ctx.add_region("us-east-1")
        ctx.add_region("ap-northeast-2")
        ctx.add_region("")
        assert ctx.get_regions() == ["ap-northeast-2", "us-east-1"]

    def test_snapshot_is_copy(self):
        """조회 결과 변경이 상태에 영향 없음"""
        ctx = AppContext(regions=["ap-northeast-2"])
        ctx.get_regions().append("us-east-1")
        assert ctx.get_regions() == ["ap-northeast-2"]


class TestAppContextProfiles:
    """AppContext 프로파일/계정 테스트"""

    def test_set_selections_prunes_account_ids(self):
        """선택 해제된 프로파일의 계정 ID 제거"""
        ctx = AppContext(selections=[ProfileSelection.named("dev"), ProfileSelection.named("prod")])
        ctx.set_account_id("dev", "111111111111")
        ctx.set_account_id("prod", "222222222222")

        ctx.set_selections([ProfileSelection.named("prod")])

        assert ctx.get_account_ids() == {"prod": "222222222222"}
        assert not ctx.is_multi_profile()

    def test_empty_selections_fall_back(self):
        """빈 선택은 SDK 기본"""
        ctx = AppContext(selections=[ProfileSelection.named("dev")])
        ctx.set_selections([])
        assert ctx.get_selections() == [ProfileSelection.sdk_default()]

    def test_account_id_default_selection(self):
        """기본 선택의 계정 ID"""
        ctx = AppContext()
        ctx.set_account_id(SDK_DEFAULT_ID, "123456789012")
        assert ctx.get_account_id() == "123456789012"
        assert ctx.get_account_id("other") == ""

    def test_empty_account_id_removes(self):
        """빈 계정 ID는 항목 제거"""
        ctx = AppContext()
        ctx.set_account_id(SDK_DEFAULT_ID, "123456789012")
        ctx.set_account_id(SDK_DEFAULT_ID, "")
        assert ctx.get_account_ids() == {}


class TestAppContextMisc:
    """경고/읽기 전용 테스트"""

    def test_warnings(self):
        """경고 누적과 초기화"""
        ctx = AppContext()
        ctx.add_warning("첫 번째")
        ctx.add_warning("두 번째")
        assert ctx.get_warnings() == ["첫 번째", "두 번째"]
        ctx.clear_warnings()
        assert ctx.get_warnings() == []

    def test_read_only_setter(self):
        """읽기 전용 전환"""
        ctx = AppContext(read_only=True)
        assert ctx.read_only
        ctx.read_only = False
        assert not ctx.read_only
