from __future__ import annotations

from enum import Enum


class AttendanceKind(str, Enum):
    """Loại sự kiện chấm công tại outlet."""

    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class GuardState(str, Enum):
    """Trạng thái của guard trước khi cho phép vào route được bảo vệ."""

    CHECKING = "CHECKING"
    AUTHENTICATED = "AUTHENTICATED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    HAS_ACTIVE_SHIFT = "HAS_ACTIVE_SHIFT"
    NO_ACTIVE_SHIFT = "NO_ACTIVE_SHIFT"


class ProgressState(str, Enum):
    """Trạng thái tiến trình của một flow so với phiên đăng nhập hiện tại."""

    FRESH = "FRESH"
    BOUND = "BOUND"
    STALE = "STALE"


class TransitionResult(str, Enum):
    """Kết quả chuyển bước trong flow quà tặng/khảo sát."""

    OK = "OK"
    TERMINAL_STEP = "TERMINAL_STEP"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class SurveyFlowVariant(str, Enum):
    """Biến thể luồng khảo sát: xác thực bằng OTP hoặc chụp ảnh."""

    OTP = "otp"
    CAMERA = "camera"


class SurveyBranch(str, Enum):
    """Luồng khách chọn ở bước flow-choice.

    quick: bỏ qua câu hỏi, full: làm đầy đủ, no-games: chưa chơi game nên không quay thưởng.
    """

    QUICK = "quick"
    FULL = "full"
    NO_GAMES = "no-games"
