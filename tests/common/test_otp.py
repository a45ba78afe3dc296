import pytest

from src.outlet_attendance.outlet_attendance.common.otp import generate_otp, otp_matches
from src.outlet_attendance.outlet_attendance.core.exceptions import ValidationError


def test_generate_otp_is_numeric_and_fixed_length():
    for _ in range(20):
        code = generate_otp(6)
        assert len(code) == 6
        assert code.isdigit()


def test_generate_otp_rejects_bad_length():
    with pytest.raises(ValidationError):
        generate_otp(0)


def test_otp_matches():
    assert otp_matches("012345", " 012345 ")
    assert not otp_matches("012345", "012346")
    assert not otp_matches(None, "012345")
    assert not otp_matches("012345", "")
    assert not otp_matches("012345", "mã sai")


def test_otp_matches_numeric_submission():
    assert otp_matches("123456", 123456)
    assert not otp_matches("123456", 1123456)
    assert not otp_matches("123456", True)
