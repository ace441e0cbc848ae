from stall.staff_gate import StaffGate


def test_correct_secret_is_admitted():
    assert StaffGate("mamba123").admit("mamba123") is True


def test_wrong_secret_is_denied():
    assert StaffGate("mamba123").admit("mamba12") is False


def test_empty_secret_denies_everyone():
    assert StaffGate("").admit("") is False
