from factorynear.features.risk import HIGH_RISK_CATEGORY_CODES, is_high_risk, risk_code_set


def test_listed_code_is_high_risk():
    assert is_high_risk("10100") is True


def test_unlisted_code_is_not_high_risk():
    assert is_high_risk("99999") is False
    assert is_high_risk("") is False


def test_every_configured_code_is_high_risk():
    assert len(HIGH_RISK_CATEGORY_CODES) == 13
    assert all(is_high_risk(code) for code in HIGH_RISK_CATEGORY_CODES)


def test_membership_is_exact_string_match():
    # Leading zeros are significant.
    assert is_high_risk("05309") is True
    assert is_high_risk("5309") is False


def test_custom_code_set():
    codes = risk_code_set(["12345", " 67890 "])
    assert is_high_risk("67890", codes=codes) is True
    assert is_high_risk("10100", codes=codes) is False


def test_empty_config_falls_back_to_builtin_set():
    assert risk_code_set([]) == HIGH_RISK_CATEGORY_CODES
    assert risk_code_set(None) == HIGH_RISK_CATEGORY_CODES
