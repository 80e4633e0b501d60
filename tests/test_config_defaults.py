from otpscan.config import load_config


def test_default_config_values() -> None:
    cfg = load_config(env={})
    assert cfg.schema_version == 1
    assert cfg.locale == "en"
    assert cfg.limits.max_message_length == 10000
    assert cfg.scoring.money_radius == 25
    assert cfg.scoring.phone_prefix_window == 5
    assert cfg.calibration.score_scale == 8.0
    assert cfg.calibration.otp_threshold == 0.6
    assert cfg.calibration.keyword_boost == 0.15
    assert cfg.calibration.safety_boost == 0.15
    assert cfg.calibration.parcel_boost == 0.15
