from __future__ import annotations

import os

from handrecorder.core import feature_flags


def test_env_and_override_stack() -> None:
    env_var = "HANDRECORDER_FEATURES"
    original = os.environ.get(env_var)
    try:
        if env_var in os.environ:
            del os.environ[env_var]

        assert feature_flags.is_enabled(feature_flags.POSTFLOP_RAISE_FLOOR) is False

        feature_flags.set_env_flags([feature_flags.POSTFLOP_RAISE_FLOOR])
        assert feature_flags.is_enabled("TRACKER.Postflop_Raise_Floor") is True

        with feature_flags.override(disable={feature_flags.POSTFLOP_RAISE_FLOOR}):
            assert feature_flags.is_enabled(feature_flags.POSTFLOP_RAISE_FLOOR) is False
            with feature_flags.override(enable={feature_flags.POSTFLOP_RAISE_FLOOR}):
                assert feature_flags.is_enabled(feature_flags.POSTFLOP_RAISE_FLOOR) is True

        assert feature_flags.is_enabled(feature_flags.POSTFLOP_RAISE_FLOOR) is True

    finally:
        if original is None:
            os.environ.pop(env_var, None)
        else:
            os.environ[env_var] = original


def test_default_on_flag_can_be_disabled_from_env(monkeypatch) -> None:
    assert feature_flags.is_enabled(feature_flags.UNIQUE_CARDS) is True
    monkeypatch.setenv("HANDRECORDER_FEATURES", f"-{feature_flags.UNIQUE_CARDS}")
    assert feature_flags.is_enabled(feature_flags.UNIQUE_CARDS) is False
    with feature_flags.override(enable={feature_flags.UNIQUE_CARDS}):
        assert feature_flags.is_enabled(feature_flags.UNIQUE_CARDS) is True
