from __future__ import annotations

import pytest

from edit_engine.runtime import telemetry


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_span_reraises_and_keeps_logger_usable() -> None:
    telemetry.configure()

    with pytest.raises(KeyError):
        with telemetry.span("test::boom", metadata={"case": "raise"}):
            raise KeyError("boom")

    with telemetry.span(
        "test::ok", component=True, metadata={"size": 3}
    ) as handle:
        handle.reject("nothing to do")

    assert handle.metadata == {"size": "3"}
    assert handle.component_name == "test::ok"
    assert telemetry.get_logger() is telemetry.get_logger()
