"""Telemetry instrumentation unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from navalsim.engine.combat import AttackReport
from navalsim.engine.coordinates import Coordinate
from navalsim.engine.instrumented_session import InstrumentedNavalSession
from navalsim.engine.patterns import PatternKind
from navalsim.engine.placement import PlacementResult
from navalsim.engine.session import NavalSession
from navalsim.engine.ship import Orientation
from navalsim.telemetry import config as telemetry_config_module
from navalsim.telemetry import logger as logger_module
from navalsim.telemetry import metrics as metrics_module
from navalsim.telemetry import tracer as tracer_module
from navalsim.telemetry.config import TelemetryConfig


class DummySpan:
    def __init__(self, names: list[str], span_name: str) -> None:
        self._names = names
        self._names.append(span_name)
        self.attributes: dict[str, object] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def record_exception(self, exc):
        self.attributes["exception"] = exc


class DummyTracer:
    def __init__(self) -> None:
        self.span_names: list[str] = []

    def start_as_current_span(self, name: str):
        return DummySpan(self.span_names, name)


def reset_singletons() -> None:
    tracer_module._TRACER = None
    tracer_module._TRACER_PROVIDER = None
    metrics_module._METER = None
    metrics_module._METER_PROVIDER = None
    metrics_module._INSTRUMENTS = {}
    logger_module._LOGGER = None


def test_lazy_init_tracer_and_meter(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    assert tracer_module.get_tracer() is tracer_module.get_tracer()

    provider_instance = MagicMock()
    provider_instance.get_tracer.return_value = MagicMock()
    monkeypatch.setattr(tracer_module, "TracerProvider", MagicMock(return_value=provider_instance))
    monkeypatch.setattr(tracer_module, "OTLPSpanExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(tracer_module.trace, "set_tracer_provider", MagicMock())
    tracer_module.init_tracing(
        TelemetryConfig(enable_tracing=True, otlp_traces_endpoint="http://example")
    )
    assert tracer_module._TRACER is provider_instance.get_tracer.return_value

    meter_provider = MagicMock()
    meter_provider.get_meter.return_value = MagicMock()
    monkeypatch.setattr(metrics_module, "MeterProvider", MagicMock(return_value=meter_provider))
    monkeypatch.setattr(metrics_module, "OTLPMetricExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(
        metrics_module, "PeriodicExportingMetricReader", MagicMock(return_value=MagicMock())
    )
    monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", MagicMock())
    metrics_module.init_metrics(
        TelemetryConfig(enable_metrics=True, otlp_metrics_endpoint="http://example")
    )
    assert metrics_module._METER is meter_provider.get_meter.return_value
    reset_singletons()


def test_record_game_metric_reuses_counters(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    meter = MagicMock()
    monkeypatch.setattr(metrics_module, "_METER", meter)

    metrics_module.record_game_metric("navalsim_test_total", 1, {"k": "v"})
    metrics_module.record_game_metric("navalsim_test_total", 2)
    meter.create_counter.assert_called_once_with("navalsim_test_total")
    counter = meter.create_counter.return_value
    assert counter.add.call_count == 2
    reset_singletons()


def test_get_logger_is_cached() -> None:
    reset_singletons()
    logger = logger_module.get_logger("test")
    assert logger_module.get_logger("other") is logger
    reset_singletons()


def test_init_telemetry_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    telemetry_config_module.init_telemetry(TelemetryConfig())
    assert calls == []


def test_init_telemetry_respects_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    config = TelemetryConfig(enable_tracing=True, enable_logging=True)
    telemetry_config_module.init_telemetry(config)
    assert calls == ["tr", "lo"]


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
        "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT",
        "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT",
        "OTEL_TRACES_ENABLED",
        "OTEL_METRICS_ENABLED",
        "OTEL_LOGS_ENABLED",
        "OTEL_SERVICE_NAME",
        "OTEL_SERVICE_NAMESPACE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NAVALSIM_ENABLE_METRICS", "yes")
    monkeypatch.setenv("NAVALSIM_LOG_LEVEL", "debug")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317/")
    monkeypatch.setenv("OTEL_RESOURCE_ATTRIBUTES", "deployment=test,broken")

    config = TelemetryConfig.from_env()
    assert config.enable_metrics is True
    assert config.log_level == "DEBUG"
    assert config.otlp_traces_endpoint == "http://collector:4317/v1/traces"
    assert config.enable_tracing is True
    assert config.resource_attributes == {"deployment": "test"}
    assert config.resource()["service.name"] == "navalsim"


def test_load_telemetry_config_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    telemetry_config_module.load_telemetry_config.cache_clear()
    calls = {"count": 0}

    def fake_from_env(cls, **overrides):
        calls["count"] += 1
        return TelemetryConfig(enable_tracing=True)

    monkeypatch.setattr(
        telemetry_config_module.TelemetryConfig, "from_env", classmethod(fake_from_env)
    )

    first = telemetry_config_module.load_telemetry_config()
    second = telemetry_config_module.load_telemetry_config()
    assert first is second
    assert calls["count"] == 1
    telemetry_config_module.load_telemetry_config.cache_clear()


def _patch_session_telemetry(monkeypatch: pytest.MonkeyPatch):
    tracer = DummyTracer()
    metrics_calls: list[tuple[str, float, dict | None]] = []
    logger = MagicMock()
    monkeypatch.setattr("navalsim.engine.instrumented_session.get_tracer", lambda *_: tracer)
    monkeypatch.setattr("navalsim.engine.instrumented_session.get_logger", lambda *_: logger)
    monkeypatch.setattr(
        "navalsim.engine.instrumented_session.record_game_metric",
        lambda name, value, attrs=None: metrics_calls.append((name, value, attrs)),
    )
    return tracer, metrics_calls, logger


def test_instrumented_session_emits_spans(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer, metrics_calls, _ = _patch_session_telemetry(monkeypatch)
    monkeypatch.setattr(
        NavalSession, "place_next_ship", lambda self, origin, orientation: PlacementResult.SUCCESS
    )
    monkeypatch.setattr(
        NavalSession,
        "attack",
        lambda self, kind, center: AttackReport(kind.title, center, (), ()),
    )

    session = InstrumentedNavalSession()
    session.place_next_ship(Coordinate(0, 0), Orientation.HORIZONTAL)
    assert "navalsim.engine.session" in tracer.span_names
    assert "navalsim.engine.place_ship" in tracer.span_names

    tracer.span_names.clear()
    metrics_calls.clear()
    session.attack(PatternKind.CROSS, Coordinate(4, 4))
    session.finish()
    assert "navalsim.engine.attack" in tracer.span_names
    assert "navalsim.engine.session_complete" in tracer.span_names
    metric_names = {name for name, _, _ in metrics_calls}
    assert "navalsim_attacks_total" in metric_names
    assert "navalsim_sessions_completed_total" in metric_names


def test_instrumented_session_records_rejected_attack(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer, metrics_calls, logger = _patch_session_telemetry(monkeypatch)

    session = InstrumentedNavalSession()
    with pytest.raises(RuntimeError):
        session.attack(PatternKind.CONE, Coordinate(0, 0))
    assert ("navalsim_rejected_attacks_total", 1, {"pattern": "cone"}) in metrics_calls
    logger.error.assert_called_once()


def test_instrumented_session_abort(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer, metrics_calls, _ = _patch_session_telemetry(monkeypatch)

    session = InstrumentedNavalSession()
    result = session.place_next_ship(Coordinate(0, 9), Orientation.HORIZONTAL)
    assert result is PlacementResult.OUT_OF_BOUNDS
    session.abort("placement_failed")
    names = [name for name, _, _ in metrics_calls]
    assert names == ["navalsim_placement_attempts_total", "navalsim_sessions_aborted_total"]
