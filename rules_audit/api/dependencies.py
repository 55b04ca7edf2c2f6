from rules_audit.adapters import AuditObserver, TelemetryObserver
from rules_audit.runtime import RulesAuditRuntime, get_runtime

# --- Runtime Dependencies ---


def get_telemetry_observer() -> TelemetryObserver:
    return TelemetryObserver(get_runtime().store)


def get_audit_observer() -> AuditObserver:
    runtime = get_runtime()
    return AuditObserver(runtime.audit, runtime.store)


def get_rules_runtime() -> RulesAuditRuntime:
    return get_runtime()
