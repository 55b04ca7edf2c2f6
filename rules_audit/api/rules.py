from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rules_audit.api.dependencies import get_rules_runtime
from rules_audit.core.errors import RuleNotFoundError
from rules_audit.rules.manager import SECTIONS, ManagerRule, RuleSection, build_manager_rules
from rules_audit.rules.models import DiscoveredRule, RuleCategory, RuleDefinition, RuleSeverity
from rules_audit.runtime import RulesAuditRuntime

router = APIRouter(prefix="/rules", tags=["Rules"])


class RuleListResponse(BaseModel):
    rules: list[RuleDefinition]
    count: int


class ManagerRulesResponse(BaseModel):
    sections: list[RuleSection]
    rules: list[ManagerRule]
    count: int


class DiscoveredRulesResponse(BaseModel):
    rules: list[DiscoveredRule]
    count: int


@router.get("", response_model=RuleListResponse)
async def list_rules(
    category: RuleCategory | None = None,
    severity: RuleSeverity | None = None,
    runtime: RulesAuditRuntime = Depends(get_rules_runtime),
) -> RuleListResponse:
    """Registered rule definitions, optionally filtered by category and severity."""
    rules = runtime.registry.get_all()
    if category is not None:
        rules = [r for r in rules if r.category == category]
    if severity is not None:
        rules = [r for r in rules if r.default_severity == severity]
    return RuleListResponse(rules=rules, count=len(rules))


@router.get("/manager", response_model=ManagerRulesResponse)
async def list_manager_rules(
    section: RuleSection | None = None,
    runtime: RulesAuditRuntime = Depends(get_rules_runtime),
) -> ManagerRulesResponse:
    """Rules manager rows, grouped into sections by category."""
    rules = build_manager_rules(runtime.registry, section)
    return ManagerRulesResponse(sections=SECTIONS, rules=rules, count=len(rules))


@router.get("/discovered", response_model=DiscoveredRulesResponse)
async def list_discovered_rules(runtime: RulesAuditRuntime = Depends(get_rules_runtime)) -> DiscoveredRulesResponse:
    """Rules observed firing since the process started."""
    rules = runtime.discovered.get_all()
    return DiscoveredRulesResponse(rules=rules, count=len(rules))


@router.get("/{rule_id}", response_model=RuleDefinition)
async def get_rule(rule_id: str, runtime: RulesAuditRuntime = Depends(get_rules_runtime)) -> RuleDefinition:
    definition = runtime.registry.get_by_id(rule_id)
    if definition is None:
        raise RuleNotFoundError(rule_id)
    return definition
