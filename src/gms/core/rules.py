from __future__ import annotations

from dataclasses import replace

from gms.contracts import ConversionType, MatchRules, TimeCosts, Weather


def default_match_rules() -> MatchRules:
    return MatchRules(time_costs=TimeCosts())


def two_point_rules(base: MatchRules | None = None) -> MatchRules:
    rules = base or default_match_rules()
    return replace(rules, conversion=ConversionType.TWO_POINT, time_costs=replace(rules.time_costs))


def validate_match_config(config: dict[str, object]) -> MatchRules:
    unknown = set(config) - set(MatchRules.__dataclass_fields__)
    if unknown:
        raise ValueError(f"unknown match rule keys: {sorted(unknown)}")
    values = dict(config)
    costs = values.get("time_costs")
    if isinstance(costs, dict):
        values["time_costs"] = TimeCosts(**costs)
    conversion = values.get("conversion")
    if isinstance(conversion, str):
        values["conversion"] = ConversionType(conversion)
    weather = values.get("weather")
    if isinstance(weather, str):
        values["weather"] = Weather(weather)
    rules = MatchRules(**values)
    rules.validate()
    return rules
