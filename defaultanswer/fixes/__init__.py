"""Fix planning package."""

# Lazy imports - use explicit imports when needed:
# from defaultanswer.fixes.generator import generate_fix_plan, dedupe_fix_plan_by_intent
# from defaultanswer.fixes.prioritizer import select_dominant_fix, decide_what_to_fix_first
# from defaultanswer.fixes.mapping import map_fix_to_category, suggested_action_for_label
# from defaultanswer.fixes.playbook import build_cold_fix_playbook

__all__ = [
    "FixPlanItem",
    "Priority",
    "generate_fix_plan",
    "generate_weaknesses",
    "dedupe_fix_plan_by_intent",
    "select_dominant_fix",
    "decide_what_to_fix_first",
    "map_fix_to_category",
    "suggested_action_for_label",
    "build_cold_fix_playbook",
]
