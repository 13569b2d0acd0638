"""
Dish recommendation pipeline.

Responsibilities:
- Resolve raw calorie/activity/taste input into a clamped target.
- Build marketplace-scoped search queries for the target.
- Score and rank marketplace results with deterministic heuristics.
- Fall back to plain web-search links when no real results exist.
- Memoise finished payloads for a short TTL.
"""
