"""
Player match scoring.

Two equally weighted components, each on a 0-100 scale:
- Skill: 100 for identical levels, minus 15 per level of difference, floored at 0.
- Zone:  100 when both players share a zone, 40 otherwise.

The blended score is rounded half-up, so 92.5 becomes 93 and 62.5 becomes 63.
"""
import math

SKILL_PENALTY_PER_LEVEL = 15
SAME_ZONE_SCORE = 100
OTHER_ZONE_SCORE = 40
SKILL_WEIGHT = 0.5
ZONE_WEIGHT = 0.5
CANDIDATE_LIMIT = 20


def round_half_up(value):
    return int(math.floor(value + 0.5))


def skill_score(skill_a, skill_b):
    return max(0, 100 - SKILL_PENALTY_PER_LEVEL * abs(skill_a - skill_b))


def zone_score(zone_a, zone_b):
    return SAME_ZONE_SCORE if zone_a == zone_b else OTHER_ZONE_SCORE


def match_percent(target_skill, target_zone, candidate_skill, candidate_zone):
    """Blend skill and zone closeness into a 0-100 integer."""
    blended = (
        SKILL_WEIGHT * skill_score(target_skill, candidate_skill)
        + ZONE_WEIGHT * zone_score(target_zone, candidate_zone)
    )
    return round_half_up(blended)
