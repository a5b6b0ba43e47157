"""
Achievement badges derived from one player's box score.

Each category computes a score from raw counts and awards the highest tier
whose threshold is met (Gold, then Silver, then Bronze). Badges are recomputed
on every view and never stored.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from shotify.domain.value_objects.stat_enums import BADGE_PROGRESS, BadgeLevel


@dataclass(frozen=True)
class Badge:
    name: str
    level: BadgeLevel
    icon: str
    progress: int
    description: str
    metrics: str

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'level': self.level.value,
            'icon': self.icon,
            'progress': self.progress,
            'description': self.description,
            'metrics': self.metrics,
        }


@dataclass(frozen=True)
class Tier:
    level: BadgeLevel
    threshold: float
    # Second condition some categories add per tier (FG% ceiling, turnover floor)
    limit: Optional[float] = None


def _fmt(number: float) -> str:
    """3.0 -> '3', 1.5 -> '1.5', never exponent form"""
    if float(number).is_integer():
        return str(int(number))
    return str(number)


def _stat(stats, name: str) -> float:
    """Read a stat from a BoxScore or a camelCase dict; anything missing counts as 0."""
    if stats is None:
        return 0
    return stats.get(name) or 0


@dataclass(frozen=True)
class BadgeRule:
    name: str
    icon: str
    score: Callable[[Callable[[str], float]], float]
    gate: Callable[[Callable[[str], float], float], bool]
    tiers: Tuple[Tier, ...]
    description: Callable[[Callable[[str], float]], str]
    metrics: Callable[[Tier, Callable[[str], float]], str]
    tier_check: Callable[[Tier, float, Callable[[str], float]], bool] = (
        lambda tier, score, s: score >= tier.threshold
    )

    def evaluate(self, s: Callable[[str], float]) -> Optional[Badge]:
        score = self.score(s)
        if not self.gate(s, score):
            return None
        for depth, tier in enumerate(self.tiers):
            if self.tier_check(tier, score, s):
                return Badge(
                    name=self.name,
                    level=tier.level,
                    icon=self.icon * (len(self.tiers) - depth),
                    progress=BADGE_PROGRESS[tier.level],
                    description=self.description(s),
                    metrics=self.metrics(tier, s),
                )
        return None


def _tiers(gold, silver, bronze) -> Tuple[Tier, ...]:
    def build(level, tier_spec):
        if isinstance(tier_spec, tuple):
            return Tier(level, *tier_spec)
        return Tier(level, tier_spec)
    return (
        build(BadgeLevel.GOLD, gold),
        build(BadgeLevel.SILVER, silver),
        build(BadgeLevel.BRONZE, bronze),
    )


def _brick_score(s) -> float:
    ft_penalty = 100 - s('ftPercentage') if s('ftAttempts') > 0 else 0
    return (100 - s('fgPercentage')) + ft_penalty


def _brick_description(s) -> str:
    text = f"Struggled with {_fmt(s('fgPercentage'))}% FG"
    if s('ftAttempts') > 0:
        text += f" and {_fmt(s('ftPercentage'))}% FT"
    return text


def _brick_metrics(tier: Tier, s) -> str:
    if s('ftAttempts') > 0:
        formula = '(100 - FG%) + (100 - FT%)'
    else:
        formula = '(100 - FG%)'
    return f"{formula} ≥ {_fmt(tier.threshold)} and FG% < {_fmt(tier.limit)}%"


BADGE_RULES: Tuple[BadgeRule, ...] = (
    BadgeRule(
        name='MVP',
        icon='🏆',
        score=lambda s: s('points') + s('assists') * 2,
        gate=lambda s, score: score > 0,
        tiers=_tiers(30, 20, 10),
        description=lambda s: (
            f"Generated {_fmt(s('points'))} points and "
            f"{_fmt(s('assists') * 2)} potential points from assists"
        ),
        metrics=lambda tier, s: f"Points + (Assists × 2) ≥ {_fmt(tier.threshold)}",
    ),
    BadgeRule(
        name='Big Man',
        icon='💪',
        score=lambda s: s('rebounds') + s('blocks') * 2,
        gate=lambda s, score: score > 0,
        tiers=_tiers(15, 10, 5),
        description=lambda s: (
            f"Dominated the paint with {_fmt(s('rebounds'))} rebounds "
            f"and {_fmt(s('blocks'))} blocks"
        ),
        metrics=lambda tier, s: f"Rebounds + (Blocks × 2) ≥ {_fmt(tier.threshold)}",
    ),
    BadgeRule(
        name='Playmaker',
        icon='🏀',
        score=lambda s: s('assists') / max(s('turnovers'), 1),
        gate=lambda s, score: s('assists') > 0,
        tiers=_tiers(3, 2, 1.5),
        description=lambda s: (
            f"{_fmt(s('assists'))}:{_fmt(s('turnovers'))} assist to turnover ratio"
        ),
        metrics=lambda tier, s: f"Assist:Turnover Ratio ≥ {_fmt(tier.threshold)}:1",
    ),
    BadgeRule(
        name='Lockdown',
        icon='🛡️',
        score=lambda s: s('steals') * 2 + s('blocks') * 2,
        gate=lambda s, score: score > 0,
        tiers=_tiers(10, 6, 4),
        description=lambda s: (
            f"Defensive force with {_fmt(s('steals'))} steals "
            f"and {_fmt(s('blocks'))} blocks"
        ),
        metrics=lambda tier, s: f"(Steals × 2) + (Blocks × 2) ≥ {_fmt(tier.threshold)}",
    ),
    BadgeRule(
        name='Sharpshooter',
        icon='🎯',
        score=lambda s: (s('fgPercentage') * 0.6 + s('threePtMade') * 15) / 2,
        gate=lambda s, score: s('fgAttempts') >= 5 or s('threePtMade') >= 2,
        tiers=_tiers(50, 35, 25),
        description=lambda s: (
            f"{_fmt(s('fgPercentage'))}% FG with "
            f"{_fmt(s('threePtMade'))} three-pointers made"
        ),
        metrics=lambda tier, s: f"(FG% × 0.6 + 3PM × 15) ÷ 2 ≥ {_fmt(tier.threshold)}",
    ),
    BadgeRule(
        name='Bricklayer',
        icon='🧱',
        score=_brick_score,
        gate=lambda s, score: s('fgAttempts') >= 5,
        tiers=_tiers((80, 35), (65, 40), (50, 45)),
        description=_brick_description,
        metrics=_brick_metrics,
        tier_check=lambda tier, score, s: (
            score >= tier.threshold and s('fgPercentage') < tier.limit
        ),
    ),
    BadgeRule(
        name='Butterfingers',
        icon='🧈',
        score=lambda s: s('turnovers') / max(s('assists'), 1),
        gate=lambda s, score: s('turnovers') > 0,
        tiers=_tiers((3, 4), (2, 3), (1.5, 2)),
        description=lambda s: (
            f"{_fmt(s('turnovers'))} turnovers with {_fmt(s('assists'))} assists"
        ),
        metrics=lambda tier, s: (
            f"Turnover:Assist Ratio ≥ {_fmt(tier.threshold)}:1 and TO ≥ {_fmt(tier.limit)}"
        ),
        tier_check=lambda tier, score, s: (
            score >= tier.threshold and s('turnovers') >= tier.limit
        ),
    ),
)


def evaluate_badges(stats, team_leaders: Optional[Dict] = None) -> List[Badge]:
    """
    Badges earned by one player, at most one per category, in category order.

    `stats` is a BoxScore or its camelCase dict. `team_leaders` is the
    player's team leaderboard; entries may be missing for legacy data and no
    current category reads it, so it never affects the result.
    """
    def s(name: str) -> float:
        return _stat(stats, name)

    badges = []
    for rule in BADGE_RULES:
        badge = rule.evaluate(s)
        if badge is not None:
            badges.append(badge)
    return badges
