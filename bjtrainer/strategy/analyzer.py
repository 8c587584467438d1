"""Exhaustive sweep of canonical hands against every dealer upcard."""

import csv
import io
from collections import Counter, defaultdict
from dataclasses import dataclass, field

from bjtrainer.cards import Card, Rank, Suit
from bjtrainer.game.actions import PracticeFocus
from bjtrainer.hand import Hand, describe_hand
from bjtrainer.rules import GameSettings
from bjtrainer.strategy.advisor import Recommendation, StrategyAdvisor, primary_recommendation
from bjtrainer.strategy.training import apply_practice_focus

DEALER_UPCARDS = [Rank.ACE] + [Rank(str(v)) for v in range(2, 11)]
PAIR_RANKS = [Rank.ACE] + [Rank(str(v)) for v in range(2, 11)]

HIGH_CONFIDENCE = 95
MEDIUM_CONFIDENCE = 85
EDGE_CASE_CONFIDENCE = 80

CSV_HEADER = [
    "Player Hand",
    "Player Total",
    "Is Soft",
    "Is Pair",
    "Is Blackjack",
    "Dealer Upcard",
    "Primary Action",
    "Confidence",
    "Reasoning",
]


@dataclass(frozen=True)
class ScenarioResult:
    """Advisor output for one hand against one upcard."""

    hand: Hand
    dealer_upcard: Rank
    primary: Recommendation
    recommendations: tuple[Recommendation, ...]

    @property
    def description(self) -> str:
        return describe_hand(self.hand)

    @property
    def confidence_band(self) -> str:
        if self.primary.confidence >= HIGH_CONFIDENCE:
            return "high"
        if self.primary.confidence >= MEDIUM_CONFIDENCE:
            return "medium"
        return "low"


@dataclass
class AnalysisReport:
    total_scenarios: int = 0
    by_action: Counter = field(default_factory=Counter)
    by_confidence: Counter = field(default_factory=Counter)
    inconsistencies: list[ScenarioResult] = field(default_factory=list)
    edge_cases: list[ScenarioResult] = field(default_factory=list)
    training_mode_impact: dict[PracticeFocus, int] = field(default_factory=dict)


def _card(rank: Rank | str) -> Card:
    return Card(Rank(rank), Suit.HEARTS)


def canonical_hands() -> list[Hand]:
    """One representative two-card hand per hard total, soft total, pair and blackjack."""
    hands = []

    # Hard 5-20, never a pair
    for total in range(5, 21):
        if total <= 11:
            cards = (_card("2"), _card(str(total - 2)))
        elif total < 20:
            cards = (_card("10"), _card(str(total - 10)))
        else:
            cards = (_card("10"), _card("K"))
        hands.append(Hand(cards))

    # A,2 through A,9
    for value in range(2, 10):
        hands.append(Hand((_card("A"), _card(str(value)))))

    for rank in PAIR_RANKS:
        hands.append(Hand((Card(rank, Suit.HEARTS), Card(rank, Suit.DIAMONDS))))

    hands.append(Hand((_card("A"), _card("10"))))
    return hands


def generate_all_scenarios(settings: GameSettings | None = None) -> list[ScenarioResult]:
    """Evaluate every canonical hand against every upcard (350 scenarios)."""
    advisor = StrategyAdvisor(settings)
    results = []
    for hand in canonical_hands():
        for upcard in DEALER_UPCARDS:
            recommendations = advisor.recommend(hand, _card(upcard))
            results.append(
                ScenarioResult(
                    hand=hand,
                    dealer_upcard=upcard,
                    primary=primary_recommendation(recommendations),
                    recommendations=tuple(recommendations),
                )
            )
    return results


def analyze_scenarios(scenarios: list[ScenarioResult]) -> AnalysisReport:
    report = AnalysisReport(total_scenarios=len(scenarios))

    grouped: dict[tuple[str, Rank], list[ScenarioResult]] = defaultdict(list)
    for scenario in scenarios:
        report.by_action[scenario.primary.action.value] += 1
        report.by_confidence[scenario.confidence_band] += 1
        grouped[(scenario.description, scenario.dealer_upcard)].append(scenario)
        if scenario.primary.confidence < EDGE_CASE_CONFIDENCE:
            report.edge_cases.append(scenario)

    # Same description and upcard but different advice
    for group in grouped.values():
        if len({s.primary.action for s in group}) > 1:
            report.inconsistencies.extend(group)

    for focus in PracticeFocus:
        report.training_mode_impact[focus] = sum(
            1
            for s in scenarios
            if apply_practice_focus(s.primary, focus, s.hand) is not s.primary
        )

    return report


def render_report(report: AnalysisReport) -> str:
    """Render an analysis report as Markdown."""
    total = report.total_scenarios or 1
    lines = [
        "# Blackjack Strategy Analysis Report",
        "",
        "## Summary",
        f"- **Total Scenarios**: {report.total_scenarios}",
        f"- **Inconsistencies Found**: {len(report.inconsistencies)}",
        f"- **Edge Cases Found**: {len(report.edge_cases)}",
        "",
        "## Actions Distribution",
    ]
    for action, count in report.by_action.most_common():
        lines.append(f"- **{action}**: {count} scenarios ({count / total * 100:.1f}%)")

    lines += ["", "## Confidence Distribution"]
    for band in ("high", "medium", "low"):
        count = report.by_confidence.get(band, 0)
        lines.append(f"- **{band}**: {count} scenarios ({count / total * 100:.1f}%)")

    lines += ["", "## Training Notes By Focus"]
    for focus, count in report.training_mode_impact.items():
        lines.append(f"- **{focus.value}**: {count} scenarios")

    if report.inconsistencies:
        lines += ["", "## Inconsistencies"]
        for s in report.inconsistencies:
            lines.append(f"- {s.description} vs {s.dealer_upcard}: {s.primary.action.value}")

    if report.edge_cases:
        lines += ["", "## Edge Cases (Low Confidence)"]
        for s in report.edge_cases:
            lines.append(
                f"- {s.description} vs {s.dealer_upcard}: {s.primary.action.value} "
                f"({s.primary.confidence}% confidence)"
            )

    return "\n".join(lines) + "\n"


def export_csv(scenarios: list[ScenarioResult]) -> str:
    """Export scenario results as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for s in scenarios:
        writer.writerow(
            [
                s.description,
                s.hand.total,
                s.hand.is_soft,
                s.hand.is_pair,
                s.hand.is_blackjack,
                s.dealer_upcard.value,
                s.primary.action.value,
                s.primary.confidence,
                s.primary.reasoning,
            ]
        )
    return buffer.getvalue()


def generate_report(settings: GameSettings | None = None) -> str:
    """Sweep, analyze and render in one call."""
    return render_report(analyze_scenarios(generate_all_scenarios(settings)))
