"""Stat-chip classification over AI-generated markdown.

Each indicator is an ordered table of rules evaluated first-match-wins against
the lowercased response text. Matching is plain substring search; there is no
confidence scoring. Text that matches no rule gets the indicator's fallback.
The result is cosmetic and is never sent back to the model.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chip:
    """What a stat card shows: label, colour tone and optional gauge percentage."""
    label: str
    tone: str = "neutral"
    percent: int | None = None


@dataclass(frozen=True)
class Rule:
    """Matches when every `all_of` term, at least one `any_of` term and no `none_of` term is present."""
    any_of: tuple[str, ...]
    chip: Chip
    all_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if not all(term in text for term in self.all_of):
            return False
        if self.any_of and not any(term in text for term in self.any_of):
            return False
        return not any(term in text for term in self.none_of)


@dataclass(frozen=True)
class Indicator:
    title: str
    rules: tuple[Rule, ...]
    fallback: Chip = field(default_factory=lambda: Chip("Unknown"))

    def classify(self, text: str) -> Chip:
        lowered = (text or "").lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule.chip
        return self.fallback


# Soil analysis

SOIL_TYPE = Indicator(
    title="Soil Type",
    rules=(
        Rule(("black soil",), Chip("Black Soil", "dark")),
        Rule(("clay",), Chip("Clay", "brown")),
        Rule(("loam",), Chip("Loam", "amber")),
        Rule(("sandy",), Chip("Sandy", "sand")),
        Rule(("silt",), Chip("Silt", "brown")),
        Rule(("red soil",), Chip("Red Soil", "red")),
    ),
)

ORGANIC_MATTER = Indicator(
    title="Organic Matter",
    rules=(
        Rule(("high organic", "organic matter: high", "rich in organic"), Chip("High 🌿", "green")),
        Rule(("medium organic", "moderate organic", "organic matter: medium"), Chip("Medium 🌱", "amber")),
        Rule(("low organic", "poor in organic", "organic matter: low"), Chip("Low ⚠️", "red")),
    ),
)

EROSION = Indicator(
    title="Erosion / Degradation",
    rules=(
        Rule(("severe erosion", "heavy erosion"), Chip("Severe ⛔", "red")),
        Rule(("moderate erosion", "signs of erosion"), Chip("Moderate ⚠️", "amber")),
        Rule(("mild erosion", "minor erosion"), Chip("Mild ℹ️", "blue")),
        Rule(("no erosion", "no sign"), Chip("None ✅", "green")),
    ),
    fallback=Chip("None Detected", "green"),
)

MOISTURE = Indicator(
    title="Moisture Level",
    rules=(
        Rule(("waterlogged", "saturated"), Chip("Waterlogged 💧", "blue")),
        Rule(("moist",), Chip("Moist ✅", "green"), none_of=("very moist",)),
        Rule(("dry", "cracked", "moisture stress"), Chip("Dry / Cracked 🌵", "red")),
        Rule(("adequate moisture",), Chip("Adequate 👍", "green")),
    ),
)

SOIL_INDICATORS = (SOIL_TYPE, ORGANIC_MATTER, EROSION, MOISTURE)


# Plant disease analysis

SEVERITY = Indicator(
    title="Severity",
    rules=(
        Rule(("critical",), Chip("Critical", "critical")),
        Rule(("severe",), Chip("Severe", "danger")),
        Rule(("moderate",), Chip("Moderate", "warning")),
        Rule(("mild",), Chip("Mild", "success")),
    ),
    fallback=Chip("Healthy", "success"),
)

PATHOGEN = Indicator(
    title="Pathogen Type",
    rules=(
        Rule(("fungal", "fungus"), Chip("Fungal", "purple")),
        Rule(("bacterial", "bacteria"), Chip("Bacterial", "red")),
        Rule(("viral", "virus"), Chip("Viral", "orange")),
        Rule(("pest", "insect"), Chip("Pest", "warning")),
        Rule(("nutrient", "deficiency"), Chip("Nutrient", "info")),
    ),
    fallback=Chip("Abiotic", "neutral"),
)

STAGE = Indicator(
    title="Disease Stage",
    rules=(
        Rule(("stage 4",), Chip("Stage 4", "critical")),
        Rule(("stage 3",), Chip("Stage 3", "danger")),
        Rule(("stage 2",), Chip("Stage 2", "warning")),
        Rule(("stage 1", "early"), Chip("Stage 1", "success")),
    ),
    fallback=Chip("Normal", "success"),
)

SPREAD_RISK = Indicator(
    title="Spread Risk",
    rules=(
        Rule(("critical", "very high"), Chip("Critical", "critical", 95), all_of=("spread risk",)),
        Rule(("high",), Chip("High", "danger", 70), all_of=("spread",)),
        Rule(("medium",), Chip("Medium", "warning", 45), all_of=("spread",)),
    ),
    fallback=Chip("Low", "success", 15),
)

PROGRESSION = Indicator(
    title="Disease Progression",
    rules=(
        Rule(("stage 4", "critical"), Chip("Stage 4 - Critical", "critical", 95)),
        Rule(("stage 3", "severe"), Chip("Stage 3 - Severe", "danger", 72)),
        Rule(("stage 2", "moderate"), Chip("Stage 2 - Moderate", "warning", 45)),
        Rule(("stage 1", "mild", "early"), Chip("Stage 1 - Mild", "success", 20)),
    ),
    fallback=Chip("Healthy / Stage 1", "success", 10),
)

PLANT_INDICATORS = (SEVERITY, PATHOGEN, STAGE, SPREAD_RISK)

TONE_COLORS = {
    "critical": "#ef4444",
    "danger": "#f97316",
    "warning": "#eab308",
    "success": "#22c55e",
    "green": "#22c55e",
    "amber": "#d97706",
    "red": "#dc2626",
    "blue": "#3b82f6",
    "brown": "#92400e",
    "dark": "#1f2937",
    "sand": "#d6b37a",
    "purple": "#8b5cf6",
    "orange": "#fb923c",
    "info": "#0ea5e9",
    "neutral": "#9ca3af",
}


def classify_all(text: str, indicators: tuple[Indicator, ...]) -> dict[str, Chip]:
    """Run several indicators over the same text, keyed by indicator title."""
    return {indicator.title: indicator.classify(text) for indicator in indicators}
