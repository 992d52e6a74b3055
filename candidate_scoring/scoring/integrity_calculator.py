# candidate_scoring/scoring/integrity_calculator.py
"""
Integrity Calculator
--------------------
Starts from a baseline of 100 and subtracts three penalty terms:

    penal        first firm sentence at its severity weight,
                 each further firm sentence + additional weight,
                 each pending sentence × pending fraction of its weight,
                 additive, capped at penal_cap
    civil        per-sentence penalty by type (violence > alimony > labor > contractual)
    resignation  resignations beyond the tolerance × decrement, capped

    integrity = clamp(100 − penal − civil − resignation, 0, 100)

All magnitudes live in a PenaltyTable passed in by the caller; the default
table is DEFAULT_PENALTY_TABLE.
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import List, Mapping

from candidate_scoring.models.candidate import CivilSentence, PenalSentence
from candidate_scoring.models.enumerations import CivilSentenceType, PenalSeverity
from candidate_scoring.models.score import CivilPenaltyItem
from candidate_scoring.scoring.taxonomy import classify_penal_severity
from candidate_scoring.scoring.utils import HUNDRED, ZERO, clamp, round_score, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PenaltyTable:
    """Versioned, immutable penalty magnitudes."""
    version: str
    firm_weights: Mapping[PenalSeverity, Decimal]
    additional_firm_weight: Decimal
    pending_fraction: Decimal
    penal_cap: Decimal
    civil_penalties: Mapping[CivilSentenceType, int]
    resignation_tolerance: int
    resignation_decrement: int
    resignation_cap: int

    def __post_init__(self):
        missing_severity = set(PenalSeverity) - set(self.firm_weights)
        missing_civil = set(CivilSentenceType) - set(self.civil_penalties)
        if missing_severity or missing_civil:
            raise ValueError(
                f"PenaltyTable {self.version} incomplete: "
                f"severities={sorted(s.value for s in missing_severity)} "
                f"civil={sorted(c.value for c in missing_civil)}"
            )
        # freeze the mappings so a shared table cannot be edited in place
        object.__setattr__(self, "firm_weights", MappingProxyType(dict(self.firm_weights)))
        object.__setattr__(self, "civil_penalties", MappingProxyType(dict(self.civil_penalties)))


DEFAULT_PENALTY_TABLE = PenaltyTable(
    version="v1",
    firm_weights={
        PenalSeverity.SEVERE:   Decimal("70"),
        PenalSeverity.STANDARD: Decimal("55"),
    },
    additional_firm_weight=Decimal("15"),
    pending_fraction=Decimal("0.5"),
    penal_cap=Decimal("85"),
    civil_penalties={
        CivilSentenceType.VIOLENCE:    50,
        CivilSentenceType.ALIMONY:     35,
        CivilSentenceType.LABOR:       25,
        CivilSentenceType.CONTRACTUAL: 15,
    },
    resignation_tolerance=1,
    resignation_decrement=5,
    resignation_cap=15,
)


@dataclass
class IntegrityResult:
    """Output of IntegrityCalculator.calculate()."""
    base: int
    penal_penalty: Decimal                       # quantized to 0.1
    civil_penalties: List[CivilPenaltyItem] = field(default_factory=list)
    civil_penalty: int = 0
    resignation_penalty: int = 0
    score: int = 100                             # clamped to [0, 100]


class IntegrityCalculator:
    """Calculate the integrity sub-score from judgments and party resignations."""

    BASELINE: int = 100

    def __init__(self, penalty_table: PenaltyTable = DEFAULT_PENALTY_TABLE):
        self.table = penalty_table

    def _severity(self, sentence: PenalSentence) -> PenalSeverity:
        return sentence.severity or classify_penal_severity(sentence.description)

    def penal_penalty(self, sentences: List[PenalSentence]) -> Decimal:
        firm = [s for s in sentences if s.is_firm]
        pending = [s for s in sentences if not s.is_firm]

        penalty = ZERO
        if firm:
            weights = sorted((self.table.firm_weights[self._severity(s)] for s in firm), reverse=True)
            penalty += weights[0] + self.table.additional_firm_weight * (len(weights) - 1)
        for sentence in pending:
            penalty += self.table.firm_weights[self._severity(sentence)] * self.table.pending_fraction

        return to_decimal(min(penalty, self.table.penal_cap), places=1)

    def civil_penalties(self, sentences: List[CivilSentence]) -> List[CivilPenaltyItem]:
        return [
            CivilPenaltyItem(type=s.type.value, penalty=self.table.civil_penalties[s.type])
            for s in sentences
        ]

    def resignation_penalty(self, party_resignations: int) -> int:
        excess = max(0, party_resignations - self.table.resignation_tolerance)
        return min(excess * self.table.resignation_decrement, self.table.resignation_cap)

    def calculate(
        self,
        penal_sentences: List[PenalSentence],
        civil_sentences: List[CivilSentence],
        party_resignations: int,
    ) -> IntegrityResult:
        penal = self.penal_penalty(penal_sentences)
        civil_items = self.civil_penalties(civil_sentences)
        civil = sum(item.penalty for item in civil_items)
        resignation = self.resignation_penalty(party_resignations)

        score = round_score(clamp(HUNDRED - penal - Decimal(civil) - Decimal(resignation)))

        logger.info(
            "integrity_calculated",
            penalty_table=self.table.version,
            penal_penalty=float(penal),
            civil_penalty=civil,
            resignation_penalty=resignation,
            score=score,
        )
        return IntegrityResult(
            base=self.BASELINE,
            penal_penalty=penal,
            civil_penalties=civil_items,
            civil_penalty=civil,
            resignation_penalty=resignation,
            score=score,
        )
