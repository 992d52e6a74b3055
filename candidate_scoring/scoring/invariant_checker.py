# candidate_scoring/scoring/invariant_checker.py
"""
Invariant Checker
-----------------
Read-only batch audit over stored scores. Never mutates a row.

Per row:
    range       sub-score, composite or plan value outside [0, 100]     critical
    drift       integrity re-derived from the breakdown penalty terms,
                competence / transparency / confidence from their points,
                composites from the stored sub-scores                   error
    breakdown   stored result without its breakdown                     error
    plan        plan viability on a non-presidential row, or missing
                on a presidential one                                   error
                plan viability imputed (neutral default)                 warning
    shape       all four sub-scores identical, or spread > threshold    warning

Across rows:
    outliers    per-office z-score beyond the threshold on competence,
                integrity, transparency and balanced (sample std,
                groups smaller than the minimum size are skipped)       warning
    identity    rows sharing a national id whose integrity or
                transparency disagree                                    error

Any row that cannot be parsed or checked is reported as unreadable_row
(critical) and the audit carries on.
"""
import structlog
import pandas as pd
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from candidate_scoring.models.enumerations import OfficeCategory
from candidate_scoring.models.score import ScoreBreakdown, StoredScore, UnreadableRow
from candidate_scoring.scoring.composite_calculator import weighted_score
from candidate_scoring.scoring.utils import HUNDRED, ZERO, clamp, round_score, to_decimal
from candidate_scoring.scoring.weights import DEFAULT_PRESET_FAMILY, PresetFamily

logger = structlog.get_logger(__name__)

ZSCORE_METRICS = ("competence", "integrity", "transparency", "balanced")


class Severity(str, Enum):
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"


class AnomalyCode(str, Enum):
    RANGE_VIOLATION = "range_violation"
    INTEGRITY_DRIFT = "integrity_drift"
    SUBSCORE_DRIFT = "subscore_drift"
    COMPOSITE_DRIFT = "composite_drift"
    MISSING_BREAKDOWN = "missing_breakdown"
    PLAN_ON_NON_PRESIDENT = "plan_on_non_president"
    PLAN_MISSING = "plan_missing"
    PLAN_IMPUTED = "plan_imputed"
    UNIFORM_SUBSCORES = "uniform_subscores"
    EXTREME_SPREAD = "extreme_spread"
    ZSCORE_OUTLIER = "zscore_outlier"
    IDENTITY_MISMATCH = "identity_mismatch"
    UNREADABLE_ROW = "unreadable_row"


@dataclass
class Anomaly:
    candidate_id: str
    label: str
    code: AnomalyCode
    severity: Severity
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["code"] = self.code.value
        data["severity"] = self.severity.value
        return data


@dataclass
class AuditReport:
    """Output of InvariantChecker.audit()."""
    rows_checked: int
    preset_family: str
    anomalies: List[Anomaly] = field(default_factory=list)

    @property
    def anomaly_count(self) -> int:
        return len(self.anomalies)

    @property
    def counts_by_code(self) -> Dict[str, int]:
        return dict(Counter(a.code.value for a in self.anomalies))

    @property
    def counts_by_severity(self) -> Dict[str, int]:
        return dict(Counter(a.severity.value for a in self.anomalies))

    @property
    def has_critical(self) -> bool:
        return any(a.severity == Severity.CRITICAL for a in self.anomalies)

    def by_code(self, code: AnomalyCode) -> List[Anomaly]:
        return [a for a in self.anomalies if a.code == code]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows_checked": self.rows_checked,
            "preset_family": self.preset_family,
            "anomaly_count": self.anomaly_count,
            "counts_by_code": self.counts_by_code,
            "counts_by_severity": self.counts_by_severity,
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


def _num(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


class InvariantChecker:
    """Audit stored ScoreResult / ScoreBreakdown pairs."""

    def __init__(
        self,
        preset_family: PresetFamily = DEFAULT_PRESET_FAMILY,
        integrity_tolerance: Optional[float] = None,
        composite_tolerance: Optional[float] = None,
        spread_threshold: Optional[int] = None,
        zscore_threshold: Optional[float] = None,
        min_group_size: Optional[int] = None,
    ):
        from candidate_scoring.config import get_settings
        settings = get_settings()

        self.family = preset_family
        self.integrity_tolerance = to_decimal(
            settings.AUDIT_INTEGRITY_TOLERANCE if integrity_tolerance is None else integrity_tolerance
        )
        self.composite_tolerance = to_decimal(
            settings.AUDIT_COMPOSITE_TOLERANCE if composite_tolerance is None else composite_tolerance
        )
        self.spread_threshold = settings.AUDIT_SPREAD_THRESHOLD if spread_threshold is None else spread_threshold
        self.zscore_threshold = settings.AUDIT_ZSCORE_THRESHOLD if zscore_threshold is None else zscore_threshold
        self.min_group_size = settings.AUDIT_MIN_GROUP_SIZE if min_group_size is None else min_group_size

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def audit(
        self,
        rows: Sequence[StoredScore],
        unreadable: Sequence[UnreadableRow] = (),
    ) -> AuditReport:
        """
        Run every check and collect the anomalies.

        Rows that could not be parsed, or whose per-row checks fail, are
        reported as critical unreadable_row anomalies; the audit still
        completes.
        """
        report = AuditReport(rows_checked=len(rows) + len(unreadable), preset_family=self.family.version)

        for item in unreadable:
            report.anomalies.append(self._unreadable(item.candidate_id, item.candidate_id, item.error))

        for row in rows:
            try:
                found = (
                    self.check_range(row)
                    + self.check_drift(row)
                    + self.check_plan(row)
                    + self.check_shape(row)
                )
            except Exception as e:
                logger.error("row_check_failed", candidate_id=row.candidate_id, error=str(e))
                found = [self._unreadable(row.candidate_id, row.label, f"{type(e).__name__}: {e}")]
            report.anomalies.extend(found)

        report.anomalies.extend(self.check_outliers(rows))
        report.anomalies.extend(self.check_identity(rows))

        logger.info(
            "audit_completed",
            rows=report.rows_checked,
            anomalies=report.anomaly_count,
            by_severity=report.counts_by_severity,
        )
        return report

    def _anomaly(self, row: StoredScore, code: AnomalyCode, severity: Severity, message: str, **details) -> Anomaly:
        return Anomaly(
            candidate_id=row.candidate_id,
            label=row.label,
            code=code,
            severity=severity,
            message=message,
            details=details,
        )

    @staticmethod
    def _unreadable(candidate_id: str, label: str, error: str) -> Anomaly:
        return Anomaly(
            candidate_id=candidate_id,
            label=label,
            code=AnomalyCode.UNREADABLE_ROW,
            severity=Severity.CRITICAL,
            message=f"Stored row could not be audited: {error}",
            details={"error": error},
        )

    # ------------------------------------------------------------------
    # Per-row checks
    # ------------------------------------------------------------------

    def check_range(self, row: StoredScore) -> List[Anomaly]:
        values: Dict[str, Any] = dict(row.result.subscores)
        values.update(row.result.composites)
        values["plan_viability"] = row.result.plan_viability

        anomalies = []
        for name, value in values.items():
            if value is None:
                continue
            if not ZERO <= to_decimal(value) <= HUNDRED:
                anomalies.append(self._anomaly(
                    row, AnomalyCode.RANGE_VIOLATION, Severity.CRITICAL,
                    f"{name}={value} outside [0, 100]",
                    field=name, value=float(value),
                ))
        return anomalies

    def check_drift(self, row: StoredScore) -> List[Anomaly]:
        anomalies = self._composite_drift(row)

        breakdown = row.breakdown
        if breakdown is None:
            anomalies.append(self._anomaly(
                row, AnomalyCode.MISSING_BREAKDOWN, Severity.ERROR,
                "stored result has no breakdown row",
            ))
            return anomalies

        expected_integrity = self.expected_integrity(breakdown)
        if abs(Decimal(row.result.integrity) - expected_integrity) > self.integrity_tolerance:
            anomalies.append(self._anomaly(
                row, AnomalyCode.INTEGRITY_DRIFT, Severity.ERROR,
                f"integrity={row.result.integrity} but breakdown implies {expected_integrity}",
                stored=row.result.integrity,
                expected=float(expected_integrity),
                penal_penalty=float(breakdown.penal_penalty),
            ))

        expected = {
            "competence": round_score(clamp(
                Decimal(breakdown.education_points)
                + Decimal(breakdown.experience_total_points)
                + to_decimal(breakdown.experience_relevant_points)
                + Decimal(breakdown.leadership_points)
            )),
            "transparency": breakdown.completeness_points
                + breakdown.consistency_points
                + breakdown.assets_quality_points,
            "confidence": breakdown.verification_points + breakdown.coverage_points,
        }
        for name, value in expected.items():
            stored = getattr(row.result, name)
            if abs(Decimal(stored) - Decimal(value)) > self.integrity_tolerance:
                anomalies.append(self._anomaly(
                    row, AnomalyCode.SUBSCORE_DRIFT, Severity.ERROR,
                    f"{name}={stored} but breakdown points sum to {value}",
                    field=name, stored=stored, expected=value,
                ))
        return anomalies

    @staticmethod
    def expected_integrity(breakdown: ScoreBreakdown) -> Decimal:
        civil = sum(item.penalty for item in breakdown.civil_penalties) \
            if breakdown.civil_penalties else breakdown.civil_penalty
        raw = (
            Decimal(breakdown.integrity_base)
            - to_decimal(breakdown.penal_penalty)
            - Decimal(civil)
            - Decimal(breakdown.resignation_penalty)
        )
        return Decimal(round_score(clamp(raw)))

    def _composite_drift(self, row: StoredScore) -> List[Anomaly]:
        result = row.result
        subscores = result.subscores
        presets = list(self.family.standard)
        if result.plan_viability is not None:
            presets.extend(self.family.plan_aware)

        anomalies = []
        for preset in presets:
            stored = getattr(result, preset.name)
            if stored is None:
                continue
            expected = weighted_score(subscores, preset, result.plan_viability)
            if abs(to_decimal(stored) - expected) > self.composite_tolerance:
                anomalies.append(self._anomaly(
                    row, AnomalyCode.COMPOSITE_DRIFT, Severity.ERROR,
                    f"{preset.name}={stored} but sub-scores imply {expected}",
                    field=preset.name, stored=float(stored), expected=float(expected),
                ))
        return anomalies

    def check_plan(self, row: StoredScore) -> List[Anomaly]:
        result = row.result
        plan_fields = {
            "plan_viability": result.plan_viability,
            "balanced_p": result.balanced_p,
            "merit_first_p": result.merit_first_p,
            "integrity_first_p": result.integrity_first_p,
        }

        if row.office_category != OfficeCategory.PRESIDENT:
            present = [name for name, value in plan_fields.items() if value is not None]
            if present:
                return [self._anomaly(
                    row, AnomalyCode.PLAN_ON_NON_PRESIDENT, Severity.ERROR,
                    f"plan viability fields on a {row.office_category.value} row",
                    fields=present,
                )]
            return []

        missing = [name for name, value in plan_fields.items() if value is None]
        if missing:
            return [self._anomaly(
                row, AnomalyCode.PLAN_MISSING, Severity.ERROR,
                "presidential row without plan viability",
                fields=missing,
            )]
        if row.breakdown is not None and row.breakdown.plan_viability_imputed:
            return [self._anomaly(
                row, AnomalyCode.PLAN_IMPUTED, Severity.WARNING,
                f"plan viability imputed at {result.plan_viability}",
                plan_viability=_num(result.plan_viability),
            )]
        return []

    def check_shape(self, row: StoredScore) -> List[Anomaly]:
        values = list(row.result.subscores.values())
        if len(set(values)) == 1:
            return [self._anomaly(
                row, AnomalyCode.UNIFORM_SUBSCORES, Severity.WARNING,
                f"all four sub-scores equal {values[0]} (unprocessed default?)",
                value=values[0],
            )]
        spread = max(values) - min(values)
        if spread > self.spread_threshold:
            return [self._anomaly(
                row, AnomalyCode.EXTREME_SPREAD, Severity.WARNING,
                f"sub-score spread {spread} exceeds {self.spread_threshold}",
                spread=spread, subscores=row.result.subscores,
            )]
        return []

    # ------------------------------------------------------------------
    # Cross-row checks
    # ------------------------------------------------------------------

    def check_outliers(self, rows: Sequence[StoredScore]) -> List[Anomaly]:
        if not rows:
            return []

        frame = pd.DataFrame.from_records([
            {
                "position": i,
                "office_category": row.office_category.value,
                "competence": float(row.result.competence),
                "integrity": float(row.result.integrity),
                "transparency": float(row.result.transparency),
                "balanced": float(row.result.balanced),
            }
            for i, row in enumerate(rows)
        ])
        grouped = frame.groupby("office_category")
        size = grouped["position"].transform("size")

        anomalies = []
        for metric in ZSCORE_METRICS:
            mean = grouped[metric].transform("mean")
            std = grouped[metric].transform("std")   # sample std (ddof=1)
            z = (frame[metric] - mean) / std
            mask = (size >= self.min_group_size) & (std > 0) & (z.abs() > self.zscore_threshold)

            for idx in frame.index[mask]:
                row = rows[int(frame.at[idx, "position"])]
                anomalies.append(self._anomaly(
                    row, AnomalyCode.ZSCORE_OUTLIER, Severity.WARNING,
                    f"{metric} z-score {z[idx]:.2f} within {row.office_category.value}",
                    metric=metric,
                    value=float(frame.at[idx, metric]),
                    mean=round(float(mean[idx]), 2),
                    std=round(float(std[idx]), 2),
                    zscore=round(float(z[idx]), 2),
                ))
        return anomalies

    def check_identity(self, rows: Sequence[StoredScore]) -> List[Anomaly]:
        by_identity: Dict[str, List[StoredScore]] = defaultdict(list)
        for row in rows:
            key = (row.national_id or "").strip()
            if key:
                by_identity[key].append(row)

        anomalies = []
        for national_id, group in sorted(by_identity.items()):
            if len(group) < 2:
                continue
            integrity = {r.result.integrity for r in group}
            transparency = {r.result.transparency for r in group}
            if len(integrity) > 1 or len(transparency) > 1:
                anomalies.append(self._anomaly(
                    group[0], AnomalyCode.IDENTITY_MISMATCH, Severity.ERROR,
                    f"national id {national_id} has {len(group)} records with differing integrity/transparency",
                    national_id=national_id,
                    records=[
                        {
                            "candidate_id": r.candidate_id,
                            "office_category": r.office_category.value,
                            "integrity": r.result.integrity,
                            "transparency": r.result.transparency,
                        }
                        for r in group
                    ],
                ))
        return anomalies
