"""Category catalog: misconduct categories and their escalation paths.

A catalog is an explicit read-only object built per organization (from the
``warning_categories`` table, or from :func:`default_categories` when an
organization is seeded). Nothing in the discipline core reads a
module-level catalog.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.models.discipline import CategorySeverity, WarningLevel

logger = logging.getLogger(__name__)

LEVEL_ORDER: tuple[WarningLevel, ...] = tuple(WarningLevel)

DEFAULT_ESCALATION_PATH: tuple[WarningLevel, ...] = (
    WarningLevel.counselling,
    WarningLevel.verbal,
    WarningLevel.first_written,
    WarningLevel.second_written,
    WarningLevel.final_written,
)

LEVEL_LABELS: dict[WarningLevel, str] = {
    WarningLevel.counselling: "Counselling Session",
    WarningLevel.verbal: "Verbal Warning",
    WarningLevel.first_written: "Written Warning",
    WarningLevel.second_written: "Second Written Warning",
    WarningLevel.final_written: "Final Written Warning",
    WarningLevel.suspension: "Suspension",
    WarningLevel.dismissal: "Dismissal",
}

_LEVEL_ALIASES: dict[str, WarningLevel] = {
    "counseling": WarningLevel.counselling,
    "counselling_session": WarningLevel.counselling,
    "verbal_warning": WarningLevel.verbal,
    "written": WarningLevel.first_written,
    "written_warning": WarningLevel.first_written,
    "first_written_warning": WarningLevel.first_written,
    "second_written_warning": WarningLevel.second_written,
    "final_written_warning": WarningLevel.final_written,
    "final_warning": WarningLevel.final_written,
}


@dataclass(frozen=True)
class CategoryDefinition:
    id: str
    name: str
    severity: CategorySeverity
    escalation_path: tuple[WarningLevel, ...] = ()
    description: str = ""
    required_documents: tuple[str, ...] = ()
    default_validity_months: int = 6
    requires_immediate_action: bool = False
    allows_warning_skipping: bool = False
    # Labour Relations Act grounding and guidance shown to the issuing manager.
    lra_section: str = ""
    schedule8_reference: str = ""
    escalation_rationale: str = ""
    common_examples: tuple[str, ...] = ()
    procedural_requirements: tuple[str, ...] = ()
    evidence_required: tuple[str, ...] = ()
    ccma_factors: tuple[str, ...] = ()


def get_level_label(level: WarningLevel | str) -> str:
    try:
        return LEVEL_LABELS[WarningLevel(level)]
    except ValueError:
        return str(level)


def normalize_level(value: str) -> WarningLevel:
    """Map a free-form level label to a WarningLevel.

    Unrecognised values map to counselling, the mildest action.
    """
    normalized = "_".join(str(value).strip().lower().split())
    try:
        return WarningLevel(normalized)
    except ValueError:
        pass
    if normalized in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[normalized]
    for level, label in LEVEL_LABELS.items():
        if normalized == "_".join(label.lower().split()):
            return level
    return WarningLevel.counselling


def validate_escalation_path(path: Iterable) -> list[str]:
    """Return a list of problems with ``path``; empty when the path is valid.

    A valid path is non-empty, uses known levels, has no repeats and follows
    the shared level vocabulary order (mildest first).
    """
    problems: list[str] = []
    levels: list[WarningLevel] = []
    for item in path:
        try:
            levels.append(WarningLevel(item))
        except ValueError:
            problems.append(f"Unknown warning level: {item}")
    if problems:
        return problems
    if not levels:
        return ["Escalation path must contain at least one level"]
    if len(set(levels)) != len(levels):
        problems.append("Escalation path must not repeat a level")
    indexes = [LEVEL_ORDER.index(level) for level in levels]
    if any(b <= a for a, b in zip(indexes, indexes[1:])):
        problems.append("Escalation path must be ordered from mildest to most severe")
    return problems


class CategoryCatalog:
    def __init__(self, categories: Iterable[CategoryDefinition] = ()):
        self._categories: dict[str, CategoryDefinition] = {}
        for category in categories:
            self._categories[str(category.id)] = category

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self):
        return iter(self._categories.values())

    def get_category_by_id(self, category_id) -> CategoryDefinition | None:
        return self._categories.get(str(category_id))

    def get_escalation_path(self, category_id) -> tuple[WarningLevel, ...]:
        category = self.get_category_by_id(category_id)
        if category is None:
            logger.warning(
                "Category %s not in catalog; using default escalation path",
                category_id,
            )
            return DEFAULT_ESCALATION_PATH
        if not category.escalation_path:
            logger.warning(
                "Category %s has no escalation path; using default path",
                category_id,
            )
            return DEFAULT_ESCALATION_PATH
        return category.escalation_path

    def is_valid_level_for_category(self, category_id, level) -> bool:
        try:
            level = WarningLevel(level)
        except ValueError:
            return False
        return level in self.get_escalation_path(category_id)

    def next_level(self, category_id, current_level) -> WarningLevel | None:
        """Level after ``current_level`` in the category path, or None at the end."""
        path = self.get_escalation_path(category_id)
        try:
            index = path.index(WarningLevel(current_level))
        except ValueError:
            return None
        if index == len(path) - 1:
            return None
        return path[index + 1]

    def categories_by_severity(
        self, severity: CategorySeverity
    ) -> list[CategoryDefinition]:
        return [c for c in self._categories.values() if c.severity == severity]

    def all_escalation_paths(self) -> dict[str, tuple[WarningLevel, ...]]:
        return {cid: self.get_escalation_path(cid) for cid in self._categories}


@dataclass(frozen=True)
class _Seed:
    id: str
    name: str
    description: str
    severity: CategorySeverity
    path: tuple[str, ...]
    validity: int
    lra_section: str
    schedule8: str
    rationale: str
    examples: tuple[str, ...]
    procedures: tuple[str, ...]
    evidence: tuple[str, ...]
    ccma_factors: tuple[str, ...]
    immediate: bool = False
    skipping: bool = False
    documents: tuple[str, ...] = ()


_INCAPACITY = "Section 188(1)(a) - Incapacity or poor work performance"
_MISCONDUCT = "Section 188(1)(b) - Misconduct"
_SCHEDULE8_MISCONDUCT = "Schedule 8, Item 1 - Misconduct procedures"
_FULL_PATH = ("counselling", "verbal", "first_written", "second_written", "final_written")

_DEFAULT_SEEDS: tuple[_Seed, ...] = (
    _Seed(
        "attendance_punctuality",
        "Attendance & Punctuality",
        "Late coming, unauthorized absence, early departure without permission",
        CategorySeverity.minor,
        _FULL_PATH,
        6,
        lra_section=_INCAPACITY,
        schedule8="Schedule 8, Item 10 - Incapacity/poor performance procedures",
        rationale=(
            "Attendance issues are typically correctable behavior problems that "
            "benefit from full progressive discipline, giving employees maximum "
            "opportunity to improve while building strong legal documentation."
        ),
        examples=(
            "Arriving late for work without valid reason (3+ times per month)",
            "Leaving work early without supervisor permission",
            "Unauthorized absence during working hours",
            "Excessive sick leave without proper medical certificates",
            "Not notifying supervisor of absence per company policy",
            "Consistently returning late from breaks",
            "Pattern of Monday/Friday absences without valid reasons",
        ),
        procedures=(
            "Maintain accurate attendance records for minimum 6 months",
            "Investigate reasons for poor attendance before disciplinary action",
            "Consider personal circumstances (Schedule 8 factors)",
            "Provide counselling and support where appropriate",
            "Follow progressive discipline unless pattern shows willful misconduct",
            "Document all interventions and employee responses",
            "Allow employee opportunity to provide medical evidence",
        ),
        evidence=(
            "Daily attendance register or electronic time records",
            "Previous warnings and counselling records",
            "Medical certificates (if absence-related)",
            "Communication records about absences",
            "Witness statements from supervisors",
            "Company attendance policy documentation",
            "Impact assessment on operations",
        ),
        ccma_factors=(
            "Length of service and previous disciplinary record",
            "Personal circumstances affecting attendance",
            "Whether adequate counselling and support was provided",
            "Consistency of employer response to similar cases",
            "Impact on operations and other employees",
            "Economic circumstances and job market conditions",
            "Whether alternative arrangements were considered",
        ),
        documents=("Clock-in records", "Leave records"),
    ),
    _Seed(
        "performance_issues",
        "Performance Issues",
        "Poor work quality, failure to meet targets, lack of required skills",
        CategorySeverity.minor,
        _FULL_PATH,
        6,
        lra_section=_INCAPACITY,
        schedule8="Schedule 8, Item 10 - Poor performance procedures",
        rationale=(
            "Performance issues often stem from lack of training, unclear "
            "expectations, or personal challenges. Full progressive discipline "
            "allows time for coaching, training, and performance improvement plans."
        ),
        examples=(
            "Consistently missing production targets despite training",
            "Work quality below acceptable company standards",
            "Failure to follow established procedures",
            "Inability to learn new skills required for position",
            "Poor customer service resulting in complaints",
            "Errors in work output affecting quality or safety",
            "Lack of productivity compared to similar employees",
        ),
        procedures=(
            "Provide clear performance standards and expectations",
            "Offer training and development opportunities",
            "Implement performance improvement plans with measurable goals",
            "Regular monitoring and feedback sessions",
            "Consider whether incapacity is due to ill-health or lack of skill",
            "Explore alternative positions if performance cannot improve",
            "Document all training provided and performance measurements",
        ),
        evidence=(
            "Performance metrics and measurement records",
            "Training records and certificates",
            "Performance improvement plan documentation",
            "Regular performance review records",
            "Customer complaints or feedback (if applicable)",
            "Comparison with similar employees' performance",
            "Evidence of support and resources provided",
        ),
        ccma_factors=(
            "Whether clear performance standards were communicated",
            "Adequacy of training and support provided",
            "Personal circumstances affecting performance",
            "Length of service and previous performance record",
            "Whether alternative positions were considered",
            "Consistency with treatment of other employees",
            "Economic impact of dismissal on employee",
        ),
        documents=("Performance targets", "Training records"),
    ),
    _Seed(
        "safety_violations",
        "Safety Violations",
        "Failure to follow safety procedures, endangering self or others",
        CategorySeverity.serious,
        ("verbal", "first_written", "final_written"),
        12,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Safety violations can result in injury, death, or legal liability. "
            "While counselling might be appropriate for first-time minor "
            "oversights, repeated or serious safety violations require formal "
            "progressive discipline."
        ),
        examples=(
            "Failure to wear required Personal Protective Equipment (PPE)",
            "Operating machinery without proper authorization",
            "Ignoring safety procedures and protocols",
            "Creating unsafe working conditions for others",
            "Failure to report safety hazards or incidents",
            "Horseplay or reckless behavior in workplace",
            "Smoking in prohibited areas or fire hazard zones",
        ),
        procedures=(
            "Immediate investigation of safety incidents",
            "Ensure employee understands safety requirements",
            "Provide additional safety training if needed",
            "Consider whether violation was willful or due to lack of knowledge",
            "Implement corrective measures to prevent recurrence",
            "May require temporary removal from dangerous areas",
            "Report serious incidents to relevant authorities",
        ),
        evidence=(
            "Incident reports and investigation findings",
            "Safety training records and certificates",
            "Photographs of safety violations or hazards",
            "Witness statements from supervisors or colleagues",
            "Safety inspection reports",
            "Company safety policies and procedures",
            "Medical reports if injury occurred",
        ),
        ccma_factors=(
            "Seriousness of safety risk created",
            "Whether violation was willful or negligent",
            "Previous safety training provided",
            "Employee's safety record and length of service",
            "Potential consequences of the safety violation",
            "Consistency of safety enforcement",
            "Industry standards and legal requirements",
        ),
        immediate=True,
        documents=("Incident report", "Safety procedure acknowledgement"),
    ),
    _Seed(
        "insubordination_disrespect",
        "Insubordination & Disrespect",
        "Refusal to follow instructions, disrespectful behavior, undermining authority",
        CategorySeverity.serious,
        ("counselling", "verbal", "first_written", "final_written"),
        6,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Insubordination varies from minor attitude issues (requiring "
            "counselling) to serious defiance. Progressive discipline allows "
            "distinction between momentary lapses and persistent defiant behavior."
        ),
        examples=(
            "Refusing to follow reasonable and lawful instructions",
            "Disrespectful language or behavior toward supervisors",
            "Undermining management authority in front of colleagues",
            "Aggressive or threatening behavior toward management",
            "Consistently challenging management decisions inappropriately",
            "Showing contempt for company policies or procedures",
            "Public criticism of management or company",
        ),
        procedures=(
            "Distinguish between reasonable management instruction and unreasonable demands",
            "Consider employee's right to raise legitimate grievances",
            "Assess whether behavior was influenced by workplace stress",
            "Provide opportunity for employee to explain their perspective",
            "Consider mediation or conflict resolution where appropriate",
            "Document specific instances with dates and witnesses",
            "Ensure consistency with treatment of similar cases",
        ),
        evidence=(
            "Written statements from witnesses present",
            "Documentation of specific incidents with dates and times",
            "Records of instructions given and employee response",
            "Previous disciplinary records for pattern evidence",
            "Email or written communication showing insubordination",
            "Performance reviews or feedback sessions",
            "Evidence of impact on team morale or productivity",
        ),
        ccma_factors=(
            "Severity of the insubordinate behavior",
            "Whether employee had legitimate grievances",
            "Length of service and previous disciplinary record",
            "Impact on workplace authority and discipline",
            "Whether behavior was out of character",
            "Workplace stress factors or personal circumstances",
            "Potential for rehabilitation and improved behavior",
        ),
        documents=("Witness statements",),
    ),
    _Seed(
        "policy_violations",
        "Policy Violations",
        "Breach of company policies, procedures, or workplace rules",
        CategorySeverity.minor,
        _FULL_PATH,
        6,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Policy violations vary greatly in seriousness. Progressive "
            "discipline allows proportionate responses based on policy "
            "importance and violation severity."
        ),
        examples=(
            "Violation of dress code or appearance standards",
            "Inappropriate use of company property or equipment",
            "Breach of confidentiality or privacy policies",
            "Unauthorized use of company internet or email",
            "Violation of social media and communication policies",
            "Failure to follow administrative procedures",
            "Breach of conflict of interest policies",
        ),
        procedures=(
            "Ensure policy was clearly communicated to employee",
            "Verify employee had access to and understood policy",
            "Consider seriousness of policy violated",
            "Investigate whether violation was intentional",
            "Provide policy training if knowledge gaps identified",
            "Consider impact of violation on business operations",
            "Ensure consistent application across all employees",
        ),
        evidence=(
            "Copy of relevant company policy document",
            "Evidence of policy communication (training records, handbook)",
            "Documentation of the specific violation",
            "Computer logs, emails, or digital evidence if applicable",
            "Witness statements or supervisor observations",
            "Previous policy violations or training records",
            "Impact assessment on business or colleagues",
        ),
        ccma_factors=(
            "Clarity and accessibility of the policy violated",
            "Seriousness of the policy and business impact",
            "Employee's knowledge and understanding of policy",
            "Intent behind the violation",
            "Consistency of policy enforcement",
            "Length of service and previous violations",
            "Whether remedial action is possible",
        ),
        documents=("Policy acknowledgement",),
    ),
    _Seed(
        "dishonesty_theft",
        "Dishonesty & Theft",
        "Stealing, fraud, falsifying records, dishonest behavior",
        CategorySeverity.gross_misconduct,
        ("first_written", "final_written"),
        12,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Dishonesty and theft break fundamental trust required for "
            "employment. Minor dishonesty may warrant progressive discipline, "
            "but serious theft or fraud often justifies immediate dismissal "
            "after investigation."
        ),
        examples=(
            "Stealing company property, money, or resources",
            "Fraudulent claiming of overtime or expenses",
            "Falsifying time records, reports, or documentation",
            "Misappropriation of company funds or assets",
            "Lying about qualifications, experience, or credentials",
            "Concealing conflicts of interest or kickbacks",
            "Falsifying safety records or inspection reports",
        ),
        procedures=(
            "Conduct thorough investigation before taking action",
            "Preserve evidence and maintain chain of custody",
            "Consider suspension pending investigation if necessary",
            "Distinguish between minor dishonesty and serious fraud",
            "Involve security or law enforcement if appropriate",
            "Ensure fair hearing and right to respond",
            "Consider whether criminal charges should be laid",
        ),
        evidence=(
            "Financial records, receipts, or transaction evidence",
            "Security camera footage or access logs",
            "Witness statements from colleagues or customers",
            "Forensic accounting or audit reports",
            "Documentation of missing inventory or assets",
            "Computer records or digital evidence",
            "Statements from employee during investigation",
        ),
        ccma_factors=(
            "Value and nature of property stolen or involved",
            "Level of trust and responsibility in employee's position",
            "Impact on employer's business or reputation",
            "Length of service and previous disciplinary record",
            "Whether employee admitted wrongdoing and showed remorse",
            "Consistency with treatment of similar cases",
            "Potential for rehabilitation vs. need to deter others",
        ),
        immediate=True,
        skipping=True,
        documents=("Investigation report", "Evidence log"),
    ),
    _Seed(
        "substance_abuse",
        "Substance Abuse",
        "Use of alcohol or drugs affecting work performance or safety",
        CategorySeverity.serious,
        ("counselling", "verbal", "first_written", "final_written"),
        6,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Substance abuse is both a health issue and workplace safety "
            "concern. Counselling and support are prioritized initially, but "
            "safety concerns require firm boundaries."
        ),
        examples=(
            "Reporting to work under influence of alcohol or drugs",
            "Possession or use of illegal substances at work",
            "Performance deterioration due to substance abuse",
            "Erratic behavior suggesting intoxication",
            "Positive results on random drug/alcohol testing",
            "Alcohol odor or visible signs of intoxication",
            "Refusing to submit to required substance testing",
        ),
        procedures=(
            "Follow company substance abuse policy procedures",
            "Conduct testing according to established protocols",
            "Distinguish between addiction (health issue) and misconduct",
            "Offer employee assistance programs where available",
            "Consider rehabilitation and treatment options",
            "Ensure safety of employee and colleagues",
            "Document all incidents and interventions",
        ),
        evidence=(
            "Drug/alcohol test results and chain of custody",
            "Witness observations of behavior and condition",
            "Supervisor reports of performance decline",
            "Medical evidence or treatment records (if disclosed)",
            "Company substance abuse policies",
            "Previous incidents or test results",
            "Evidence of impact on work performance or safety",
        ),
        ccma_factors=(
            "Whether substance abuse affects work performance",
            "Safety implications for employee and colleagues",
            "Employee's willingness to seek treatment",
            "Length of service and previous record",
            "Availability of rehabilitation programs",
            "Consistency of policy application",
            "Balance between health support and workplace safety",
        ),
        immediate=True,
        documents=("Test results", "Witness statements"),
    ),
    _Seed(
        "harassment_discrimination",
        "Harassment & Discrimination",
        "Sexual harassment, racial discrimination, bullying, or creating hostile work environment",
        CategorySeverity.gross_misconduct,
        ("final_written",),
        12,
        lra_section=_MISCONDUCT,
        schedule8=_SCHEDULE8_MISCONDUCT,
        rationale=(
            "Harassment and discrimination create legal liability and hostile "
            "work environments. While investigation is required, proven cases "
            "often warrant immediate serious action."
        ),
        examples=(
            "Sexual harassment or unwanted sexual advances",
            "Racial, gender, or religious discrimination",
            "Bullying, intimidation, or creating hostile environment",
            "Inappropriate comments about appearance or personal life",
            "Displaying offensive material or making discriminatory jokes",
            "Retaliation against employees who report discrimination",
            "Creating work environment that excludes certain groups",
        ),
        procedures=(
            "Immediate investigation by trained investigators",
            "Ensure complainant safety and prevent retaliation",
            "Maintain confidentiality while conducting investigation",
            "Follow company harassment and discrimination policies",
            "Consider interim measures to separate parties",
            "Provide support to affected employees",
            "Report to relevant authorities if required by law",
        ),
        evidence=(
            "Written complaint or incident report",
            "Witness statements from colleagues",
            "Documentation of previous similar incidents",
            "Email, text messages, or other communications",
            "Records of previous complaints or warnings",
            "Medical or psychological reports (if applicable)",
            "Evidence of impact on work environment",
        ),
        ccma_factors=(
            "Seriousness and persistence of the harassment",
            "Impact on victim and workplace environment",
            "Position of power or authority of perpetrator",
            "Previous incidents or complaints",
            "Whether behavior was part of pattern",
            "Legal and reputational risk to organization",
            "Need to protect other employees and deter similar conduct",
        ),
        immediate=True,
        skipping=True,
        documents=("Complaint", "Investigation report"),
    ),
)


def default_categories() -> list[CategoryDefinition]:
    """The standard South African misconduct categories used to seed an organization."""
    return [
        CategoryDefinition(
            id=seed.id,
            name=seed.name,
            description=seed.description,
            severity=seed.severity,
            escalation_path=tuple(WarningLevel(level) for level in seed.path),
            required_documents=seed.documents,
            default_validity_months=seed.validity,
            requires_immediate_action=seed.immediate,
            allows_warning_skipping=seed.skipping,
            lra_section=seed.lra_section,
            schedule8_reference=seed.schedule8,
            escalation_rationale=seed.rationale,
            common_examples=seed.examples,
            procedural_requirements=seed.procedures,
            evidence_required=seed.evidence,
            ccma_factors=seed.ccma_factors,
        )
        for seed in _DEFAULT_SEEDS
    ]


def default_catalog() -> CategoryCatalog:
    return CategoryCatalog(default_categories())
