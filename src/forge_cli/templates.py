"""Static registry of repository templates, grouped by organization type."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional


class OrgType(str, Enum):
    HEALTHCARE = "healthcare"
    RESEARCH = "research"
    COMPANY = "company"
    EDUCATION = "education"
    NONPROFIT = "nonprofit"
    GENERIC = "generic"

    @property
    def icon(self) -> str:
        return _ORG_TYPE_ICONS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_ORG_TYPE_ICONS = {
    OrgType.HEALTHCARE: "🏥",
    OrgType.RESEARCH: "🔬",
    OrgType.COMPANY: "🏢",
    OrgType.EDUCATION: "🎓",
    OrgType.NONPROFIT: "🤝",
    OrgType.GENERIC: "📦",
}

# Types a user may filter on; generic is an alias for company.
SELECTABLE_ORG_TYPES = (
    OrgType.HEALTHCARE,
    OrgType.RESEARCH,
    OrgType.COMPANY,
    OrgType.EDUCATION,
    OrgType.NONPROFIT,
)


@dataclass(frozen=True)
class TemplateFile:
    path: str
    content: str


@dataclass(frozen=True)
class RepoTemplate:
    id: str
    name: str
    description: str
    icon: str
    org_type: OrgType
    naming_pattern: str
    naming_example: str
    metadata: dict[str, Any] = field(default_factory=dict)
    initial_files: tuple[TemplateFile, ...] = ()

    @property
    def repo_type(self) -> Optional[str]:
        return self.metadata.get("repoType")

    @property
    def tags(self) -> list[str]:
        return list(self.metadata.get("tags", []))


HEALTHCARE_TEMPLATES = (
    RepoTemplate(
        id="patient-record",
        name="Patient Record",
        description="FHIR-compliant patient medical record repository",
        icon="User",
        org_type=OrgType.HEALTHCARE,
        metadata={
            "repoType": "patient-record",
            "tags": ["patient", "medical-record"],
            "domainData": {"healthcare": {"resourceType": "Patient", "fhirVersion": "R4"}},
        },
        naming_pattern="patient-{name}",
        naming_example="patient-john-doe",
    ),
    RepoTemplate(
        id="fhir-resource",
        name="FHIR Resource Collection",
        description="Collection of FHIR resources (observations, conditions, etc.)",
        icon="FileJson",
        org_type=OrgType.HEALTHCARE,
        metadata={
            "repoType": "fhir",
            "tags": ["fhir", "resources"],
            "domainData": {"healthcare": {"fhirVersion": "R4"}},
        },
        naming_pattern="fhir-{resource-type}",
        naming_example="fhir-observations-2026",
    ),
    RepoTemplate(
        id="medical-protocol",
        name="Medical Protocol",
        description="Clinical protocol or treatment guideline",
        icon="FileText",
        org_type=OrgType.HEALTHCARE,
        metadata={"repoType": "protocol", "tags": ["protocol", "guidelines"]},
        naming_pattern="protocol-{name}",
        naming_example="protocol-diabetes-management",
    ),
    RepoTemplate(
        id="clinical-study",
        name="Clinical Study",
        description="Clinical trial or research study data",
        icon="FlaskConical",
        org_type=OrgType.HEALTHCARE,
        metadata={"repoType": "experiment", "tags": ["clinical-trial", "research"]},
        naming_pattern="study-{name}",
        naming_example="study-drug-efficacy-2026",
    ),
)

RESEARCH_TEMPLATES = (
    RepoTemplate(
        id="research-dataset",
        name="Research Dataset",
        description="Versioned research dataset with metadata",
        icon="Database",
        org_type=OrgType.RESEARCH,
        metadata={"repoType": "dataset", "tags": ["dataset", "data"]},
        naming_pattern="{topic}-dataset",
        naming_example="climate-data-2026",
    ),
    RepoTemplate(
        id="research-experiment",
        name="Research Experiment",
        description="Experimental study with methodology and results",
        icon="FlaskConical",
        org_type=OrgType.RESEARCH,
        metadata={"repoType": "experiment", "tags": ["experiment", "study"]},
        naming_pattern="experiment-{name}",
        naming_example="experiment-protein-analysis",
    ),
    RepoTemplate(
        id="research-publication",
        name="Research Publication",
        description="Academic paper with LaTeX source and supplementary materials",
        icon="BookOpen",
        org_type=OrgType.RESEARCH,
        metadata={"repoType": "publication", "tags": ["paper", "publication"]},
        naming_pattern="paper-{title}",
        naming_example="paper-ml-genomics-2026",
    ),
    RepoTemplate(
        id="research-analysis",
        name="Data Analysis",
        description="Statistical analysis and computational notebooks",
        icon="TrendingUp",
        org_type=OrgType.RESEARCH,
        metadata={"repoType": "analysis", "tags": ["analysis", "statistics"]},
        naming_pattern="analysis-{topic}",
        naming_example="analysis-gene-expression",
    ),
)

COMPANY_TEMPLATES = (
    RepoTemplate(
        id="code-repository",
        name="Code Repository",
        description="Standard software project",
        icon="Code",
        org_type=OrgType.COMPANY,
        metadata={"repoType": "code", "tags": ["code", "software"]},
        naming_pattern="{project-name}",
        naming_example="web-app",
    ),
)

EDUCATION_TEMPLATES = (
    RepoTemplate(
        id="course-materials",
        name="Course Materials",
        description="Course curriculum and lecture materials",
        icon="GraduationCap",
        org_type=OrgType.EDUCATION,
        metadata={"repoType": "course", "tags": ["course", "curriculum"]},
        naming_pattern="{course-code}-{title}",
        naming_example="cs101-intro-programming",
    ),
)

NONPROFIT_TEMPLATES = (
    RepoTemplate(
        id="campaign",
        name="Campaign",
        description="Fundraising or advocacy campaign materials",
        icon="Megaphone",
        org_type=OrgType.NONPROFIT,
        metadata={"repoType": "campaign", "tags": ["campaign", "advocacy"]},
        naming_pattern="campaign-{name}",
        naming_example="campaign-clean-water-2026",
    ),
)

REPO_TEMPLATES: dict[OrgType, tuple[RepoTemplate, ...]] = {
    OrgType.HEALTHCARE: HEALTHCARE_TEMPLATES,
    OrgType.RESEARCH: RESEARCH_TEMPLATES,
    OrgType.COMPANY: COMPANY_TEMPLATES,
    OrgType.EDUCATION: EDUCATION_TEMPLATES,
    OrgType.NONPROFIT: NONPROFIT_TEMPLATES,
    OrgType.GENERIC: COMPANY_TEMPLATES,
}


def parse_org_type(value: str) -> OrgType:
    """Return the OrgType for ``value`` or raise ValueError."""
    try:
        return OrgType(value.strip().lower())
    except ValueError:
        raise ValueError(f'Invalid org type "{value}"') from None


def all_templates() -> list[RepoTemplate]:
    """Every template once, in registry order."""
    seen: set[str] = set()
    templates: list[RepoTemplate] = []
    for group in REPO_TEMPLATES.values():
        for template in group:
            if template.id not in seen:
                seen.add(template.id)
                templates.append(template)
    return templates


def templates_for_org_type(org_type: OrgType | None) -> list[RepoTemplate]:
    return list(REPO_TEMPLATES.get(org_type or OrgType.GENERIC, COMPANY_TEMPLATES))


def get_template(template_id: str) -> Optional[RepoTemplate]:
    for template in all_templates():
        if template.id == template_id:
            return template
    return None


def group_by_org_type(templates: Iterable[RepoTemplate]) -> dict[OrgType, list[RepoTemplate]]:
    grouped: dict[OrgType, list[RepoTemplate]] = {}
    for template in templates:
        grouped.setdefault(template.org_type, []).append(template)
    return grouped
