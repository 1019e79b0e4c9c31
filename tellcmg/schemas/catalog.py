"""
Category and Modifier Catalogs

Static lookup tables for the idea categories a loan officer can tag an idea
with, the optional requirement modifiers, and the detail/format preferences.

Each category has:
- A stable identifier (what clients send)
- A display label
- A one-line semantic description used to bias the model's phrasing
- The group it is shown under in the picker

The catalogs are built once at import time and only ever read afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class CategoryGroup(str, Enum):
    LOS_TECH = "los-tech"
    PIPELINE_OPS = "pipeline-ops"
    MARKETING_CRM = "marketing-crm"
    PRODUCTS_GROWTH = "products-growth"


GROUP_TITLES = MappingProxyType({
    CategoryGroup.LOS_TECH: "LOS & Tech",
    CategoryGroup.PIPELINE_OPS: "Pipeline & Ops",
    CategoryGroup.MARKETING_CRM: "Marketing & CRM",
    CategoryGroup.PRODUCTS_GROWTH: "Products & Growth",
})

GENERIC_DESCRIPTION = "general"


def derive_label(identifier: str) -> str:
    """Turn an identifier like ``doc-mgmt`` into ``Doc Mgmt``."""
    words = identifier.replace("_", "-").split("-")
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


@dataclass(frozen=True)
class Category:
    """A single idea category."""
    id: str
    label: str
    description: str  # Phrase fed to the model
    summary: str      # Tooltip text for the picker
    icon: str
    group: CategoryGroup

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "summary": self.summary,
            "icon": self.icon,
            "group": self.group.value,
        }


@dataclass(frozen=True)
class Modifier:
    """An optional requirement the user can toggle on."""
    id: str
    label: str
    description: str
    instruction: str  # One-line instruction appended to the model request

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "instruction": self.instruction,
        }


class CategoryCatalog:
    """Read-only category lookup. Unknown ids never raise."""

    def __init__(self, categories: Iterable[Category]):
        self._by_id: Mapping[str, Category] = MappingProxyType(
            {c.id: c for c in categories}
        )

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())

    def get(self, category_id: str) -> Optional[Category]:
        return self._by_id.get(category_id)

    def ids(self) -> list[str]:
        return list(self._by_id)

    def describe(self, category_id: str) -> str:
        """Semantic description, or ``"general"`` for unknown ids."""
        category = self._by_id.get(category_id)
        return category.description if category else GENERIC_DESCRIPTION

    def label_of(self, category_id: str) -> str:
        """Display label; derived from the identifier when none is defined."""
        category = self._by_id.get(category_id)
        if category and category.label:
            return category.label
        return derive_label(category_id)

    def by_group(self) -> dict[CategoryGroup, list[Category]]:
        grouped: dict[CategoryGroup, list[Category]] = {g: [] for g in CategoryGroup}
        for category in self._by_id.values():
            grouped[category.group].append(category)
        return grouped

    def to_dict(self) -> list[dict]:
        return [
            {
                "id": group.value,
                "title": GROUP_TITLES[group],
                "categories": [c.to_dict() for c in members],
            }
            for group, members in self.by_group().items()
        ]


class ModifierCatalog:
    """Read-only modifier lookup."""

    def __init__(self, modifiers: Iterable[Modifier]):
        self._by_id: Mapping[str, Modifier] = MappingProxyType(
            {m.id: m for m in modifiers}
        )

    def __contains__(self, modifier_id: object) -> bool:
        return modifier_id in self._by_id

    def __iter__(self):
        return iter(self._by_id.values())

    def get(self, modifier_id: str) -> Optional[Modifier]:
        return self._by_id.get(modifier_id)

    def instruction_for(self, modifier_id: str) -> Optional[str]:
        modifier = self._by_id.get(modifier_id)
        return modifier.instruction if modifier else None

    def instructions(self, modifier_ids: Iterable[str]) -> list[str]:
        """Instructions for the known ids, in the order given. Unknown ids are dropped."""
        found = (self.instruction_for(m) for m in modifier_ids)
        return [phrase for phrase in found if phrase]

    def to_dict(self) -> list[dict]:
        return [m.to_dict() for m in self._by_id.values()]


def _cat(id: str, label: str, description: str, summary: str, icon: str,
         group: CategoryGroup) -> Category:
    return Category(id=id, label=label, description=description, summary=summary,
                    icon=icon, group=group)


_LT = CategoryGroup.LOS_TECH
_PO = CategoryGroup.PIPELINE_OPS
_MC = CategoryGroup.MARKETING_CRM
_PG = CategoryGroup.PRODUCTS_GROWTH

CATEGORY_CATALOG = CategoryCatalog([
    # LOS & Tech
    _cat("los-enhancement", "LOS Enhancement", "improving the Loan Origination System",
         "Improvements to the loan origination system", "🏦", _LT),
    _cat("automation", "Automation", "automating manual tasks and processes",
         "Automate manual tasks and repetitive processes", "⚙️", _LT),
    _cat("macro-script", "Macro / Script", "custom macros, scripts, and shortcuts",
         "Custom macros, scripts, and shortcuts", "📜", _LT),
    _cat("integration", "Integration", "connecting systems, tools, and data",
         "Connect systems, tools, and data sources", "🔗", _LT),
    _cat("dashboard", "Dashboard", "new reports, dashboards, and analytics",
         "New reports, dashboards, and analytics", "📊", _LT),
    _cat("ui-ux", "UI / UX Fix", "interface and usability improvements",
         "Interface and usability improvements", "🎨", _LT),
    _cat("doc-mgmt", "Doc Management", "document handling, e-sign, and storage",
         "Document handling, e-sign, and storage", "📁", _LT),
    _cat("mobile", "Mobile App", "mobile origination features",
         "Mobile features for on-the-go origination", "📱", _LT),
    _cat("ai-feature", "AI Feature", "AI-powered tools for underwriting or analysis",
         "AI-powered tools for underwriting, pricing, or analysis", "🤖", _LT),
    _cat("data-quality", "Data Quality", "data accuracy and validation",
         "Data accuracy, validation, and deduplication", "✅", _LT),
    _cat("security", "Security", "security, permissions, and access control",
         "Security, permissions, and access control", "🔒", _LT),
    _cat("api-webhook", "API / Webhook", "system connectivity and notifications",
         "System connectivity and real-time notifications", "🔌", _LT),
    # Pipeline & Ops
    _cat("pipeline-view", "Pipeline View", "pipeline visualization and filtering",
         "Pipeline visualization and filtering", "📈", _PO),
    _cat("workflow", "Workflow", "loan workflow improvements",
         "Streamline loan workflows and processes", "🔄", _PO),
    _cat("bottleneck", "Bottleneck Fix", "fixing processing delays",
         "Identify and fix processing delays", "🚧", _PO),
    _cat("milestone", "Milestones", "milestone and status tracking",
         "Loan milestone and status tracking", "🏁", _PO),
    _cat("task-mgmt", "Task Mgmt", "task assignment and follow-ups",
         "Task assignment, reminders, and follow-ups", "✏️", _PO),
    _cat("handoff", "Handoff", "team-to-team handoff improvements",
         "Team-to-team handoff improvements", "🤝", _PO),
    _cat("qc-audit", "QC / Audit", "quality control and audit improvements",
         "Quality control and audit improvements", "🔍", _PO),
    _cat("closing", "Closing", "closing and funding improvements",
         "Closing and funding improvements", "🏠", _PO),
    _cat("rate-lock", "Rate Lock", "rate lock workflow and alerts",
         "Rate lock workflow and alerts", "🔐", _PO),
    _cat("conditions", "Conditions", "condition tracking and clearing",
         "Condition tracking and clearing workflow", "📋", _PO),
    _cat("exceptions", "Exceptions", "exception handling and escalation",
         "Exception handling and escalation", "⚠️", _PO),
    _cat("sla", "SLA / Turn Time", "turn time targets and monitoring",
         "Turn time targets and monitoring", "⏱️", _PO),
    # Marketing & CRM
    _cat("lead-gen", "Lead Gen", "lead generation and capture",
         "Lead generation and capture ideas", "🎯", _MC),
    _cat("crm-feature", "CRM Feature", "CRM functionality improvements",
         "CRM functionality and improvements", "👥", _MC),
    _cat("email-campaign", "Email Campaign", "email marketing and drip campaigns",
         "Email marketing and drip campaigns", "✉️", _MC),
    _cat("social-media", "Social Media", "social media content and strategy",
         "Social media content and strategy", "📣", _MC),
    _cat("borrower-portal", "Borrower Portal", "borrower portal and self-service",
         "Borrower-facing portal and self-service", "🌐", _MC),
    _cat("referral", "Referrals", "referral and partner programs",
         "Referral and partner programs", "🤝", _MC),
    _cat("brand-content", "Brand / Content", "branding, content, and collateral",
         "Branding, content, and collateral", "🎨", _MC),
    _cat("co-marketing", "Co-Marketing", "realtor and partner co-marketing",
         "Realtor and partner co-marketing", "🏡", _MC),
    _cat("reviews", "Reviews", "reviews, ratings, and testimonials",
         "Reviews, ratings, and testimonials", "⭐", _MC),
    _cat("pre-approval", "Pre-Approval", "pre-approval and pre-qual tools",
         "Pre-approval and pre-qual tools", "📝", _MC),
    _cat("listing-alerts", "Listing Alerts", "property listing and market alerts",
         "Property listing and market alerts", "🏘️", _MC),
    _cat("retention", "Retention", "post-close nurture and retention",
         "Post-close nurture and retention", "💎", _MC),
    # Products & Growth
    _cat("new-product", "New Product", "new loan products or programs",
         "New loan product or program ideas", "🆕", _PG),
    _cat("pricing", "Pricing", "pricing engine and compensation",
         "Pricing engine and compensation ideas", "💲", _PG),
    _cat("guidelines", "Guidelines", "underwriting guideline improvements",
         "Underwriting guideline improvements", "📏", _PG),
    _cat("compliance", "Compliance", "regulatory compliance improvements",
         "Regulatory compliance improvements", "⚖️", _PG),
    _cat("training", "Training", "training and education",
         "Training and education ideas", "🎓", _PG),
    _cat("onboarding", "Onboarding", "new hire onboarding",
         "New hire onboarding improvements", "👋", _PG),
    _cat("vendor", "Vendor", "vendor and third-party partnerships",
         "Vendor and third-party partnerships", "🤝", _PG),
    _cat("cost-savings", "Cost Savings", "cost reduction and efficiency",
         "Cost reduction and efficiency ideas", "💰", _PG),
    _cat("revenue", "Revenue", "revenue growth opportunities",
         "Revenue growth opportunities", "📈", _PG),
    _cat("risk", "Risk Mgmt", "risk management and fraud prevention",
         "Risk management and fraud prevention", "🛡️", _PG),
    _cat("investor", "Investor", "secondary market and investor relations",
         "Secondary market and investor ideas", "🏛️", _PG),
    _cat("policy", "Policy", "internal policy and procedure updates",
         "Internal policy and procedure updates", "📖", _PG),
])


MODIFIER_CATALOG = ModifierCatalog([
    # General
    Modifier("step-by-step", "Step-by-Step", "Break the idea into sequenced steps",
             "Break into numbered implementation steps"),
    Modifier("examples", "Examples", "Include practical examples",
             "Include practical mortgage industry examples"),
    Modifier("alternatives", "Alternatives", "Present 2-3 alternative approaches",
             "Present 2-3 alternative approaches"),
    Modifier("best-practices", "Best Practices", "Highlight industry best practices",
             "Highlight mortgage industry best practices"),
    Modifier("explain-reasoning", "Reasoning", "Explain the 'why' behind the idea",
             "Explain the why behind decisions"),
    # Mortgage-specific
    Modifier("roi-impact", "ROI Impact", "Estimate return on investment",
             "Include estimated ROI and business impact"),
    Modifier("borrower-impact", "Borrower Impact", "How this affects borrowers",
             "Describe borrower experience impact"),
    Modifier("compliance-check", "Compliance", "Regulatory considerations",
             "Address regulatory considerations"),
    Modifier("affected-teams", "Affected Teams", "Which teams are impacted",
             "Identify all affected teams"),
    Modifier("implementation-effort", "Effort Estimate", "Estimate complexity and effort",
             "Estimate complexity (low/medium/high)"),
    Modifier("timeline", "Timeline", "Implementation timeline",
             "Include rough implementation timeline"),
    Modifier("risk-assessment", "Risks", "Identify potential risks",
             "Identify risks and mitigations"),
    Modifier("metrics", "Success Metrics", "Define KPIs and success criteria",
             "Define success metrics and KPIs"),
    Modifier("stakeholders", "Stakeholders", "Consider all stakeholders",
             "Consider all stakeholder perspectives"),
])
