"""Statistics, estimates, comparisons and file exports computed from a requirements result."""

import io
import csv
import json
import math
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, PageBreak

PRIORITIES = ("high", "medium", "low")

# Hours assumed for items that carry no estimate of their own
HOURS_PER_FUNCTIONAL = 8
HOURS_PER_FRONTEND = 6
HOURS_PER_ENDPOINT = 12

CSV_HEADER = ["Type", "Title", "Description", "Priority", "Role", "Estimated Hours", "Category"]
CSV_FORMATS = ("csv", "jira", "trello", "asana")
EXPORT_FORMATS = ("json",) + CSV_FORMATS + ("markdown", "pdf")


def coerce_hours(value) -> float:
    """Numeric hours from an int, float or numeric string; anything else is 0"""
    if isinstance(value, bool):
        return 0
    try:
        hours = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(hours) or hours < 0:
        return 0
    return int(hours) if hours.is_integer() else hours


def _text(value) -> str:
    return "" if value is None else str(value)


def _items(requirements: dict, key: str) -> list:
    value = requirements.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def task_hours(requirements: dict) -> float:
    return sum(coerce_hours(task.get("estimatedHours")) for task in _items(requirements, "taskBreakdown"))


def build_statistics(requirements: dict) -> dict:
    functional = _items(requirements, "functionalRequirements")
    non_functional = _items(requirements, "nonFunctionalRequirements")
    frontend = _items(requirements, "frontendRequirements")
    tasks = _items(requirements, "taskBreakdown")

    prioritized = functional + frontend + tasks
    priority_distribution = {
        p: sum(1 for item in prioritized if item.get("priority") == p) for p in PRIORITIES
    }

    tasks_by_role = {}
    for task in tasks:
        role = _text(task.get("role")) or "other"
        tasks_by_role[role] = tasks_by_role.get(role, 0) + 1

    nfr_by_type = {}
    for item in non_functional:
        nfr_type = _text(item.get("type")) or "other"
        nfr_by_type[nfr_type] = nfr_by_type.get(nfr_type, 0) + 1

    return {
        "totalRequirements": len(functional) + len(non_functional) + len(frontend),
        "totalTasks": len(tasks),
        "totalUserStories": len(_items(requirements, "userStories")),
        "totalApiEndpoints": len(_items(requirements, "apiEndpoints")),
        "totalHours": task_hours(requirements),
        "priorityDistribution": priority_distribution,
        "tasksByRole": tasks_by_role,
        "nonFunctionalByType": nfr_by_type,
    }


def build_estimate(requirements: dict, hourly_rate: float = 50) -> dict:
    total_hours = (
        task_hours(requirements)
        + len(_items(requirements, "functionalRequirements")) * HOURS_PER_FUNCTIONAL
        + len(_items(requirements, "frontendRequirements")) * HOURS_PER_FRONTEND
        + len(_items(requirements, "apiEndpoints")) * HOURS_PER_ENDPOINT
    )
    estimated_weeks = math.ceil(total_hours / 40)
    base_cost = total_hours * hourly_rate
    # One developer per four weeks of work, capped at five
    recommended_team_size = math.ceil(estimated_weeks / 4)

    role_hours = {}
    for task in _items(requirements, "taskBreakdown"):
        role = _text(task.get("role")) or "other"
        role_hours[role] = role_hours.get(role, 0) + coerce_hours(task.get("estimatedHours"))

    return {
        "hourlyRate": hourly_rate,
        "totalHours": total_hours,
        "estimatedDays": math.ceil(total_hours / 8),
        "estimatedWeeks": estimated_weeks,
        "estimatedMonths": math.ceil(total_hours / 160),
        "baseCost": base_cost,
        "lowCost": base_cost * 0.8,
        "highCost": base_cost * 1.3,
        "recommendedTeamSize": recommended_team_size,
        "minTeamSize": 1,
        "maxTeamSize": min(recommended_team_size, 5),
        "roleHours": role_hours,
    }


def _metadata(requirements: dict) -> dict:
    metadata = requirements.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def compare_analyses(analyses: list[tuple[str, str, dict]]) -> dict:
    """Side-by-side counts for (id, name, requirements) triples"""
    rows = []
    for analysis_id, name, requirements in analyses:
        hours = task_hours(requirements)
        rows.append({
            "id": analysis_id,
            "name": name,
            "totalRequirements": _metadata(requirements).get("totalRequirements", 0),
            "functionalRequirements": len(_items(requirements, "functionalRequirements")),
            "nonFunctionalRequirements": len(_items(requirements, "nonFunctionalRequirements")),
            "frontendRequirements": len(_items(requirements, "frontendRequirements")),
            "userStories": len(_items(requirements, "userStories")),
            "tasks": len(_items(requirements, "taskBreakdown")),
            "estimatedHours": hours,
            "estimatedDays": math.ceil(hours / 8),
            "apiEndpoints": len(_items(requirements, "apiEndpoints")),
        })
    return {"analyses": rows}


def export_json(requirements: dict) -> str:
    return json.dumps(requirements, indent=2, ensure_ascii=False)


def _criteria(story: dict) -> str:
    criteria = story.get("acceptanceCriteria")
    if not isinstance(criteria, list):
        return _text(criteria)
    return "; ".join(_text(c) for c in criteria)


def export_csv(requirements: dict) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for r in _items(requirements, "functionalRequirements"):
        writer.writerow(["Functional", r.get("title", ""), r.get("description", ""),
                         r.get("priority") or "", "", "", r.get("category") or ""])
    for r in _items(requirements, "frontendRequirements"):
        writer.writerow(["Frontend", r.get("title", ""), r.get("description", ""),
                         r.get("priority") or "", "", "", r.get("component") or ""])
    for t in _items(requirements, "taskBreakdown"):
        writer.writerow(["Task", t.get("title", ""), t.get("description", ""),
                         t.get("priority") or "", t.get("role") or "", t.get("estimatedHours") or "", ""])
    for s in _items(requirements, "userStories"):
        writer.writerow(["User Story", s.get("story", ""), _criteria(s),
                         s.get("priority") or "", "", "", ""])

    return buffer.getvalue()


def export_markdown(requirements: dict) -> str:
    metadata = _metadata(requirements)
    lines = [
        "# Requirements Document",
        "",
        f"**Document:** {metadata.get('documentName', 'Unknown')}",
        f"**Processed:** {metadata.get('processedAt', 'Unknown')}",
        "",
    ]

    if requirements.get("businessRequirementsSummary"):
        lines += ["## Business Requirements Summary", "", _text(requirements["businessRequirementsSummary"]), ""]

    functional = _items(requirements, "functionalRequirements")
    if functional:
        lines += ["## Functional Requirements", ""]
        for idx, r in enumerate(functional, 1):
            lines += [f"### {idx}. {r.get('title', '')}", "", _text(r.get("description")), ""]
            if r.get("priority"):
                lines += [f"**Priority:** {r['priority']}", ""]

    tasks = _items(requirements, "taskBreakdown")
    if tasks:
        lines += ["## Task Breakdown", ""]
        for idx, t in enumerate(tasks, 1):
            lines += [f"### {idx}. {t.get('title', '')}", "", _text(t.get("description")), ""]
            lines.append(f"- **Priority:** {t.get('priority', '')}")
            lines.append(f"- **Role:** {t.get('role', '')}")
            if t.get("estimatedHours"):
                lines.append(f"- **Estimated Hours:** {t['estimatedHours']}")
            lines.append("")

    return "\n".join(lines)


def export_pdf(requirements: dict) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=2 * cm, rightMargin=2 * cm,
                            topMargin=2 * cm, bottomMargin=2 * cm)
    styles = getSampleStyleSheet()
    story = []

    def heading(text, style="Heading2"):
        story.append(Paragraph(escape(text), styles[style]))

    def body(text):
        story.append(Paragraph(escape(str(text)), styles["BodyText"]))

    heading("BRD Requirements Analysis", "Title")
    metadata = _metadata(requirements)
    if metadata:
        body(f"Document: {metadata.get('documentName', '')}")
        body(f"Processed: {metadata.get('processedAt', '')}")
        body(f"Total requirements: {metadata.get('totalRequirements', 0)}")
    story.append(Spacer(1, 0.5 * cm))

    heading("Business Requirements Summary")
    body(requirements.get("businessRequirementsSummary") or "No summary available.")

    sections = (
        ("Functional Requirements", "functionalRequirements", "title", "description"),
        ("Non-Functional Requirements", "nonFunctionalRequirements", "title", "description"),
        ("Frontend Requirements", "frontendRequirements", "title", "description"),
        ("User Stories", "userStories", "id", "story"),
        ("Task Breakdown", "taskBreakdown", "title", "description"),
    )
    for title, key, label_field, text_field in sections:
        items = _items(requirements, key)
        if not items:
            continue
        story.append(PageBreak())
        heading(title)
        for idx, item in enumerate(items, 1):
            heading(f"{idx}. {item.get(label_field, '')}", "Heading4")
            body(item.get(text_field, ""))
            if item.get("priority"):
                body(f"Priority: {item['priority']}")
            if key == "taskBreakdown" and item.get("estimatedHours"):
                body(f"Role: {item.get('role', '')} | Estimated hours: {item['estimatedHours']}")

    endpoints = _items(requirements, "apiEndpoints")
    if endpoints:
        story.append(PageBreak())
        heading("API Endpoints")
        for endpoint in endpoints:
            heading(f"{endpoint.get('method', '')} {endpoint.get('path', '')}", "Heading4")
            body(endpoint.get("description", ""))

    doc.build(story)
    return buffer.getvalue()


def render_export(requirements: dict, fmt: str, basename: str = "requirements") -> tuple[bytes, str, str]:
    """Return (content, media type, filename) for an export format"""
    if fmt == "json":
        return export_json(requirements).encode("utf-8"), "application/json", f"{basename}.json"
    if fmt in CSV_FORMATS:
        return export_csv(requirements).encode("utf-8"), "text/csv", f"{basename}_{fmt}.csv"
    if fmt == "markdown":
        return export_markdown(requirements).encode("utf-8"), "text/markdown", f"{basename}.md"
    if fmt == "pdf":
        return export_pdf(requirements), "application/pdf", f"{basename}.pdf"
    raise ValueError(f"Unsupported export format: {fmt}")
