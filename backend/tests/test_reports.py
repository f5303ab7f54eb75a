"""
Statistics, estimates, comparisons and export rendering
"""
import csv
import io
import json

import pytest

from services.reports import (CSV_HEADER, build_estimate, build_statistics, coerce_hours, compare_analyses,
                              export_csv, export_markdown, render_export)

REQUIREMENTS = {
    "businessRequirementsSummary": "Online ordering for a bakery",
    "functionalRequirements": [
        {"id": "FR-1", "title": "Place order", "description": "Customers place orders", "priority": "high",
         "category": "orders"},
        {"id": "FR-2", "title": "Track order", "description": "Customers track orders", "priority": "medium"},
        {"id": "FR-3", "title": "Refunds", "description": "Staff issue refunds", "priority": "low"},
    ],
    "nonFunctionalRequirements": [
        {"id": "NFR-1", "title": "Fast", "description": "Pages load in 1s", "type": "performance"},
        {"id": "NFR-2", "title": "Secure", "description": "Encrypt card data", "type": "security"},
        {"id": "NFR-3", "title": "TLS", "description": "TLS everywhere", "type": "security"},
    ],
    "frontendRequirements": [
        {"id": "FE-1", "title": "Menu page", "description": "Show the menu, with prices", "priority": "high",
         "component": "Menu"},
    ],
    "userStories": [
        {"id": "US-1", "story": "As a customer, I want to reorder", "acceptanceCriteria": ["One click", "Same items"],
         "priority": "medium"},
    ],
    "taskBreakdown": [
        {"id": "T-1", "title": "Order API", "description": "Build it", "estimatedHours": 24, "priority": "high",
         "role": "backend"},
        {"id": "T-2", "title": "Menu UI", "description": "Build it", "estimatedHours": 16, "priority": "medium",
         "role": "frontend"},
        {"id": "T-3", "title": "Test plan", "description": "Write it", "estimatedHours": 8, "priority": "low",
         "role": "qa"},
    ],
    "apiEndpoints": [
        {"id": "API-1", "method": "POST", "path": "/orders", "description": "Create order"},
        {"id": "API-2", "method": "GET", "path": "/orders/{id}", "description": "Get order"},
    ],
    "metadata": {"documentName": "bakery.pdf", "processedAt": "2026-01-01T00:00:00Z", "totalRequirements": 7},
}


def test_statistics():
    stats = build_statistics(REQUIREMENTS)
    assert stats["totalRequirements"] == 7
    assert stats["totalTasks"] == 3
    assert stats["totalUserStories"] == 1
    assert stats["totalApiEndpoints"] == 2
    assert stats["totalHours"] == 48
    assert stats["priorityDistribution"] == {"high": 3, "medium": 2, "low": 2}
    assert stats["tasksByRole"] == {"backend": 1, "frontend": 1, "qa": 1}
    assert stats["nonFunctionalByType"] == {"performance": 1, "security": 2}


def test_estimate():
    estimate = build_estimate(REQUIREMENTS)
    # 48 task hours + 3 * 8 functional + 1 * 6 frontend + 2 * 12 endpoints
    assert estimate["totalHours"] == 102
    assert estimate["hourlyRate"] == 50
    assert estimate["estimatedDays"] == 13
    assert estimate["estimatedWeeks"] == 3
    assert estimate["estimatedMonths"] == 1
    assert estimate["baseCost"] == 5100
    assert estimate["lowCost"] == pytest.approx(4080)
    assert estimate["highCost"] == pytest.approx(6630)
    assert estimate["recommendedTeamSize"] == 1
    assert estimate["minTeamSize"] == 1
    assert estimate["roleHours"] == {"backend": 24, "frontend": 16, "qa": 8}


def test_estimate_caps_team_size():
    big = {"taskBreakdown": [{"estimatedHours": 2000, "role": "backend"}]}
    estimate = build_estimate(big, hourly_rate=80)
    assert estimate["estimatedWeeks"] == 50
    assert estimate["recommendedTeamSize"] == 13
    assert estimate["maxTeamSize"] == 5


def test_estimate_of_empty_result():
    estimate = build_estimate({})
    assert estimate["totalHours"] == 0
    assert estimate["baseCost"] == 0
    assert estimate["recommendedTeamSize"] == 0


def test_compare():
    rows = compare_analyses([("a", "bakery.pdf", REQUIREMENTS), ("b", "empty.txt", {})])["analyses"]
    assert rows[0] == {
        "id": "a",
        "name": "bakery.pdf",
        "totalRequirements": 7,
        "functionalRequirements": 3,
        "nonFunctionalRequirements": 3,
        "frontendRequirements": 1,
        "userStories": 1,
        "tasks": 3,
        "estimatedHours": 48,
        "estimatedDays": 6,
        "apiEndpoints": 2,
    }
    assert rows[1]["totalRequirements"] == 0
    assert rows[1]["estimatedDays"] == 0


def test_csv_export_rows():
    rows = list(csv.reader(io.StringIO(export_csv(REQUIREMENTS))))
    assert rows[0] == CSV_HEADER
    assert rows[1] == ["Functional", "Place order", "Customers place orders", "high", "", "", "orders"]
    assert rows[4] == ["Frontend", "Menu page", "Show the menu, with prices", "high", "", "", "Menu"]
    assert rows[5] == ["Task", "Order API", "Build it", "high", "backend", "24", ""]
    assert rows[-1] == ["User Story", "As a customer, I want to reorder", "One click; Same items", "medium",
                        "", "", ""]
    assert len(rows) == 1 + 3 + 1 + 3 + 1


def test_markdown_export():
    markdown = export_markdown(REQUIREMENTS)
    assert "**Document:** bakery.pdf" in markdown
    assert "## Business Requirements Summary" in markdown
    assert "### 1. Place order" in markdown
    assert "- **Estimated Hours:** 24" in markdown


def test_render_export():
    content, media_type, filename = render_export(REQUIREMENTS, "json", "bakery")
    assert json.loads(content) == REQUIREMENTS
    assert (media_type, filename) == ("application/json", "bakery.json")

    _, media_type, filename = render_export(REQUIREMENTS, "trello", "bakery")
    assert (media_type, filename) == ("text/csv", "bakery_trello.csv")

    content, media_type, _ = render_export(REQUIREMENTS, "pdf", "bakery")
    assert media_type == "application/pdf"
    assert content.startswith(b"%PDF")

    with pytest.raises(ValueError):
        render_export(REQUIREMENTS, "docx")


def test_coerce_hours():
    assert coerce_hours(8) == 8
    assert coerce_hours("12") == 12
    assert coerce_hours(" 2.5 ") == 2.5
    assert coerce_hours("soon") == 0
    assert coerce_hours(None) == 0
    assert coerce_hours(True) == 0
    assert coerce_hours(-4) == 0
    assert coerce_hours(float("inf")) == 0


def test_reports_tolerate_loosely_shaped_results():
    loose = {
        "businessRequirementsSummary": 17,
        "functionalRequirements": ["Login", {"title": "Logout", "description": None, "priority": "high"}],
        "nonFunctionalRequirements": {"not": "a list"},
        "userStories": [{"story": "As a user, I want out", "acceptanceCriteria": "Signed out"}],
        "taskBreakdown": [{"title": "API", "estimatedHours": "5", "role": ["backend"]}, "Docs"],
        "metadata": "missing",
    }

    stats = build_statistics(loose)
    assert stats["totalRequirements"] == 1
    assert stats["totalHours"] == 5
    assert stats["tasksByRole"] == {"['backend']": 1}

    assert build_estimate(loose)["totalHours"] == 5 + 8
    assert compare_analyses([("x", "loose", loose)])["analyses"][0]["totalRequirements"] == 0

    rows = list(csv.reader(io.StringIO(export_csv(loose))))
    assert rows[-1] == ["User Story", "As a user, I want out", "Signed out", "", "", "", ""]
    assert "**Document:** Unknown" in export_markdown(loose)
    assert render_export(loose, "pdf")[0].startswith(b"%PDF")
