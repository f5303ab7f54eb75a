import re

FRONTEND_WORDS = ('page', 'screen', 'button', 'form', 'modal', 'dashboard', 'table', 'dropdown', 'ui ')
NFR_TYPES = {
    'performance': ('performance', 'response time', 'latency', 'load'),
    'security': ('security', 'encrypt', 'password', 'authentication', 'authorization'),
    'scalability': ('scalab', 'concurrent users'),
    'usability': ('usability', 'easy to use', 'intuitive'),
    'accessibility': ('accessib', 'wcag', 'screen reader'),
    'maintainability': ('maintainab', 'logging', 'monitoring'),
}
ENDPOINT_PATTERN = re.compile(r'\b(GET|POST|PUT|PATCH|DELETE)\s+(/[\w\-/{}:.]*)', re.IGNORECASE)
STORY_PATTERN = re.compile(r'\bas an? [^,]+?,?\s+i want\b', re.IGNORECASE)
REQUIREMENT_PATTERN = re.compile(r'\b(shall|must|should|needs? to|will allow)\b', re.IGNORECASE)


def _title(line: str, limit: int = 60) -> str:
    title = re.sub(r'^[\s\-*\d.)]+', '', line).strip()
    return title if len(title) <= limit else title[:limit - 3].rstrip() + '...'


def _priority(line: str) -> str:
    lower = line.lower()
    if 'must' in lower or 'critical' in lower or 'shall' in lower:
        return 'high'
    if 'could' in lower or 'nice to have' in lower or 'optional' in lower:
        return 'low'
    return 'medium'


def _nfr_type(lower: str):
    for nfr_type, words in NFR_TYPES.items():
        if any(w in lower for w in words):
            return nfr_type
    return None


def mock_brd_analysis(text: str) -> dict:
    """Generate a deterministic BRD analysis from the document's lines for testing"""
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    functional, non_functional, frontend = [], [], []
    stories, endpoints, tasks = [], [], []

    for line in lines:
        lower = line.lower()

        for method, path in ENDPOINT_PATTERN.findall(line):
            endpoints.append({
                "id": f"API-{len(endpoints) + 1}",
                "method": method.upper(),
                "path": path,
                "description": _title(line, 120),
            })

        if STORY_PATTERN.search(line):
            stories.append({
                "id": f"US-{len(stories) + 1}",
                "story": line,
                "acceptanceCriteria": [],
                "priority": _priority(line),
            })
            continue

        if not REQUIREMENT_PATTERN.search(line):
            continue

        nfr_type = _nfr_type(lower)
        if nfr_type:
            non_functional.append({
                "id": f"NFR-{len(non_functional) + 1}",
                "title": _title(line),
                "description": line,
                "type": nfr_type,
            })
        elif any(w in lower for w in FRONTEND_WORDS):
            req_id = f"FE-{len(frontend) + 1}"
            frontend.append({
                "id": req_id,
                "title": _title(line),
                "description": line,
                "priority": _priority(line),
            })
            tasks.append({
                "id": f"T-{len(tasks) + 1}",
                "title": f"Build {_title(line, 40)}",
                "description": line,
                "estimatedHours": 6,
                "priority": _priority(line),
                "dependencies": [],
                "role": "frontend",
            })
        else:
            req_id = f"FR-{len(functional) + 1}"
            functional.append({
                "id": req_id,
                "title": _title(line),
                "description": line,
                "priority": _priority(line),
                "category": "general",
            })
            tasks.append({
                "id": f"T-{len(tasks) + 1}",
                "title": f"Implement {_title(line, 40)}",
                "description": line,
                "estimatedHours": 8,
                "priority": _priority(line),
                "dependencies": [],
                "role": "backend",
            })

    summary = lines[0] if lines else "No content found in document."

    return {
        "businessRequirementsSummary": summary,
        "functionalRequirements": functional,
        "nonFunctionalRequirements": non_functional,
        "frontendRequirements": frontend,
        "roleRequirements": [],
        "userStories": stories,
        "taskBreakdown": tasks,
        "apiEndpoints": endpoints,
        "recommendations": [
            {
                "id": f"REC-{i + 1}",
                "requirementId": req["id"],
                "role": "qa",
                "title": f"Add acceptance tests for {req['id']}",
                "description": "Cover the requirement with automated acceptance tests.",
                "category": "best-practice",
                "priority": "medium",
            }
            for i, req in enumerate(functional)
        ],
        "businessRules": [],
        "contractStates": [],
        "useCaseFlows": [],
        "features": [],
    }
