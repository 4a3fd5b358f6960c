from __future__ import annotations

from folio.validate import ValidationIssue, format_location, validate

VALID_SITE = {"lang": "en", "visibility": {"skills": "web"}}
VALID_RESUME = {"name": "Ada Lovelace", "tagline": "Analyst"}
VALID_SKILLS = {"categories": [{"name": "Languages", "skills": [{"name": "Python"}]}]}
VALID_PROJECTS = {"projects": [{"name": "Engine", "description": "Difference engine notes", "start": "1843"}]}


def _fields(issues: list[ValidationIssue], file: str) -> dict[str, str]:
    return {issue.field: issue.reason for issue in issues if issue.file == file}


def test_valid_documents_produce_no_issues() -> None:
    assert validate(VALID_SITE, VALID_RESUME, VALID_SKILLS, VALID_PROJECTS) == []


def test_missing_documents_report_one_root_issue_each() -> None:
    issues = validate(None, None, None, None)

    assert [(issue.file, issue.field) for issue in issues] == [
        ("site.yml", "(root)"),
        ("resume.yml", "(root)"),
        ("skills.yml", "(root)"),
        ("projects.yml", "(root)"),
    ]
    assert all(issue.reason == "must be a YAML mapping" for issue in issues)


def test_all_problems_are_reported_together() -> None:
    issues = validate(
        {"lang": 42},
        {"tagline": ""},
        {"categories": "none"},
        {"projects": [{"name": "", "description": "ok"}]},
    )

    assert _fields(issues, "site.yml") == {"lang": "must be a string"}
    assert _fields(issues, "resume.yml") == {
        "name": "is required",
        "tagline": "must be a non-empty string",
    }
    assert _fields(issues, "skills.yml") == {"categories": "must be an array"}
    assert _fields(issues, "projects.yml") == {
        "projects[0].name": "must be a non-empty string",
        "projects[0].start": "is required",
    }


def test_project_start_must_not_be_null() -> None:
    issues = validate(
        VALID_SITE,
        VALID_RESUME,
        VALID_SKILLS,
        {"projects": [{"name": "Engine", "description": "notes", "start": None}]},
    )

    assert _fields(issues, "projects.yml") == {"projects[0].start": "is required"}


def test_skill_categories_require_skill_lists() -> None:
    issues = validate(VALID_SITE, VALID_RESUME, {"categories": [{"name": "Tools"}]}, VALID_PROJECTS)

    assert _fields(issues, "skills.yml") == {"categories[0].skills": "is required"}


def test_skill_entries_must_be_named_objects() -> None:
    skills = {
        "categories": [
            {"name": "Tools", "skills": ["Docker", {"level": "expert"}, {"name": ""}, {"name": "Go"}]},
        ]
    }

    issues = validate(VALID_SITE, VALID_RESUME, skills, VALID_PROJECTS)

    assert _fields(issues, "skills.yml") == {
        "categories[0].skills[0]": "must be an object",
        "categories[0].skills[1].name": "is required",
        "categories[0].skills[2].name": "must be a non-empty string",
    }


def test_visibility_values_outside_enum_are_rejected() -> None:
    site = {"lang": "en", "visibility": {"skills": "sometimes", "education": False, "blog": "print"}}

    issues = validate(site, VALID_RESUME, VALID_SKILLS, VALID_PROJECTS)

    assert _fields(issues, "site.yml") == {"visibility.skills": "must be one of all, web, print, none"}


def test_document_filename_must_be_a_bare_name() -> None:
    site = {"lang": "en", "documents": {"filename": "cv.pdf", "page_size": "A4"}}

    issues = validate(site, VALID_RESUME, VALID_SKILLS, VALID_PROJECTS)

    assert list(_fields(issues, "site.yml")) == ["documents.filename"]


def test_issue_renders_file_field_and_reason() -> None:
    issue = ValidationIssue(file="resume.yml", field="name", reason="is required")

    assert str(issue) == '"resume.yml" validation failed: name is required'
    assert issue.as_dict() == {"file": "resume.yml", "field": "name", "reason": "is required"}


def test_format_location_renders_list_indexes() -> None:
    assert format_location(("projects", 0, "name")) == "projects[0].name"
    assert format_location(("categories", 2, "skills", 1)) == "categories[2].skills[1]"
    assert format_location(()) == "(root)"
