"""FastAPI web application for PeerFix."""

import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from core.compatibility import CompatibilityChecker
from core.constants import PLATFORM_PACKAGE
from core.errors import ManifestError, TemplateDiffError
from core.merge import (
    create_annotated_package_json,
    get_package_json_change_summary,
    merge_package_json_with_analysis,
)
from core.models import DiffFile
from core.parse_node import parse_package_json
from core.registry import NpmRegistryClient
from core.template_diff import TemplateDiffClient, clean_version, get_changelog_url

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PeerFix",
    description="Upgrade React Native dependencies to peer-compatible versions",
    version="0.1.0",
)

# Shared for the process lifetime so registry and template lookups are memoized
registry = NpmRegistryClient()
template_diffs = TemplateDiffClient()


class AnalyzeRequest(BaseModel):
    """Request model for analyzing a package.json."""
    content: str
    target_version: str
    platform_package: str = PLATFORM_PACKAGE
    annotated: bool = False


class ChangeSummaryModel(BaseModel):
    added: list[str]
    removed: list[str]
    updated: list[str]
    unchanged: list[str]


class AnalyzeResponse(BaseModel):
    """Response model for dependency analysis."""
    reports: list[dict]
    upgraded: dict
    diff: str
    summary: ChangeSummaryModel
    has_changes: bool


@app.get("/", response_class=HTMLResponse)
async def home():
    """Serve a short landing page."""
    return get_index_html()


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_dependencies(request: AnalyzeRequest):
    """Analyze dependencies from package.json text."""
    verdicts, merged, summary = await _analyze(request)

    return AnalyzeResponse(
        reports=[verdict.to_dict() for verdict in verdicts],
        upgraded=merged.upgraded.data,
        diff=merged.diff_text,
        summary=ChangeSummaryModel(
            added=summary.added,
            removed=summary.removed,
            updated=summary.updated,
            unchanged=summary.unchanged,
        ),
        has_changes=bool(summary.updated),
    )


@app.post("/api/upload", response_model=AnalyzeResponse)
async def upload_file(
    file: UploadFile = File(...),
    target_version: str = Form(...),
    platform_package: Optional[str] = Form(None),
):
    """Upload and analyze a package.json file."""
    try:
        if not file.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")

        content = await file.read()
        text_content = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be valid UTF-8 text")

    request = AnalyzeRequest(
        content=text_content,
        target_version=target_version,
        platform_package=platform_package or PLATFORM_PACKAGE,
    )
    return await analyze_dependencies(request)


@app.post("/api/download")
async def download_upgraded_file(request: AnalyzeRequest):
    """Download the upgraded package.json, optionally annotated with comments."""
    verdicts, merged, summary = await _analyze(request)

    if not summary.updated:
        raise HTTPException(status_code=400, detail="No changes to download")

    if request.annotated:
        body = create_annotated_package_json(merged.upgraded, verdicts)
        filename = "package.annotated.json"
    else:
        body = merged.upgraded.to_json() + "\n"
        filename = "package.json"

    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/api/template-diff")
async def template_diff(
    from_version: str,
    to_version: str,
    package_name: str = PLATFORM_PACKAGE,
):
    """Template files changed between two React Native versions."""
    try:
        files = await template_diffs.fetch_template_diff(from_version, to_version, package_name)
    except TemplateDiffError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "from_version": from_version,
        "to_version": to_version,
        "changelog_url": get_changelog_url(clean_version(to_version), package_name),
        "files": [_file_to_dict(file) for file in files],
    }


async def _analyze(request: AnalyzeRequest):
    """Parse, analyze, merge and summarize; shared by the analyze endpoints."""
    content = request.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="No content provided")

    try:
        manifest = parse_package_json(content)
    except ManifestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    checker = CompatibilityChecker(registry=registry, platform_package=request.platform_package)
    try:
        verdicts = await checker.analyze_all_dependencies(
            manifest.all_dependencies(), request.target_version
        )
    except Exception:
        logger.exception("Dependency analysis failed")
        raise HTTPException(
            status_code=500, detail="Failed to analyze dependencies. Please try again."
        )

    merged = merge_package_json_with_analysis(
        manifest, verdicts, request.target_version, platform_package=request.platform_package
    )
    summary = get_package_json_change_summary(merged.original, merged.upgraded)
    return verdicts, merged, summary


def _file_to_dict(file: DiffFile) -> dict:
    return {
        "old_path": file.old_path,
        "new_path": file.new_path,
        "type": file.type,
        "is_binary": file.is_binary,
        "additions": file.additions,
        "deletions": file.deletions,
        "hunks": [
            {
                "content": hunk.content,
                "old_start": hunk.old_start,
                "old_lines": hunk.old_lines,
                "new_start": hunk.new_start,
                "new_lines": hunk.new_lines,
                "changes": [
                    {
                        "type": change.type,
                        "content": change.content,
                        "old_line_number": change.old_line_number,
                        "new_line_number": change.new_line_number,
                    }
                    for change in hunk.changes
                ],
            }
            for hunk in file.hunks
        ],
    }


def get_index_html() -> str:
    """Return the landing page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>PeerFix - React Native Dependency Upgrader</title>
    </head>
    <body>
        <h1>PeerFix</h1>
        <p>Upgrade your React Native dependencies to peer-compatible versions.</p>
        <ul>
            <li><code>POST /api/analyze</code> - analyze package.json text</li>
            <li><code>POST /api/upload</code> - analyze an uploaded package.json</li>
            <li><code>POST /api/download</code> - download the upgraded package.json</li>
            <li><code>GET /api/template-diff</code> - template changes between versions</li>
        </ul>
        <p>API docs: <a href="/docs">/docs</a></p>
    </body>
    </html>
    """
