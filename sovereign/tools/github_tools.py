"""
GitHub Tools
============

Repository scanning, offered only while the Builder Protocol layer is
active.

GitHub API Notes:
- Uses httpx for async HTTP requests
- Works unauthenticated for public repositories (60 requests/hour)
- Set GITHUB_TOKEN for private repositories and higher rate limits
"""

import httpx

from sovereign.memory.layers import BUILDER_PROTOCOL
from sovereign.tools import Tool, ToolSchema
from sovereign.tools.results import StatPayload, ToolResult
from sovereign.utils.config import get_config, is_github_configured
from sovereign.utils.logger import Logger

logger = Logger("GitHubTools")

GITHUB_API = "https://api.github.com"
REQUEST_TIMEOUT_SECONDS = 10.0


async def _make_github_request(endpoint: str) -> dict | list | None:
    """
    Make a GET request to the GitHub API.

    Args:
        endpoint: API endpoint (e.g., /repos/owner/repo)

    Returns:
        Response JSON, or None on a 4xx/5xx response
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28"
    }
    if is_github_configured():
        headers["Authorization"] = f"Bearer {get_config().github.token}"
    else:
        logger.debug("No GITHUB_TOKEN set, using unauthenticated requests")

    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as client:
        response = await client.get(f"{GITHUB_API}{endpoint}", headers=headers)

    if response.status_code >= 400:
        logger.error(f"GitHub API error: {response.status_code} - {response.text[:200]}")
        return None

    return response.json()


def _normalize_repo(repo: str) -> str:
    """Accept 'owner/repo' or a github.com URL."""
    repo = repo.strip()
    for prefix in ("https://github.com/", "http://github.com/", "github.com/"):
        if repo.startswith(prefix):
            repo = repo[len(prefix):]
    return repo.rstrip("/").removesuffix(".git")


async def _repo_scan(params: dict) -> ToolResult:
    """Collect branch and activity statistics for a repository."""
    repo = _normalize_repo(str(params.get("repo", "")))
    if repo.count("/") != 1 or repo.startswith("/") or repo.endswith("/"):
        return ToolResult.failure(
            "github_repo_scan",
            "Repository must be in 'owner/repo' format",
        )

    try:
        info = await _make_github_request(f"/repos/{repo}")
        if not isinstance(info, dict):
            return ToolResult.failure("github_repo_scan", f"Repository {repo} not found")

        branches = await _make_github_request(f"/repos/{repo}/branches?per_page=100")

    except httpx.HTTPError as e:
        logger.error(f"Error scanning {repo}", e)
        return ToolResult.failure("github_repo_scan", str(e))

    return ToolResult.ok("github_repo_scan", StatPayload(metrics={
        "repo": repo,
        "default_branch": info.get("default_branch"),
        "active_branches": len(branches) if isinstance(branches, list) else 0,
        "open_issues": info.get("open_issues_count", 0),
        "stars": info.get("stargazers_count", 0),
        "last_push": info.get("pushed_at"),
    }))


repo_scan_tool = Tool(
    schema=ToolSchema(
        name="github_repo_scan",
        description="Scan a code repository for branch activity and open issues.",
        parameters={
            "type": "object",
            "properties": {
                "repo": {
                    "type": "string",
                    "description": "Repository in 'owner/repo' format or its GitHub URL."
                }
            },
            "required": ["repo"]
        },
    ),
    handler=_repo_scan,
    layer=BUILDER_PROTOCOL,
)


TOOLS = [repo_scan_tool]
