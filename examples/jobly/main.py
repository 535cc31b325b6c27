"""Jobly example: users, companies, jobs and applications behind token checks.

Data lives in memory and passwords are compared in plain text; both stand in
for the real storage layer.

Run with: JOBLY_SECRET_KEY=change-me uvicorn main:app --reload
"""

from fastapi import APIRouter, HTTPException, Request

from jobly_auth import Authorizer, add_route, create_app, load_settings, route

USERS = {"alice": {"password": "wonderland", "first_name": "Alice", "email": "alice@example.com"}}
COMPANIES = {"acme": {"password": "anvils", "name": "ACME", "email": "hr@acme.test"}}
JOBS: dict[int, dict] = {}
APPLICATIONS: list[dict] = []

settings = load_settings()
authorizer = Authorizer(settings)
router = APIRouter()


def _public(record: dict) -> dict:
    return {k: v for k, v in record.items() if k != "password"}


async def list_users() -> list[dict]:
    """List users."""
    return [{"username": name, **_public(u)} for name, u in USERS.items()]


class patch_user(route):
    """Update your own profile."""

    middleware = [authorizer.require_correct_user]
    tags = ["users"]

    async def handler(username: str, changes: dict) -> dict:
        if username not in USERS:
            raise HTTPException(status_code=404, detail="User not found.")
        USERS[username].update({k: v for k, v in changes.items() if k != "password"})
        return {"username": username, **_public(USERS[username])}


class delete_company(route):
    """Delete your own company."""

    middleware = [authorizer.require_correct_company]
    tags = ["companies"]
    status_code = 200

    async def handler(handle: str) -> dict:
        if COMPANIES.pop(handle, None) is None:
            raise HTTPException(status_code=404, detail="Company not found.")
        return {"message": "Company deleted."}


class post_job(route):
    """Post a job as the logged-in company."""

    middleware = [authorizer.require_company_authorization]
    tags = ["jobs"]

    async def handler(job: dict, request: Request) -> dict:
        job_id = len(JOBS) + 1
        JOBS[job_id] = {**job, "id": job_id, "company": request.state.company}
        return JOBS[job_id]


class apply(route):
    """Apply to a job as the logged-in user."""

    middleware = [authorizer.require_user_authorization]
    tags = ["applications"]

    async def handler(job_id: int, request: Request) -> dict:
        if job_id not in JOBS:
            raise HTTPException(status_code=404, detail="Job not found.")
        application = {"job_id": job_id, "username": request.state.username}
        APPLICATIONS.append(application)
        return application


add_route(router, "/users", "get", list_users, middleware=[authorizer.require_authorization])
add_route(router, "/users/{username}", "patch", patch_user)
add_route(router, "/companies/{handle}", "delete", delete_company)
add_route(router, "/jobs", "post", post_job)
add_route(router, "/jobs/{job_id}/applications", "post", apply)


def check_user(username: str, password: str) -> bool:
    return USERS.get(username, {}).get("password") == password


def check_company(handle: str, password: str) -> bool:
    return COMPANIES.get(handle, {}).get("password") == password


app = create_app(
    settings,
    authenticate_user=check_user,
    authenticate_company=check_company,
    routers=[router],
)
